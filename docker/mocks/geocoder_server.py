"""
Geocoder Mock Server: simulates the Nominatim /search API.
Run: python geocoder_server.py
Listens on port 8001.

Addresses containing "nowhere" return no match; anything else resolves to a
stable point derived from the address text.
"""

import hashlib, json
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import urlparse, parse_qs


class GeocoderHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        url = urlparse(self.path)
        if url.path != "/search":
            self._respond(404, {"error": "Not found"})
            return

        query = parse_qs(url.query).get("q", [""])[0].strip()
        if not query or "nowhere" in query.lower():
            self._respond(200, [])
            return

        digest = int(hashlib.sha256(query.lower().encode()).hexdigest(), 16)
        lat = 25 + (digest % 2000000) / 100000          # 25.0 .. 45.0
        lon = -120 + ((digest >> 32) % 4500000) / 100000  # -120.0 .. -75.0
        self._respond(200, [{
            "lat":          f"{lat:.6f}",
            "lon":          f"{lon:.6f}",
            "display_name": query,
        }])

    def _respond(self, code, data):
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def log_message(self, *_):
        pass


if __name__ == "__main__":
    server = HTTPServer(("0.0.0.0", 8001), GeocoderHandler)
    print("Geocoder Mock running on :8001")
    server.serve_forever()

"""
Vision Mock Server: simulates an OpenAI-compatible /v1/chat/completions API.
Run: python vision_server.py
Listens on port 8002.

Images whose reference contains "blurry" are reported unreadable.
"""

import json, uuid
from http.server import BaseHTTPRequestHandler, HTTPServer


class VisionHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        if self.path != "/v1/chat/completions":
            self._respond(404, {"error": "Not found"})
            return

        length = int(self.headers.get("Content-Length", 0))
        body   = json.loads(self.rfile.read(length) or b"{}")

        image_ref = ""
        for message in body.get("messages", []):
            for part in message.get("content", []):
                if isinstance(part, dict) and part.get("type") == "image_url":
                    image_ref = part["image_url"]["url"]

        blurry = "blurry" in image_ref[:2048].lower()
        analysis = {
            "is_readable":        not blurry,
            "has_signature":      not blurry,
            "issues":             ["Image is too blurry to read"] if blurry else [],
            "recommended_action": "reject" if blurry else "approve",
        }
        self._respond(200, {
            "id":      f"chatcmpl-{uuid.uuid4().hex[:12]}",
            "object":  "chat.completion",
            "model":   body.get("model", "stub-vision"),
            "choices": [{
                "index":         0,
                "message":       {"role": "assistant", "content": json.dumps(analysis)},
                "finish_reason": "stop",
            }],
        })

    def _respond(self, code, data):
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def log_message(self, *_):
        pass


if __name__ == "__main__":
    server = HTTPServer(("0.0.0.0", 8002), VisionHandler)
    print("Vision Mock running on :8002")
    server.serve_forever()

"""
External collaborators used to enrich the docket workflow.
GeocodeResolver: address → coordinates over a Nominatim-style /search API.
PodAnalyzer: POD image review over an OpenAI-compatible /chat/completions API.
Neither is authoritative: callers treat every failure as "no enrichment".
"""

import base64
import hashlib
import json
import logging
import mimetypes
import threading
import time
from decimal import Decimal

import requests
from django.conf import settings
from django.core.cache import cache as default_cache
from django.core.files.storage import default_storage

logger = logging.getLogger("docketflow.integrations")

COORD_QUANT = Decimal("0.000001")


class RateLimiter:
    """
    Serialises callers so that consecutive calls start at least `min_interval` seconds apart.
    The clock and sleep functions are injectable so tests never wait.
    """

    def __init__(self, min_interval=1.0, clock=time.monotonic, sleep=time.sleep):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_call = None

    def wait(self):
        with self._lock:
            now = self._clock()
            if self._last_call is not None:
                gap = self.min_interval - (now - self._last_call)
                if gap > 0:
                    self._sleep(gap)
                    now = self._clock()
            self._last_call = now


class GeocodeResolver:
    """
    Best-effort geocoding with a permanent cache.
    Addresses the service answered with no match are cached as UNRESOLVED;
    transport errors are not cached so a later booking may retry.
    """

    UNRESOLVED = "unresolved"
    CACHE_PREFIX = "geocode:"

    def __init__(self, base_url=None, user_agent=None, rate_limiter=None, cache=None,
                 enabled=None, timeout=None):
        self.base_url = base_url
        self.user_agent = user_agent
        self.enabled = enabled
        self.timeout = timeout
        self.cache = cache or default_cache
        self.rate_limiter = rate_limiter or RateLimiter(
            min_interval=getattr(settings, "GEOCODER_MIN_INTERVAL_SECONDS", 1.0),
        )

    @staticmethod
    def normalize(address: str) -> str:
        return " ".join((address or "").lower().split())

    def cache_key(self, address: str) -> str:
        digest = hashlib.md5(self.normalize(address).encode("utf-8")).hexdigest()
        return f"{self.CACHE_PREFIX}{digest}"

    def resolve(self, address: str):
        """Return (lat, lng) as Decimals, or None when the address cannot be placed."""
        normalized = self.normalize(address)
        if not normalized:
            return None

        key = self.cache_key(normalized)
        cached = self.cache.get(key)
        if cached == self.UNRESOLVED:
            return None
        if cached:
            return Decimal(cached[0]), Decimal(cached[1])

        enabled = settings.GEOCODER_ENABLED if self.enabled is None else self.enabled
        if not enabled:
            return None

        self.rate_limiter.wait()
        try:
            resp = requests.get(
                f"{(self.base_url or settings.GEOCODER_BASE_URL).rstrip('/')}/search",
                params={"q": address, "format": "json", "limit": 1},
                headers={"User-Agent": self.user_agent or settings.GEOCODER_USER_AGENT},
                timeout=self.timeout or settings.GEOCODER_TIMEOUT_SECONDS,
            )
            resp.raise_for_status()
            results = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Geocode lookup failed for %r: %s", normalized, exc)
            return None

        if not results:
            logger.info("Geocoder has no match for %r", normalized)
            self.cache.set(key, self.UNRESOLVED, timeout=None)
            return None

        try:
            lat = Decimal(str(results[0]["lat"])).quantize(COORD_QUANT)
            lng = Decimal(str(results[0]["lon"])).quantize(COORD_QUANT)
        except (KeyError, IndexError, TypeError, ArithmeticError) as exc:
            logger.warning("Unexpected geocoder payload for %r: %s", normalized, exc)
            return None

        self.cache.set(key, [str(lat), str(lng)], timeout=None)
        logger.info("Geocoded %r to %s,%s", normalized, lat, lng)
        return lat, lng


class PodAnalysisError(Exception):
    """Raised when the vision model could not produce a usable analysis."""


class PodAnalyzer:
    """
    Asks a vision model whether a POD image is readable, signed and plausible.
    The result only pre-fills the human review; it never changes POD status.
    """

    PROMPT = (
        "Analyze this Proof of Delivery (POD) document. Check if it is readable, "
        "if it has a signature, and if it looks valid. Respond with a JSON object with "
        "the fields is_readable (boolean), has_signature (boolean), issues (list of strings) "
        "and recommended_action ('approve' or 'reject')."
    )
    ACTIONS = ("approve", "reject")

    def __init__(self, base_url=None, api_key=None, model=None, timeout=None, storage=None):
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.storage = storage or default_storage

    def analyze(self, image_url: str) -> dict:
        api_key = self.api_key if self.api_key is not None else settings.POD_ANALYZER_API_KEY
        if not api_key:
            raise PodAnalysisError("POD analyzer is not configured")

        payload = {
            "model": self.model or settings.POD_ANALYZER_MODEL,
            "messages": [{
                "role": "user",
                "content": [
                    {"type": "text", "text": self.PROMPT},
                    {"type": "image_url", "image_url": {"url": self.image_reference(image_url)}},
                ],
            }],
            "response_format": {"type": "json_object"},
            "max_tokens": 500,
        }
        try:
            resp = requests.post(
                f"{(self.base_url or settings.POD_ANALYZER_BASE_URL).rstrip('/')}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self.timeout or settings.POD_ANALYZER_TIMEOUT_SECONDS,
            )
            resp.raise_for_status()
            content = resp.json()["choices"][0]["message"]["content"]
            raw = json.loads(content or "{}")
        except requests.RequestException as exc:
            raise PodAnalysisError(f"Vision request failed: {exc}") from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise PodAnalysisError(f"Unreadable vision response: {exc}") from exc

        if not isinstance(raw, dict):
            raise PodAnalysisError("Vision response is not a JSON object")
        return self.normalize(raw)

    def image_reference(self, image_url: str) -> str:
        """Locally stored uploads are inlined as a data URI; anything else is passed through."""
        media_url = settings.MEDIA_URL
        if not media_url or not image_url.startswith(media_url):
            return image_url
        name = image_url[len(media_url):]
        with self.storage.open(name, "rb") as fh:
            encoded = base64.b64encode(fh.read()).decode("ascii")
        mime = mimetypes.guess_type(name)[0] or "image/jpeg"
        return f"data:{mime};base64,{encoded}"

    @classmethod
    def normalize(cls, raw: dict) -> dict:
        # Accept the camelCase keys some models insist on returning
        def pick(snake, camel, default=None):
            return raw.get(snake, raw.get(camel, default))

        action = str(pick("recommended_action", "recommendedAction", "")).lower()
        issues = pick("issues", "issues", [])
        if isinstance(issues, str):
            issues = [issues]
        return {
            "is_readable":        bool(pick("is_readable", "isReadable", False)),
            "has_signature":      bool(pick("has_signature", "hasSignature", False)),
            "issues":             [str(i) for i in (issues or [])],
            "recommended_action": action if action in cls.ACTIONS else "reject",
            "simulated":          False,
        }

    @staticmethod
    def fallback(reason: str) -> dict:
        """Stand-in analysis stored when the real one failed; flagged so reviewers can tell."""
        return {
            "is_readable":        True,
            "has_signature":      True,
            "issues":             ["Simulated analysis: no issues found (real analysis failed)"],
            "recommended_action": "approve",
            "simulated":          True,
            "failure_reason":     reason,
        }

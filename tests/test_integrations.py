"""
DocketFlow Collaborator Tests
==============================
Covers: geocode rate limiting & caching | POD analyzer request/response handling |
        error body flattening | tracker geometry
"""

import json
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests
from django.core.cache import cache
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from apps.integrations.connectors import (
    GeocodeResolver, PodAnalysisError, PodAnalyzer, RateLimiter,
)


def fake_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


# ═══════════════════════════════════════════════════════════════════════════════
# RATE LIMITER
# ═══════════════════════════════════════════════════════════════════════════════

class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestRateLimiter:

    def test_first_call_does_not_wait(self):
        clock = FakeClock()
        RateLimiter(1.0, clock=clock, sleep=clock.sleep).wait()
        assert clock.sleeps == []

    def test_back_to_back_calls_are_spaced(self):
        clock = FakeClock()
        limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)
        limiter.wait()
        clock.now += 0.25
        limiter.wait()
        assert clock.sleeps == [pytest.approx(0.75)]

    def test_slow_callers_are_not_delayed(self):
        clock = FakeClock()
        limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)
        limiter.wait()
        clock.now += 3
        limiter.wait()
        assert clock.sleeps == []


# ═══════════════════════════════════════════════════════════════════════════════
# GEOCODER
# ═══════════════════════════════════════════════════════════════════════════════

class TestGeocodeResolver:

    def setup_method(self):
        cache.clear()
        self.limiter = MagicMock()
        self.resolver = GeocodeResolver(
            base_url="http://geo.test", user_agent="tests", rate_limiter=self.limiter,
            enabled=True, timeout=1,
        )

    @patch("apps.integrations.connectors.requests.get")
    def test_resolves_and_caches(self, mock_get):
        mock_get.return_value = fake_response([{"lat": "40.7128", "lon": "-74.0060"}])
        assert self.resolver.resolve("456 Port Rd, NJ") == (Decimal("40.712800"), Decimal("-74.006000"))
        # Same address, different case and spacing: served from cache
        assert self.resolver.resolve("  456 port   rd, nj ") == (Decimal("40.712800"), Decimal("-74.006000"))
        assert mock_get.call_count == 1
        assert self.limiter.wait.call_count == 1
        _, kwargs = mock_get.call_args
        assert kwargs["params"]["format"] == "json"
        assert kwargs["headers"]["User-Agent"] == "tests"

    @patch("apps.integrations.connectors.requests.get")
    def test_no_match_is_cached_as_unresolved(self, mock_get):
        mock_get.return_value = fake_response([])
        assert self.resolver.resolve("Nowhere Lane") is None
        assert self.resolver.resolve("Nowhere Lane") is None
        assert mock_get.call_count == 1
        assert cache.get(self.resolver.cache_key("nowhere lane")) == GeocodeResolver.UNRESOLVED

    @patch("apps.integrations.connectors.requests.get")
    def test_transport_errors_are_not_cached(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("offline")
        assert self.resolver.resolve("1 Main St") is None
        assert self.resolver.resolve("1 Main St") is None
        assert mock_get.call_count == 2

    @patch("apps.integrations.connectors.requests.get")
    def test_disabled_resolver_makes_no_calls(self, mock_get):
        resolver = GeocodeResolver(rate_limiter=self.limiter, enabled=False)
        assert resolver.resolve("1 Main St") is None
        mock_get.assert_not_called()

    def test_blank_address_is_unresolved(self):
        assert self.resolver.resolve("   ") is None
        self.limiter.wait.assert_not_called()


# ═══════════════════════════════════════════════════════════════════════════════
# POD ANALYZER
# ═══════════════════════════════════════════════════════════════════════════════

class TestPodAnalyzer:

    def completion(self, content):
        return fake_response({"choices": [{"message": {"content": json.dumps(content)}}]})

    def test_unconfigured_analyzer_raises(self):
        with pytest.raises(PodAnalysisError):
            PodAnalyzer(api_key="").analyze("https://example.com/pod.jpg")

    @patch("apps.integrations.connectors.requests.post")
    def test_response_is_normalized(self, mock_post):
        mock_post.return_value = self.completion({
            "isReadable": True, "hasSignature": True, "issues": [], "recommendedAction": "APPROVE",
        })
        result = PodAnalyzer(base_url="http://ai.test/v1", api_key="k", model="m").analyze("https://x/pod.jpg")
        assert result == {
            "is_readable": True, "has_signature": True, "issues": [],
            "recommended_action": "approve", "simulated": False,
        }
        args, kwargs = mock_post.call_args
        assert args[0] == "http://ai.test/v1/chat/completions"
        assert kwargs["json"]["response_format"] == {"type": "json_object"}
        assert kwargs["headers"]["Authorization"] == "Bearer k"

    @patch("apps.integrations.connectors.requests.post")
    def test_transport_error_raises_analysis_error(self, mock_post):
        mock_post.side_effect = requests.Timeout("slow")
        with pytest.raises(PodAnalysisError):
            PodAnalyzer(api_key="k").analyze("https://x/pod.jpg")

    @patch("apps.integrations.connectors.requests.post")
    def test_garbage_content_raises_analysis_error(self, mock_post):
        mock_post.return_value = fake_response({"choices": [{"message": {"content": "not json"}}]})
        with pytest.raises(PodAnalysisError):
            PodAnalyzer(api_key="k").analyze("https://x/pod.jpg")

    def test_local_upload_is_inlined(self):
        name = default_storage.save("pods/inline-test.png", ContentFile(b"\x89PNG fake"))
        ref = PodAnalyzer(api_key="k").image_reference(default_storage.url(name))
        assert ref.startswith("data:image/png;base64,")

    def test_remote_url_passes_through(self):
        assert PodAnalyzer(api_key="k").image_reference("https://cdn/x.jpg") == "https://cdn/x.jpg"

    def test_fallback_is_flagged(self):
        result = PodAnalyzer.fallback("boom")
        assert result["simulated"] is True
        assert result["failure_reason"] == "boom"


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR BODY
# ═══════════════════════════════════════════════════════════════════════════════

class TestFirstError:

    def test_first_field_wins(self):
        from docketflow.exceptions import first_error
        detail = {"docket_number": ["This field is required."], "sender_name": ["Bad."]}
        assert first_error(detail) == ("docket_number", "This field is required.")

    def test_nested_list_errors_get_a_path(self):
        from docketflow.exceptions import first_error
        detail = {"items": [{}, {"weight": ["A valid number is required."]}]}
        assert first_error(detail) == ("items.1.weight", "A valid number is required.")

    def test_detail_has_no_field(self):
        from docketflow.exceptions import first_error
        assert first_error({"detail": "Docket not found."}) == (None, "Docket not found.")


# ═══════════════════════════════════════════════════════════════════════════════
# TRACKER GEOMETRY
# ═══════════════════════════════════════════════════════════════════════════════

class TestHaversine:

    def test_same_point_is_zero(self):
        from apps.tracking.views import haversine_km
        assert haversine_km(40.7, -74.0, 40.7, -74.0) == pytest.approx(0.0)

    def test_known_distance(self):
        from apps.tracking.views import haversine_km
        # Manhattan to Brooklyn sample points from the demo data (~6.3 km)
        assert haversine_km(40.7306, -73.9352, 40.7128, -74.0060) == pytest.approx(6.3, abs=0.2)

"""Tests for provider parameter builders."""

import pytest

from editor_metrics import config
from editor_metrics.exceptions import UnknownProviderError
from editor_metrics.providers import get_builder, get_endpoint, google, matomo, parse_provider
from editor_metrics.transport import encode_query
from editor_metrics.types import MetricsEvent, Provider

CLIENT_ID = "3f2c1e9a-7b4d-5c8e-9f10-2a3b4c5d6e7f"


class TestGoogle:
    def test_event_hit(self):
        event = MetricsEvent(category="editor", action="save", label="python", value=3)
        params = google.build_params(event, tracking_id="UA-1234-1", client_id=CLIENT_ID)

        assert params["v"] == 1
        assert params["tid"] == "UA-1234-1"
        assert params["cid"] == CLIENT_ID
        assert params["t"] == "event"
        assert params["ec"] == "editor"
        assert params["ea"] == "save"
        assert params["el"] == "python"
        assert params["ev"] == 3
        assert params["aip"] == 1
        assert "z" not in params

    def test_optional_context(self):
        event = MetricsEvent(category="editor", action="save")
        params = google.build_params(
            event,
            tracking_id="UA-1234-1",
            client_id=CLIENT_ID,
            user_agent="Atom v1.60.0 (stable)",
            ip="10.0.0.1",
            app_name="Atom",
            app_version="1.60.0",
            viewport="1280x800",
        )
        assert params["ua"] == "Atom v1.60.0 (stable)"
        assert params["uip"] == "10.0.0.1"
        assert params["an"] == "Atom"
        assert params["av"] == "1.60.0"
        assert params["vp"] == "1280x800"

    def test_unset_fields_are_not_encoded(self):
        event = MetricsEvent(category="editor", action="save")
        query = encode_query(google.build_params(event, tracking_id="UA-1", client_id=CLIENT_ID))
        assert "el=" not in query
        assert "ev=" not in query
        assert "ec=editor" in query
        assert "ea=save" in query

    def test_cache_buster(self):
        event = MetricsEvent(category="editor", action="save")
        params = google.build_params(event, tracking_id="UA-1", client_id=CLIENT_ID, cache_buster=True)
        assert isinstance(params["z"], int)
        assert params["z"] > 0


class TestMatomo:
    def test_event_hit(self):
        event = MetricsEvent(category="editor", action="save", label="python", value=1.5)
        params = matomo.build_params(event, site_id="7", client_id=CLIENT_ID)

        assert params["idsite"] == "7"
        assert params["rec"] == 1
        assert params["apiv"] == 1
        assert params["_id"] == "3f2c1e9a7b4d5c8e"
        assert params["e_c"] == "editor"
        assert params["e_a"] == "save"
        assert params["e_n"] == "python"
        assert params["e_v"] == 1.5
        assert params["send_image"] == 0
        assert "rand" not in params

    def test_visitor_id_is_16_hex_chars(self):
        assert matomo.visitor_id(CLIENT_ID.upper()) == "3f2c1e9a7b4d5c8e"
        assert len(matomo.visitor_id(CLIENT_ID)) == 16

    def test_context(self):
        event = MetricsEvent(category="editor", action="save")
        params = matomo.build_params(
            event,
            site_id="7",
            client_id=CLIENT_ID,
            user_agent="Atom v1.60.0 (stable)",
            ip="::1",
            resolution="1280x800",
            cache_buster=True,
        )
        assert params["ua"] == "Atom v1.60.0 (stable)"
        assert params["cip"] == "::1"
        assert params["res"] == "1280x800"
        assert isinstance(params["rand"], int)


class TestRegistry:
    def test_parse_provider(self):
        assert parse_provider("google") is Provider.GOOGLE
        assert parse_provider(" Matomo ") is Provider.MATOMO
        assert parse_provider(Provider.GOOGLE) is Provider.GOOGLE

    def test_unknown_provider(self):
        with pytest.raises(UnknownProviderError, match="mixpanel"):
            parse_provider("mixpanel")

    def test_unknown_provider_is_value_error(self):
        with pytest.raises(ValueError):
            get_builder("mixpanel")

    def test_get_builder(self):
        assert get_builder("google") is google.build_params
        assert get_builder(Provider.MATOMO) is matomo.build_params

    def test_get_endpoint_reads_config(self, monkeypatch):
        monkeypatch.setattr(config, "MATOMO_ENDPOINT", "https://stats.example.com/matomo.php")
        assert get_endpoint("matomo") == "https://stats.example.com/matomo.php"
        assert get_endpoint("google") == "https://www.google-analytics.com/collect"

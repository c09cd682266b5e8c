"""Endpoint templates and absolute URL helpers."""

import pytest

from eduportal.config import settings
from eduportal.core.endpoints import ENDPOINTS, api_url, build_endpoint, media_url
from eduportal.services.list_views import VIEWS, get_view



def test_build_endpoint_fills_placeholders():
    assert build_endpoint(ENDPOINTS["library"]["resource_by_id"], id=5) == "library/resource/5/"
    assert build_endpoint("/courses/{course_id}/attendance", course_id=42) == "/courses/42/attendance"


def test_api_url_is_rooted_at_api_base():
    assert api_url(ENDPOINTS["auth"]["refresh"]) == settings.api_root + "auth/token/refresh/"


def test_media_url():
    assert media_url(None) == ""
    assert media_url("https://cdn.example.com/a.pdf") == "https://cdn.example.com/a.pdf"
    assert media_url("media/a.pdf") == settings.media_base_url + "/media/a.pdf"
    assert not settings.media_base_url.endswith("/api")


def test_settings_api_root_has_one_trailing_slash(monkeypatch):
    monkeypatch.setattr(settings, "api_base_url", "https://portal.example.com/api//")
    assert settings.api_root == "https://portal.example.com/api/"
    assert settings.media_base_url == "https://portal.example.com"


def test_get_view():
    assert get_view("attendance") is VIEWS["attendance"]
    with pytest.raises(KeyError):
        get_view("nope")

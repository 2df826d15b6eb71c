"""
FETCHER TESTS - HTTP behaviour with a mocked requests.Session.
"""

from unittest.mock import MagicMock, PropertyMock

import pytest
import requests

from sitediff.config import DEFAULT_USER_AGENT
from sitediff.exceptions import FetchError
from sitediff.sitemap_fetcher import SitemapFetcher


def make_response(status_code=200, content=b"<urlset/>"):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = content
    return response


def make_fetcher(config=None, response=None, error=None):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response or make_response()
    return SitemapFetcher(config=config, session=session), session


# =============================================================================
# 1. CONFIGURATION
# =============================================================================

def test_user_agent_header_from_config():
    fetcher, session = make_fetcher(config={"user_agent": "TestBot/1.0"})
    assert session.headers["User-Agent"] == "TestBot/1.0"
    assert fetcher.user_agent == "TestBot/1.0"


def test_blank_user_agent_falls_back_to_default():
    fetcher, session = make_fetcher(config={"user_agent": "  "})
    assert fetcher.user_agent == DEFAULT_USER_AGENT
    assert session.headers["User-Agent"] == DEFAULT_USER_AGENT


def test_default_timeout_is_none():
    fetcher, session = make_fetcher()
    fetcher.fetch_sitemap_xml("https://example.com/sitemap.xml")
    session.get.assert_called_once_with("https://example.com/sitemap.xml", timeout=None)


def test_timeout_from_config_and_override():
    fetcher, session = make_fetcher(config={"timeout": 12})
    fetcher.fetch_sitemap_xml("https://example.com/a.xml")
    fetcher.fetch_sitemap_xml("https://example.com/b.xml", timeout=3)
    assert session.get.call_args_list[0].kwargs["timeout"] == 12
    assert session.get.call_args_list[1].kwargs["timeout"] == 3


def test_builds_real_session_when_none_given():
    fetcher = SitemapFetcher(config={"user_agent": "TestBot/1.0"})
    try:
        assert isinstance(fetcher.session, requests.Session)
        assert fetcher.session.headers["User-Agent"] == "TestBot/1.0"
    finally:
        fetcher.close()


# =============================================================================
# 2. RESPONSES
# =============================================================================

def test_returns_body_bytes():
    fetcher, _ = make_fetcher(response=make_response(content=b"<urlset><url><loc>/x</loc></url></urlset>"))
    assert fetcher.fetch_sitemap_xml("https://example.com/sitemap.xml") == b"<urlset><url><loc>/x</loc></url></urlset>"


def test_non_success_status_still_returns_body():
    fetcher, _ = make_fetcher(response=make_response(status_code=404, content=b"<html>Not found</html>"))
    assert fetcher.fetch_sitemap_xml("https://example.com/missing.xml") == b"<html>Not found</html>"


# =============================================================================
# 3. TRANSPORT FAILURES
# =============================================================================

@pytest.mark.parametrize("error", [
    requests.exceptions.ConnectionError("refused"),
    requests.exceptions.Timeout("slow"),
    requests.exceptions.MissingSchema("no scheme"),
    requests.exceptions.InvalidURL("bad url"),
])
def test_transport_errors_raise_fetch_error(error):
    fetcher, _ = make_fetcher(error=error)
    with pytest.raises(FetchError) as exc_info:
        fetcher.fetch_sitemap_xml("https://example.com/sitemap.xml")
    assert exc_info.value.url == "https://example.com/sitemap.xml"
    assert exc_info.value.__cause__ is error


def test_body_read_failure_raises_fetch_error():
    response = MagicMock(spec=requests.Response)
    response.status_code = 200
    response.ok = True
    type(response).content = PropertyMock(side_effect=requests.exceptions.ChunkedEncodingError("cut off"))
    fetcher, _ = make_fetcher(response=response)
    with pytest.raises(FetchError):
        fetcher.fetch_sitemap_xml("https://example.com/sitemap.xml")


def test_close_closes_session():
    fetcher, session = make_fetcher()
    fetcher.close()
    session.close.assert_called_once()

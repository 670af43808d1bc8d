"""Tests for the schedule page fetch client."""
import httpx
import pytest

from bbnotify.config import Config
from bbnotify.errors import FetchError
from bbnotify.fetch.client import FetchClient

URL = "http://www.tokyoipo.com/ipo/schedule.php"


def make_client(handler):
    return FetchClient(Config(), client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_fetch_page_returns_raw_bytes():
    """Test the body is returned undecoded."""
    body = "<html>テスト</html>".encode("euc_jp")

    with make_client(lambda request: httpx.Response(200, content=body)) as client:
        assert client.fetch_page(URL) == body


def test_fetch_page_http_error():
    """Test an error status raises FetchError."""
    client = make_client(lambda request: httpx.Response(503))

    with pytest.raises(FetchError, match="503"):
        client.fetch_page(URL)


def test_fetch_page_network_error():
    """Test transport failures raise FetchError."""
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(FetchError):
        make_client(handler).fetch_page(URL)

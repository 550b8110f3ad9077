from unittest.mock import patch

import pytest
import requests

from gitle.network import DEFAULT_PROBE_URL, is_online


@pytest.mark.short
def test_offline_mode_skips_probe():
    with patch("gitle.network.requests.head") as head:
        assert is_online(offline=True) is False
    head.assert_not_called()


@pytest.mark.short
def test_reachable():
    with patch("gitle.network.requests.head") as head:
        assert is_online() is True
    head.assert_called_once_with(DEFAULT_PROBE_URL, timeout=5.0, allow_redirects=True)


@pytest.mark.short
@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("refused"),
        requests.Timeout("slow"),
        requests.exceptions.SSLError("tls"),
    ],
)
def test_unreachable(error):
    with patch("gitle.network.requests.head", side_effect=error):
        assert is_online(url="https://example.com", timeout=1) is False

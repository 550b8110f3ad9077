"""Best-effort connectivity probe."""

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_PROBE_URL = "https://github.com"
DEFAULT_PROBE_TIMEOUT = 5.0


def is_online(
    offline: bool = False,
    url: str = DEFAULT_PROBE_URL,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> bool:
    """
    Check whether outbound network access is available.

    Returns False right away when `offline` is set. Any failure (DNS,
    refused connection, timeout, TLS) counts as offline.
    """
    if offline:
        return False

    try:
        requests.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        logger.debug(f"Connectivity probe to {url} failed: {e}")
        return False

    return True

"""Minimal blocking JSON-over-HTTP helpers (urllib)."""

import http.client
import json
import logging
import urllib.parse
import urllib.request
from typing import Any, Optional

logger = logging.getLogger(__name__)

USER_AGENT = "snowbird/0.3"
DEFAULT_TIMEOUT = 10.0

# What a request can raise, truncated HTTP responses included.
REQUEST_ERRORS = (OSError, http.client.HTTPException, ValueError)


def build_url(url: str, params: Optional[dict] = None) -> str:
    if not params:
        return url
    return f"{url}?{urllib.parse.urlencode(params)}"


def get_json(
    url: str,
    params: Optional[dict] = None,
    headers: Optional[dict] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """GET *url* and decode the JSON body.

    Raises one of REQUEST_ERRORS on failure.
    """
    req = urllib.request.Request(
        build_url(url, params),
        headers={"Accept": "application/json", "User-Agent": USER_AGENT, **(headers or {})},
        method="GET",
    )
    logger.debug("GET %s", url)
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return json.loads(resp.read().decode("utf-8"))


def post_form(url: str, data: dict, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """POST an url-encoded form and decode the JSON reply."""
    req = urllib.request.Request(
        url,
        data=urllib.parse.urlencode(data).encode("utf-8"),
        headers={
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        },
        method="POST",
    )
    logger.debug("POST %s", url)
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return json.loads(resp.read().decode("utf-8"))

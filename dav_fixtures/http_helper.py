import logging
import re
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import requests

from .config import OCS_ROOT, load_settings

logger = logging.getLogger(__name__)

FORM_URL_ENCODED = "application/x-www-form-urlencoded"

# Characters encodeURIComponent leaves alone besides the unreserved set.
_URI_COMPONENT_SAFE = "!*'()"

_DUPLICATE_SLASHES = re.compile(r"([^:])/{2,}")


class UnexpectedStatusError(Exception):
    """Raised when a checked request returns a different status code."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{message} (status {status_code})")
        self.status_code = status_code
        self.message = message


def get_provider_base_url() -> str:
    return load_settings().provider_base_url


def encode_uri_path(path: str) -> str:
    """Percent-encode every segment of ``path``, keeping the separators."""
    return "/".join(quote(seg, safe=_URI_COMPONENT_SAFE) for seg in str(path).split("/"))


def sanitize_url(url: str) -> str:
    """Collapse runs of slashes, leaving the ``scheme://`` prefix intact."""
    return _DUPLICATE_SLASHES.sub(r"\1/", url)


def full_url(path: str) -> str:
    return sanitize_url(get_provider_base_url() + path)


def _auth(user: Optional[str], password: Optional[str]) -> Optional[Tuple[str, str]]:
    # Public link requests go out without credentials.
    if user is None:
        return None
    return (user, password or "")


def send_request(
    url: str,
    method: str,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    params: Optional[Dict[str, str]] = None,
) -> requests.Response:
    logger.debug("[send_request] method:%s; url:%s; user:%s", method, url, user)
    return requests.request(
        method,
        url,
        data=body,
        headers=headers or {},
        auth=_auth(user, password),
        params=params,
    )


def get(url, headers=None, user=None, password=None):
    return send_request(url, "GET", headers=headers, user=user, password=password)


def post(url, body=None, headers=None, user=None, password=None):
    return send_request(url, "POST", body, headers, user, password)


def put(url, body=None, headers=None, user=None, password=None):
    return send_request(url, "PUT", body, headers, user, password)


def delete(url, headers=None, user=None, password=None):
    return send_request(url, "DELETE", headers=headers, user=user, password=password)


def mkcol(url, headers=None, user=None, password=None):
    return send_request(url, "MKCOL", headers=headers, user=user, password=password)


def propfind(url, body=None, headers=None, user=None, password=None):
    return send_request(url, "PROPFIND", body, headers, user, password)


def proppatch(url, body=None, headers=None, user=None, password=None):
    return send_request(url, "PROPPATCH", body, headers, user, password)


def _ocs_headers(content_type: Optional[str] = None) -> Dict[str, str]:
    headers = {"OCS-APIREQUEST": "true"}
    if content_type:
        headers["Content-Type"] = content_type
    return headers


def get_ocs(endpoint, user=None, password=None):
    """GET an OCS endpoint, relative to ``/ocs/v2.php``, asking for JSON."""
    return send_request(
        full_url(OCS_ROOT + endpoint),
        "GET",
        headers=_ocs_headers(),
        user=user,
        password=password,
        params={"format": "json"},
    )


def post_ocs(endpoint, body=None, content_type=FORM_URL_ENCODED, user=None, password=None):
    """POST to an OCS endpoint, relative to ``/ocs/v2.php``, asking for JSON."""
    return send_request(
        full_url(OCS_ROOT + endpoint),
        "POST",
        body,
        headers=_ocs_headers(content_type),
        user=user,
        password=password,
        params={"format": "json"},
    )


def assert_status(response: requests.Response, expected_code: int, message: str) -> None:
    """Raise UnexpectedStatusError unless ``response`` has ``expected_code``."""
    if response.status_code != expected_code:
        logger.error(
            "[assert_status] %s; expected:%s; got:%s", message, expected_code, response.status_code
        )
        raise UnexpectedStatusError(response.status_code, message)

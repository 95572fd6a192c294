from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

import requests

from . import http_helper as request
from .config import PUBLIC_FILES_ENDPOINT, SHARES_ENDPOINT, FixtureConfig
from .http_helper import FORM_URL_ENCODED, encode_uri_path, full_url

# Sent as lowercase strings whenever they carry a value, even a falsy one.
NORMALIZED_KEYS = ("publicUpload", "shareType")


@dataclass
class ShareIdToken:
    share_id: Optional[str]
    share_token: Optional[str]


def validate_params(data: Optional[Mapping[str, Any]]) -> List[Tuple[str, str]]:
    """Turn share parameters into ordered form fields.

    ``publicUpload`` and ``shareType`` are lowercased and dropped only when
    None or empty; every other key is dropped when falsy.
    """
    params: List[Tuple[str, str]] = []
    if not data:
        return params
    for key, value in data.items():
        if key in NORMALIZED_KEYS:
            if value is not None and value != "":
                params.append((key, str(value).lower()))
        elif value:
            params.append((key, value))
    return params


def to_form_url_encoded(obj: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not obj:
        return None
    pairs = []
    for key, value in obj.items():
        if key == "publicUpload":
            value = str(value).lower()
        pairs.append((key, value))
    return urlencode(pairs)


def share_resource(username: str, password: str, share_params: Optional[Mapping[str, Any]]) -> requests.Response:
    """Create a share; the response is returned whatever its status."""
    return request.post_ocs(
        SHARES_ENDPOINT,
        validate_params(share_params),
        FORM_URL_ENCODED,
        user=username,
        password=password,
    )


def get_share_info_by_path(username: str, password: str, path: str) -> requests.Response:
    return request.get_ocs(f"{SHARES_ENDPOINT}?path={encode_uri_path(path)}", user=username, password=password)


def create_folder_in_last_public_share(token: str, folder_name: str) -> requests.Response:
    return request.mkcol(full_url(f"{PUBLIC_FILES_ENDPOINT}/{token}/{folder_name}"))


def create_file_in_last_public_share(token: str, file_name: str, content: str = "a file") -> requests.Response:
    return request.put(full_url(f"{PUBLIC_FILES_ENDPOINT}/{token}/{file_name}"), body=content)


def get_share_id_token(resource: str, resource_type: str, config: FixtureConfig) -> ShareIdToken:
    """Look up the share id and public link token of a fixture resource.

    Folders share one configured pair. Files are matched by position in
    ``config.test_files``; an unknown file gives a pair of Nones.
    """
    if resource_type == "folder":
        return ShareIdToken(config.test_folder_id, config.share_token_of_public_link_folder)

    try:
        index = config.test_files.index(resource)
    except ValueError:
        return ShareIdToken(None, None)
    return ShareIdToken(_at(config.test_files_id, index), _at(config.test_files_token, index))


def _at(values, index):
    return values[index] if index < len(values) else None

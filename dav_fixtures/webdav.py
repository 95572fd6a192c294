import json
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

import requests

from . import http_helper as request
from .config import (
    DAV_ROOT,
    FAVORITE_PROPPATCH_BODY,
    FILEID_PROPFIND_BODY,
    NS,
    PROPFIND_TEMPLATE,
    SIGNING_KEY_ENDPOINT,
    SYSTEMTAGS_ENDPOINT,
    SYSTEMTAGS_RELATIONS_ENDPOINT,
    TAGS_PROPFIND_BODY,
    TRASHBIN_PROPERTIES,
)
from .http_helper import assert_status, encode_uri_path, full_url, get_provider_base_url, sanitize_url

logger = logging.getLogger(__name__)


class PropertyNotFoundError(Exception):
    """Raised when a multistatus response does not carry the requested value."""


class TrashbinDataError(Exception):
    """Raised when a trash-bin entry comes back without a property block."""


@dataclass
class TrashBinItem:
    href: str
    original_filename: str
    original_location: str
    delete_timestamp: str
    last_modified: str


@dataclass
class FolderResult:
    """Outcome of one MKCOL issued by create_folder_recursive()."""

    path: str
    response: Optional[requests.Response] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None and 200 <= self.response.status_code < 300


def create_dav_path(user_id: str, element: Union[str, int], type: str = "files") -> str:
    """Return the DAV path of ``element``.

    ``type`` is ``files``, ``trash-bin`` or ``versions``; versions live
    under ``meta/<fileId>/v`` and do not include the user.
    """
    if type == "versions":
        parts = [DAV_ROOT, "meta", str(element), "v"]
    else:
        parts = [DAV_ROOT, type, user_id, encode_uri_path(str(element))]
    return re.sub(r"/{2,}", "/", "/".join(parts))


def create_full_dav_url(user_id: str, element: Union[str, int], type: str = "files") -> str:
    return sanitize_url(get_provider_base_url() + create_dav_path(user_id, element, type))


def create_folder_recursive(user: str, password: str, folder_name: str) -> List[FolderResult]:
    """Create ``folder_name`` and all of its parents, one MKCOL per level.

    Every level is attempted even when a shallower one failed, so the
    returned list always has one FolderResult per path segment.
    """
    folder_name = re.sub(r"/$", "", folder_name)
    folder_name = re.sub(r"^/", "", folder_name)
    folders = folder_name.split("/")

    results: List[FolderResult] = []
    for i in range(len(folders)):
        recursive_path = "/" + "/".join(folders[: i + 1])
        try:
            response = request.mkcol(create_full_dav_url(user, recursive_path), user=user, password=password)
        except requests.RequestException as exc:
            logger.error("[create_folder_recursive] MKCOL failed; path:%s; error:%s", recursive_path, exc)
            results.append(FolderResult(path=recursive_path, error=exc))
            continue
        results.append(FolderResult(path=recursive_path, response=response))
    return results


def create_file(user: str, password: str, file_name: str, contents: Union[str, bytes] = "") -> requests.Response:
    return request.put(create_full_dav_url(user, file_name), body=contents, user=user, password=password)


def delete_item(user: str, password: str, item_name: str) -> requests.Response:
    return request.delete(create_full_dav_url(user, item_name), user=user, password=password)


def _parse_multistatus(text: str) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise PropertyNotFoundError(f"response is not a valid multistatus document: {exc}") from exc


def _first_prop(response_el: ET.Element) -> Optional[ET.Element]:
    # Only the first propstat is looked at, whatever its status.
    propstat = response_el.find("d:propstat", NS)
    if propstat is None:
        return None
    return propstat.find("d:prop", NS)


def get_file_id(user: str, password: str, item_name: str) -> str:
    response = request.propfind(
        create_full_dav_url(user, item_name), body=FILEID_PROPFIND_BODY, user=user, password=password
    )
    assert_status(response, 207, f"could not get fileId for '{item_name}'")

    root = _parse_multistatus(response.text)
    for fileid in root.iter(f"{{{NS['oc']}}}fileid"):
        if fileid.text:
            return fileid.text
    logger.error("[get_file_id] no oc:fileid in response; item:%s", item_name)
    raise PropertyNotFoundError(f"no fileid found for '{item_name}'")


def list_versions_folder(user: str, password: str, file_id: Union[str, int]) -> str:
    response = request.propfind(create_full_dav_url(user, file_id, "versions"), user=user, password=password)
    assert_status(response, 207, f"could not list versions folder of fileId '{file_id}'")
    return response.text


def get_sign_key(username: str, password: str) -> str:
    response = request.get(full_url(SIGNING_KEY_ENDPOINT), user=username, password=password)
    assert_status(response, 200, f"Could not get signed Key for username {username}")
    return response.json()["ocs"]["data"]["signing-key"]


def propfind(
    path: str,
    user_id: str,
    password: str,
    properties: Iterable[str],
    type: str = "files",
    folder_depth: Union[str, int] = "1",
) -> str:
    """Issue a PROPFIND for ``properties`` and return the raw multistatus text.

    ``properties`` are prefixed names (``d:``, ``oc:`` or ``ocs:``).
    """
    body = PROPFIND_TEMPLATE.format(properties="".join(f"<{prop}/>" for prop in properties))
    response = request.propfind(
        create_full_dav_url(user_id, path, type),
        body=body,
        headers={"Depth": str(folder_depth)},
        user=user_id,
        password=password,
    )
    assert_status(response, 207, f"could not list {type} folder '{path}'")
    return response.text


def _prop_text(prop: ET.Element, name: str) -> str:
    return prop.findtext(name, namespaces=NS) or ""


def get_trash_bin_elements(user: str, password: str, depth: Union[str, int] = "1") -> List[TrashBinItem]:
    """List the trash bin of ``user``, one TrashBinItem per multistatus entry.

    Missing properties come back as empty strings; an entry without any
    property block raises TrashbinDataError.
    """
    text = propfind("/", user, password, TRASHBIN_PROPERTIES, "trash-bin", depth)
    root = _parse_multistatus(text)

    items: List[TrashBinItem] = []
    for resp in root.findall("d:response", NS):
        prop = _first_prop(resp)
        if prop is None:
            raise TrashbinDataError("trashbin data not defined")
        items.append(
            TrashBinItem(
                href=resp.findtext("d:href", default="", namespaces=NS),
                original_filename=_prop_text(prop, "oc:trashbin-original-filename"),
                original_location=_prop_text(prop, "oc:trashbin-original-location"),
                delete_timestamp=_prop_text(prop, "oc:trashbin-delete-timestamp"),
                last_modified=_prop_text(prop, "d:getlastmodified"),
            )
        )
    return items


def mark_as_favorite(username: str, password: str, file_name: str) -> requests.Response:
    return request.proppatch(
        create_full_dav_url(username, file_name), body=FAVORITE_PROPPATCH_BODY, user=username, password=password
    )


def create_a_system_tag(username: str, password: str, tag: str) -> requests.Response:
    body = json.dumps(
        {
            "name": tag,
            "canAssign": True,
            "userEditable": True,
            "userAssignable": True,
            "userVisible": True,
        }
    )
    return request.post(
        full_url(SYSTEMTAGS_ENDPOINT),
        body=body,
        headers={"Content-Type": "application/json"},
        user=username,
        password=password,
    )


def assign_tag_to_file(username: str, password: str, file_name: str, tag_name: str) -> requests.Response:
    file_id = get_file_id(username, password, file_name)
    tag_id = get_tag_id(username, password, tag_name)
    return request.put(
        full_url(f"{SYSTEMTAGS_RELATIONS_ENDPOINT}/{file_id}/{tag_id}"), user=username, password=password
    )


def get_tag_id(username: str, password: str, tag_name: str) -> str:
    """Return the id of the system tag whose display name is exactly ``tag_name``."""
    response = request.propfind(
        full_url(SYSTEMTAGS_ENDPOINT), body=TAGS_PROPFIND_BODY, user=username, password=password
    )
    assert_status(response, 207, "could not get tags list")

    root = _parse_multistatus(response.text)
    for resp in root.findall("d:response", NS):
        prop = _first_prop(resp)
        if prop is None:
            continue
        tag_id = prop.findtext("oc:id", default="", namespaces=NS)
        if prop.findtext("oc:display-name", namespaces=NS) == tag_name and tag_id.isdigit():
            return tag_id
    logger.error("[get_tag_id] tag not found; name:%s", tag_name)
    raise PropertyNotFoundError(f"no tag named '{tag_name}'")

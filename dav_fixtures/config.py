# Configuration for talking to the ownCloud provider under test.
#
# The provider base URL comes from the environment so the same helpers run
# against a local server or a CI container:
#    PROVIDER_BASE_URL = https://<host>            (no trailing /remote.php)
#
# Fixture identifiers (share ids and public link tokens created by the
# suite's setup) live in a JSON file, see load_fixture_config().
#
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_PROVIDER_BASE_URL = "http://localhost:9200"
DEFAULT_FIXTURE_CONFIG_PATH = "config/config.json"

NS = {
    "d": "DAV:",
    "oc": "http://owncloud.org/ns",
    "ocs": "http://open-collaboration-services.org/ns",
}

DAV_ROOT = "/remote.php/dav"
OCS_ROOT = "/ocs/v2.php"
SHARES_ENDPOINT = "/apps/files_sharing/api/v1/shares"
PUBLIC_FILES_ENDPOINT = "/remote.php/dav/public-files"
SIGNING_KEY_ENDPOINT = "/ocs/v1.php/cloud/user/signing-key?format=json"
SYSTEMTAGS_ENDPOINT = "/remote.php/dav/systemtags"
SYSTEMTAGS_RELATIONS_ENDPOINT = "/remote.php/dav/systemtags-relations/files"

FILEID_PROPFIND_BODY = """<?xml version="1.0"?>
<d:propfind xmlns:d="DAV:" xmlns:oc="http://owncloud.org/ns">
  <d:prop>
    <oc:fileid />
  </d:prop>
</d:propfind>
"""

# {properties} is filled with one empty element per requested property.
PROPFIND_TEMPLATE = """<?xml version="1.0"?>
<d:propfind
  xmlns:d="DAV:"
  xmlns:oc="http://owncloud.org/ns"
  xmlns:ocs="http://open-collaboration-services.org/ns">
  <d:prop>{properties}</d:prop>
</d:propfind>
"""

FAVORITE_PROPPATCH_BODY = """<?xml version="1.0"?>
<d:propertyupdate xmlns:d="DAV:" xmlns:oc="http://owncloud.org/ns">
  <d:set>
    <d:prop>
      <oc:favorite>true</oc:favorite>
    </d:prop>
  </d:set>
</d:propertyupdate>
"""

TAGS_PROPFIND_BODY = """<?xml version="1.0" encoding="utf-8" ?>
<a:propfind xmlns:a="DAV:" xmlns:oc="http://owncloud.org/ns">
  <a:prop>
    <oc:display-name />
    <oc:id />
  </a:prop>
</a:propfind>
"""

TRASHBIN_PROPERTIES = (
    "oc:trashbin-original-filename",
    "oc:trashbin-original-location",
    "oc:trashbin-delete-timestamp",
    "d:getlastmodified",
)


class FixtureConfigError(Exception):
    """Raised when the fixture file lacks a required key."""


@dataclass(frozen=True)
class Settings:
    provider_base_url: str


def load_settings() -> Settings:
    """Read provider settings from the environment.

    Optional environment variables (with defaults):
        PROVIDER_BASE_URL: Base URL of the server under test (default: http://localhost:9200).
    """
    return Settings(
        provider_base_url=os.environ.get("PROVIDER_BASE_URL", DEFAULT_PROVIDER_BASE_URL),
    )


@dataclass(frozen=True)
class FixtureConfig:
    """Share ids and tokens of the resources created by the suite's setup.

    Folder fixtures use the single ``test_folder_id`` /
    ``share_token_of_public_link_folder`` pair. File fixtures are three
    parallel sequences matched by position in ``test_files``.
    """

    test_folder_id: Optional[str] = None
    share_token_of_public_link_folder: Optional[str] = None
    test_files: Tuple[str, ...] = field(default_factory=tuple)
    test_files_id: Tuple[str, ...] = field(default_factory=tuple)
    test_files_token: Tuple[str, ...] = field(default_factory=tuple)


_FIXTURE_KEYS = (
    "testFolderId",
    "shareTokenOfPublicLinkFolder",
    "testFiles",
    "testFilesId",
    "testFilesToken",
)


def fixture_config_from_dict(data: dict) -> FixtureConfig:
    missing = [key for key in _FIXTURE_KEYS if key not in data]
    if missing:
        raise FixtureConfigError(f"fixture config is missing keys: {', '.join(missing)}")
    return FixtureConfig(
        test_folder_id=data["testFolderId"],
        share_token_of_public_link_folder=data["shareTokenOfPublicLinkFolder"],
        test_files=tuple(data["testFiles"]),
        test_files_id=tuple(data["testFilesId"]),
        test_files_token=tuple(data["testFilesToken"]),
    )


def load_fixture_config(path: Optional[str] = None) -> FixtureConfig:
    """Load the fixture table from a JSON file.

    The path is taken from the argument, then FIXTURE_CONFIG_PATH, then
    ``config/config.json``. Keys use the camelCase names of the file.
    """
    path = path or os.environ.get("FIXTURE_CONFIG_PATH", DEFAULT_FIXTURE_CONFIG_PATH)
    with open(Path(path), encoding="utf-8") as fh:
        data = json.load(fh)
    return fixture_config_from_dict(data)

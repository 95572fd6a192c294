from urllib.parse import parse_qsl

import pytest

from dav_fixtures import sharing
from dav_fixtures.config import FixtureConfig
from dav_fixtures.sharing import ShareIdToken

FIXTURES = FixtureConfig(
    test_folder_id="100",
    share_token_of_public_link_folder="FolderToken",
    test_files=("simple.odt", "notes.txt", "data.zip"),
    test_files_id=("201", "202", "203"),
    test_files_token=("TokA", "TokB", "TokC"),
)


# ---------------------------------------------------------------------------
# Parameter normalisation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [(True, "true"), (False, "false"), ("TRUE", "true"), (0, "0"), (3, "3")],
)
@pytest.mark.parametrize("key", ["shareType", "publicUpload"])
def test_validate_params_lowercases_normalized_keys(key, value, expected):
    assert sharing.validate_params({key: value}) == [(key, expected)]


@pytest.mark.parametrize("value", [None, ""])
@pytest.mark.parametrize("key", ["shareType", "publicUpload"])
def test_validate_params_drops_empty_normalized_keys(key, value):
    assert sharing.validate_params({key: value}) == []


@pytest.mark.parametrize("value", [None, "", 0, False])
def test_validate_params_drops_falsy_other_keys(value):
    assert sharing.validate_params({"permissions": value, "path": "/a"}) == [("path", "/a")]


def test_validate_params_preserves_order():
    params = {"path": "/docs", "shareType": 3, "permissions": 1, "publicUpload": False}
    assert sharing.validate_params(params) == [
        ("path", "/docs"),
        ("shareType", "3"),
        ("permissions", 1),
        ("publicUpload", "false"),
    ]


def test_validate_params_handles_missing_data():
    assert sharing.validate_params(None) == []


def test_to_form_url_encoded():
    encoded = sharing.to_form_url_encoded({"path": "/my docs", "publicUpload": True})
    assert parse_qsl(encoded) == [("path", "/my docs"), ("publicUpload", "true")]
    assert sharing.to_form_url_encoded({}) is None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


def test_share_resource_posts_form(mock_request, response):
    mock_request.return_value = response(403)

    result = sharing.share_resource("alice", "pw", {"path": "/a", "shareType": 3, "password": ""})

    assert result.status_code == 403
    args, kwargs = mock_request.call_args
    assert args == ("POST", "https://cloud.example.com/ocs/v2.php/apps/files_sharing/api/v1/shares")
    assert kwargs["data"] == [("path", "/a"), ("shareType", "3")]
    assert kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
    assert kwargs["auth"] == ("alice", "pw")


def test_get_share_info_by_path_encodes_path(mock_request):
    sharing.get_share_info_by_path("alice", "pw", "/Shares/my file.txt")
    args, kwargs = mock_request.call_args
    assert args == (
        "GET",
        "https://cloud.example.com/ocs/v2.php/apps/files_sharing/api/v1/shares?path=/Shares/my%20file.txt",
    )
    assert kwargs["params"] == {"format": "json"}


def test_create_folder_in_last_public_share_is_anonymous(mock_request):
    sharing.create_folder_in_last_public_share("Tok123", "uploads")
    args, kwargs = mock_request.call_args
    assert args == ("MKCOL", "https://cloud.example.com/remote.php/dav/public-files/Tok123/uploads")
    assert kwargs["auth"] is None


def test_create_file_in_last_public_share_default_content(mock_request):
    sharing.create_file_in_last_public_share("Tok123", "hello.txt")
    args, kwargs = mock_request.call_args
    assert args == ("PUT", "https://cloud.example.com/remote.php/dav/public-files/Tok123/hello.txt")
    assert kwargs["data"] == "a file"
    assert kwargs["auth"] is None


# ---------------------------------------------------------------------------
# Fixture lookup
# ---------------------------------------------------------------------------


def test_get_share_id_token_for_file():
    assert sharing.get_share_id_token("notes.txt", "file", FIXTURES) == ShareIdToken("202", "TokB")


@pytest.mark.parametrize("resource", ["anything", "notes.txt", ""])
def test_get_share_id_token_for_folder_ignores_resource(resource):
    assert sharing.get_share_id_token(resource, "folder", FIXTURES) == ShareIdToken("100", "FolderToken")


def test_get_share_id_token_unknown_file_gives_nones():
    assert sharing.get_share_id_token("missing.txt", "file", FIXTURES) == ShareIdToken(None, None)


def test_get_share_id_token_short_parallel_list():
    config = FixtureConfig(test_files=("a", "b"), test_files_id=("1",), test_files_token=("t1", "t2"))
    assert sharing.get_share_id_token("b", "file", config) == ShareIdToken(None, "t2")

"""Tests for option validation and request URL building."""

from pathlib import Path

import pytest
from conftest import FILE_ID, FILE_URL, WEB_URL

from spofileget import (
    AsString,
    FileById,
    FileByUrl,
    ListItem,
    Metadata,
    SaveToFile,
    ValidationError,
    build_request_url,
    validate_options,
)
from spofileget.retrieval import encode_uri_component


# =========================================================================
# build_request_url
# =========================================================================


def test_url_by_id_without_mode():
    url = build_request_url(WEB_URL, FileById(FILE_ID), Metadata())
    assert url == f"{WEB_URL}/_api/web/GetFileById('{FILE_ID}')"


def test_url_by_id_as_list_item():
    url = build_request_url(WEB_URL, FileById(FILE_ID), ListItem())
    assert url == f"{WEB_URL}/_api/web/GetFileById('{FILE_ID}')?$expand=ListItemAllFields"


@pytest.mark.parametrize("mode", [AsString(), SaveToFile(Path("out.docx"))])
def test_url_by_id_value_stream(mode):
    url = build_request_url(WEB_URL, FileById(FILE_ID), mode)
    assert url == f"{WEB_URL}/_api/web/GetFileById('{FILE_ID}')/$value"


def test_url_by_server_relative_path():
    url = build_request_url(WEB_URL, FileByUrl(FILE_URL), Metadata())
    assert url == (
        f"{WEB_URL}/_api/web/GetFileByServerRelativePath(DecodedUrl=@f)"
        "?@f='%2Fsites%2Fproject-x%2Fdocuments%2FTest1.docx'"
    )


def test_url_by_server_relative_path_as_list_item_uses_ampersand():
    url = build_request_url(WEB_URL, FileByUrl("/sites/x/documents/Test1.docx"), ListItem())
    assert url.endswith("?$expand=ListItemAllFields&@f='%2Fsites%2Fx%2Fdocuments%2FTest1.docx'")


def test_url_by_server_relative_path_as_string():
    url = build_request_url(WEB_URL, FileByUrl(FILE_URL), AsString())
    assert url == (
        f"{WEB_URL}/_api/web/GetFileByServerRelativePath(DecodedUrl=@f)/$value"
        "?@f='%2Fsites%2Fproject-x%2Fdocuments%2FTest1.docx'"
    )


def test_url_drops_trailing_slash_on_web_url():
    url = build_request_url(f"{WEB_URL}/", FileById(FILE_ID), Metadata())
    assert url == f"{WEB_URL}/_api/web/GetFileById('{FILE_ID}')"


def test_encode_uri_component_matches_javascript():
    assert encode_uri_component("/a b/ção.docx") == "%2Fa%20b%2F%C3%A7%C3%A3o.docx"
    assert encode_uri_component("it's (1)!~*") == "it's%20(1)!~*"


# =========================================================================
# validate_options
# =========================================================================


def test_validate_requires_web_url():
    with pytest.raises(ValidationError, match="Required parameter webUrl missing"):
        validate_options(None, id=FILE_ID)


def test_validate_rejects_non_sharepoint_url():
    with pytest.raises(ValidationError, match="is not a valid SharePoint Online site URL"):
        validate_options("http://contoso.sharepoint.com", id=FILE_ID)


@pytest.mark.parametrize("value", ["12345", "not-a-guid", f"{FILE_ID}x", "b2307a39e878458bbc9003bc578531d6"])
def test_validate_rejects_invalid_guid(value):
    with pytest.raises(ValidationError, match="is not a valid GUID"):
        validate_options(WEB_URL, id=value)


def test_validate_accepts_uppercase_guid():
    retrieval = validate_options(WEB_URL, id=FILE_ID.upper())
    assert retrieval.locator == FileById(FILE_ID.upper())


def test_validate_rejects_id_and_url():
    with pytest.raises(ValidationError, match="not both"):
        validate_options(WEB_URL, id=FILE_ID, url=FILE_URL)


def test_validate_requires_id_or_url():
    with pytest.raises(ValidationError, match="one is required"):
        validate_options(WEB_URL)


def test_validate_as_file_requires_path():
    with pytest.raises(ValidationError, match="path should be specified"):
        validate_options(WEB_URL, id=FILE_ID, as_file=True)


def test_validate_path_directory_must_exist(tmp_path):
    with pytest.raises(ValidationError, match="does not exist"):
        validate_options(WEB_URL, id=FILE_ID, as_file=True, path=tmp_path / "missing" / "a.docx")


def test_validate_path_parent_must_be_a_directory(tmp_path):
    parent = tmp_path / "report.txt"
    parent.write_text("not a folder")
    with pytest.raises(ValidationError, match="does not exist"):
        validate_options(WEB_URL, id=FILE_ID, as_file=True, path=parent / "a.docx")


@pytest.mark.parametrize(
    "flags",
    [
        {"as_string": True, "as_list_item": True},
        {"as_string": True, "as_file": True},
        {"as_list_item": True, "as_file": True},
        {"as_string": True, "as_list_item": True, "as_file": True},
    ],
)
def test_validate_rejects_multiple_modes(tmp_path, flags):
    with pytest.raises(ValidationError, match="but not multiple"):
        validate_options(WEB_URL, id=FILE_ID, path=tmp_path / "a.docx", **flags)


def test_validate_defaults_to_metadata():
    retrieval = validate_options(WEB_URL, url=FILE_URL)
    assert retrieval.locator == FileByUrl(FILE_URL)
    assert retrieval.mode == Metadata()


def test_validate_builds_save_to_file(tmp_path):
    destination = tmp_path / "SavedAsTest1.docx"
    retrieval = validate_options(WEB_URL, id=FILE_ID, as_file=True, path=str(destination))
    assert retrieval.mode == SaveToFile(destination)
    assert retrieval.request_url.endswith("/$value")


def test_validate_builds_list_item_and_string_modes():
    assert validate_options(WEB_URL, id=FILE_ID, as_list_item=True).mode == ListItem()
    assert validate_options(WEB_URL, id=FILE_ID, as_string=True).mode == AsString()

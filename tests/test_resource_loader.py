"""
Region resource loading over HTTP (requests) and from local files.
"""
from unittest import mock

import requests

from yardmap.domain.common.errors import ErrorCategory
from yardmap.infrastructure.resources.resource_loader import (
    LOCAL_ACCESS_HINT, RequestsResourceLoader, file_url_to_path
)


def make_response(status_code, text=""):
    response = requests.Response()
    response.status_code = status_code
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    return response


def test_reads_local_file(tmp_path, logger):
    areas = tmp_path / "interactiveAreas.json"
    areas.write_text('[{"name": "A1"}]', encoding="utf-8")

    result = RequestsResourceLoader(logger).fetch_text(str(areas))

    assert result.value == '[{"name": "A1"}]'


def test_reads_file_url(tmp_path, logger):
    areas = tmp_path / "areas.json"
    areas.write_text("[]", encoding="utf-8")

    result = RequestsResourceLoader(logger).fetch_text(areas.as_uri())

    assert result.value == "[]"


def test_missing_file_fails_with_hint(tmp_path, logger):
    result = RequestsResourceLoader(logger).fetch_text(str(tmp_path / "missing.json"))

    assert result.is_failure
    assert result.error.category == ErrorCategory.RESOURCE
    assert result.error.details["hint"] == LOCAL_ACCESS_HINT
    assert LOCAL_ACCESS_HINT in logger.messages("WARNING")


def test_undecodable_file_fails(tmp_path, logger):
    areas = tmp_path / "interactiveAreas.json"
    areas.write_bytes(b'[{"name": "\xff\xfe"}]')

    result = RequestsResourceLoader(logger).fetch_text(str(areas))

    assert result.is_failure
    assert result.error.category == ErrorCategory.RESOURCE
    assert "not valid UTF-8" in result.error.message


def test_http_success_uses_timeout(logger):
    session = mock.Mock(spec=requests.Session)
    session.get.return_value = make_response(200, '[{"name": "A1"}]')

    result = RequestsResourceLoader(logger, timeout_seconds=3.0, session=session).fetch_text(
        "https://maps.example.org/areas.json")

    assert result.value == '[{"name": "A1"}]'
    session.get.assert_called_once_with("https://maps.example.org/areas.json", timeout=3.0)


def test_http_error_status_fails(logger):
    session = mock.Mock(spec=requests.Session)
    session.get.return_value = make_response(404)

    result = RequestsResourceLoader(logger, session=session).fetch_text("http://maps.example.org/areas.json")

    assert result.is_failure
    assert result.error.message == "Response status: 404"
    assert result.error.details["status"] == 404


def test_http_connection_error_fails(logger):
    session = mock.Mock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("refused")

    result = RequestsResourceLoader(logger, session=session).fetch_text("http://maps.example.org/areas.json")

    assert result.is_failure
    assert result.error.message.startswith("Request failed:")


def test_file_url_to_path_keeps_drive_letters():
    assert file_url_to_path("file:///C:/maps/areas.json") == "C:/maps/areas.json"

# tests/test_quay_service.py
import asyncio
from datetime import datetime, timezone
import httpx
import pytest
from model.status import StatusKind
from service.quay_service import MAX_REDIRECTS, QuayService
from tests.fakes import JAN_1, JUN_1, json_handler, quay_with, tag


class _BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        raise httpx.ReadError("connection reset by peer")
        yield b""  # pragma: no cover


def _resolve(handler, operator: str = "ns/repo"):
    return asyncio.run(quay_with(handler).resolve(operator))


def _never_called(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


@pytest.mark.parametrize("operator", ["", "repo", "a/b/c", "quay.io/ns/repo"])
def test_invalid_format_skips_network(operator):
    record = _resolve(_never_called, operator)
    assert record.name == operator
    assert record.status == "Invalid format. Expected: namespace/repository"
    assert record.kind is StatusKind.invalid_format
    assert record.lastUpdated is None
    assert record.sha256 is None


def test_requests_tag_listing_url():
    seen: list[httpx.Request] = []
    _resolve(json_handler({"tags": [tag("v1", JAN_1)]}, seen=seen), "app-sre/exporter")
    assert len(seen) == 1
    assert seen[0].method == "GET"
    assert str(seen[0].url) == "https://quay.io/api/v1/repository/app-sre/exporter/tag/"


def test_host_comes_from_constructor():
    seen: list[httpx.Request] = []
    service = QuayService(
        host="registry.example.com",
        transport=httpx.MockTransport(json_handler({"tags": []}, seen=seen)),
    )
    record = asyncio.run(service.resolve("ns/repo"))
    assert record.status == "No tags found"
    assert seen[0].url.host == "registry.example.com"


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ConnectError("connection refused"),
        httpx.ConnectTimeout("timed out"),
        httpx.ReadTimeout("timed out"),
    ],
)
def test_connect_failure(exc):
    def _handler(request: httpx.Request) -> httpx.Response:
        raise exc

    record = _resolve(_handler)
    assert record.status == "Failed to connect to Quay.io"
    assert record.kind is StatusKind.connect_failure
    assert record.lastUpdated is None and record.sha256 is None


@pytest.mark.parametrize("code", [404, 401, 500, 502])
def test_non_200_reports_code(code):
    record = _resolve(json_handler({"error": "nope"}, status_code=code))
    assert record.status == f"Quay.io error: {code}"
    assert record.kind is StatusKind.http_status


def test_body_read_failure():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_BrokenStream())

    record = _resolve(_handler)
    assert record.status == "Failed to read response"
    assert record.kind is StatusKind.read_failure


def test_invalid_json_is_parse_error():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>maintenance</html>")

    record = _resolve(_handler)
    assert record.status.startswith("Parse error: ")
    assert len(record.status) > len("Parse error: ")
    assert record.kind is StatusKind.parse_failure
    assert record.sha256 is None


def test_wrong_shape_is_parse_error():
    record = _resolve(json_handler({"tags": [{"name": "v1", "last_modified": 17}]}))
    assert record.status.startswith("Parse error: ")
    assert "last_modified" in record.status


@pytest.mark.parametrize("payload", [{"tags": []}, {}, {"tags": None}])
def test_no_tags(payload):
    record = _resolve(json_handler(payload))
    assert record.status == "No tags found"
    assert record.kind is StatusKind.empty
    assert record.lastUpdated is None and record.sha256 is None


def test_no_valid_timestamps():
    payload = {"tags": [tag("a", "2024-06-01T00:00:00Z"), tag("b", "")]}
    record = _resolve(json_handler(payload))
    assert record.status == "No valid timestamps found"
    assert record.kind is StatusKind.no_valid_timestamps
    assert record.lastUpdated is None and record.sha256 is None


def test_ok_selects_latest_and_strips_digest():
    payload = {
        "tags": [
            tag("v1", JAN_1, "sha256:1111"),
            tag("v2", JUN_1, "sha256:2222"),
            tag("broken", "not a date", "sha256:3333"),
        ]
    }
    record = _resolve(json_handler(payload))
    assert record.status == "OK"
    assert record.kind is StatusKind.ok
    assert record.lastUpdated == datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert record.sha256 == "2222"


def test_ok_keeps_unprefixed_digest():
    record = _resolve(json_handler({"tags": [tag("v1", JAN_1, "abcd")]}))
    assert record.status == "OK"
    assert record.sha256 == "abcd"


def test_ok_tie_keeps_first_tag():
    payload = {
        "tags": [
            tag("first", JUN_1, "sha256:aaaa"),
            tag("second", JUN_1, "sha256:bbbb"),
        ]
    }
    record = _resolve(json_handler(payload))
    assert record.sha256 == "aaaa"


def test_extra_fields_are_ignored():
    payload = {
        "tags": [dict(tag("v1", JAN_1, "sha256:aaaa"), size=123, reversion=False)],
        "page": 1,
        "has_additional": False,
    }
    record = _resolve(json_handler(payload))
    assert record.status == "OK"


class _StalledStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        raise httpx.ReadTimeout("timed out")
        yield b""  # pragma: no cover


def test_timeout_while_reading_body_is_connect_failure():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_StalledStream())

    record = _resolve(_handler)
    assert record.status == "Failed to connect to Quay.io"
    assert record.kind is StatusKind.connect_failure


def test_null_body_has_no_tags():
    record = _resolve(json_handler(None))
    assert record.status == "No tags found"
    assert record.kind is StatusKind.empty


def test_null_digest_reads_as_blank():
    record = _resolve(json_handler({"tags": [tag("v1", JAN_1, None)]}))
    assert record.status == "OK"
    assert record.sha256 == ""


def test_null_tag_entries_are_blank_tags():
    payload = {"tags": [None, tag("v1", JAN_1, "sha256:aaaa"), None]}
    record = _resolve(json_handler(payload))
    assert record.status == "OK"
    assert record.sha256 == "aaaa"


def test_only_null_tag_entries_have_no_valid_timestamps():
    record = _resolve(json_handler({"tags": [None, None]}))
    assert record.status == "No valid timestamps found"
    assert record.kind is StatusKind.no_valid_timestamps


def test_null_name_and_last_modified_are_skipped():
    payload = {
        "tags": [
            {"name": None, "last_modified": None, "manifest_digest": None},
            tag("v2", JUN_1, "sha256:2222"),
        ]
    }
    record = _resolve(json_handler(payload))
    assert record.status == "OK"
    assert record.sha256 == "2222"


def test_follows_redirect_to_listing():
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.host == "quay.io":
            return httpx.Response(
                302, headers={"Location": "https://mirror.example.com/tags"}
            )
        return json_handler({"tags": [tag("v1", JAN_1, "sha256:aaaa")]})(request)

    record = _resolve(_handler)
    assert record.status == "OK"
    assert record.sha256 == "aaaa"
    assert [r.url.host for r in seen] == ["quay.io", "mirror.example.com"]


def test_endless_redirects_are_connect_failure():
    calls: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(302, headers={"Location": str(request.url)})

    record = _resolve(_handler)
    assert record.status == "Failed to connect to Quay.io"
    assert record.kind is StatusKind.connect_failure
    assert len(calls) == MAX_REDIRECTS + 1


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_non_positive_timeout_is_rejected(timeout):
    with pytest.raises(ValueError):
        QuayService(host="quay.io", timeout=timeout)

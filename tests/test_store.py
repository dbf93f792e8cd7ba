from __future__ import annotations

import asyncio

import httpx
import pytest

from preview_server.errors import UpstreamError
from preview_server.store import LookupState, RecordStore


def _run(handler, coro_factory):
    async def _inner():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            store = RecordStore(client, "https://db.example.test/", "key")
            return await coro_factory(store)

    return asyncio.run(_inner())


def test_fetch_one_returns_first_row() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url).startswith("https://db.example.test/rest/v1/posts?")
        return httpx.Response(200, json=[{"id": "a"}, {"id": "b"}])

    result = _run(handler, lambda store: store.fetch_one("posts", {"id": "a"}, "id"))

    assert result.record == {"id": "a"}
    assert result.status_code == 200


def test_fetch_one_empty_result_has_no_record() -> None:
    result = _run(
        lambda request: httpx.Response(200, json=[]),
        lambda store: store.fetch_one("posts", {"id": "a"}, "id"),
    )

    assert result.record is None
    assert result.body == "[]"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="down"),
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json={"id": "a"}),
    ],
)
def test_fetch_one_raises_on_bad_responses(response: httpx.Response) -> None:
    with pytest.raises(UpstreamError) as excinfo:
        _run(lambda request: response, lambda store: store.fetch_one("posts", {"id": "a"}, "id"))

    assert excinfo.value.upstream_status == response.status_code


def test_lookup_reports_explicit_states() -> None:
    rows = {"eq.present": [{"id": "present"}], "eq.absent": []}

    def handler(request: httpx.Request) -> httpx.Response:
        key = request.url.params["id"]
        if key not in rows:
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, json=rows[key])

    found = _run(handler, lambda store: store.lookup("profiles", {"id": "present"}, "id"))
    missing = _run(handler, lambda store: store.lookup("profiles", {"id": "absent"}, "id"))
    failed = _run(handler, lambda store: store.lookup("profiles", {"id": "broken"}, "id"))

    assert found.state is LookupState.FOUND and found.record == {"id": "present"}
    assert missing.state is LookupState.MISSING and missing.record is None
    assert failed.state is LookupState.FAILED and "503" in (failed.error or "")


def test_lookup_swallows_network_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    result = _run(handler, lambda store: store.lookup("communities", {"id": "x"}, "id"))

    assert result.state is LookupState.FAILED

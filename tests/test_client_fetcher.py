"""Unit tests for the content API client and the section fetcher."""

from __future__ import annotations

import typing as typ

import pytest
import requests

from series_catalog.client import CatalogApiClient, CatalogApiError, CatalogShapeError
from series_catalog.fetcher import (
    DEFAULT_FALLBACK,
    FailurePolicy,
    FallbackDataset,
    SectionCatalogFetcher,
)
from series_catalog.models import ComponentItem, Section

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from conftest import StubClient


def _client(session: requests.Session) -> CatalogApiClient:
    return CatalogApiClient(
        header_api="https://cms.invalid/header",
        page_api="https://cms.invalid/page/",
        update_comp_api="https://cms.invalid/update",
        token="secret-token",
        session=session,
    )


def _response(mocker: MockerFixture, status: int, payload: object) -> typ.Any:
    response = mocker.Mock()
    response.status_code = status
    response.content = b"{}"
    response.text = "upstream says no"
    response.json.return_value = payload
    return response


def test_client_fetches_tabs_with_bearer_and_accept_headers(
    mocker: MockerFixture,
) -> None:
    """The client should pass auth headers and unwrap ``data.tabs``."""
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(
        mocker, 200, {"data": {"tabs": [{"pageId": "p1", "name": "Home"}]}}
    )

    tabs = _client(session).fetch_tabs()

    assert tabs == [{"pageId": "p1", "name": "Home"}]
    method, url = session.request.call_args.args
    assert (method, url) == ("GET", "https://cms.invalid/header")
    headers = session.request.call_args.kwargs["headers"]
    assert headers["Authorization"] == "Bearer secret-token", (
        "expected Authorization header to include Bearer token"
    )
    assert headers["Accept"] == "application/json"
    assert "Content-Type" not in headers, "GET requests should not send a body type"


def test_client_builds_page_url_from_section(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(mocker, 200, {"data": {"components": []}})

    assert _client(session).fetch_page_components("abc123") == []
    assert session.request.call_args.args[1] == "https://cms.invalid/page/abc123"


def test_client_posts_commit_as_json(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(mocker, 200, {"ok": True})
    body = {"components": []}

    _client(session).submit_order("abc123", body)

    kwargs = session.request.call_args.kwargs
    assert session.request.call_args.args == (
        "POST",
        "https://cms.invalid/update/abc123",
    )
    assert kwargs["json"] == body
    assert kwargs["headers"]["Content-Type"] == "application/json"


def test_client_raises_on_error_status(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(mocker, 502, None)

    with pytest.raises(CatalogApiError, match="status 502: upstream says no"):
        _client(session).fetch_tabs()


def test_client_wraps_transport_errors(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(CatalogApiError, match="Failed to reach"):
        _client(session).fetch_page_components("abc")


def test_client_rejects_unexpected_shapes(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(mocker, 200, {"data": {"tabs": "nope"}})

    with pytest.raises(CatalogShapeError, match=r"data\.tabs"):
        _client(session).fetch_tabs()


def test_insertion_requires_configured_endpoint(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)

    with pytest.raises(CatalogApiError, match="insertion endpoint"):
        _client(session).submit_insertion("abc", {})
    session.request.assert_not_called()


def test_fetch_sections_drops_tabs_without_page_id(
    stub_client: StubClient, fetcher: SectionCatalogFetcher
) -> None:
    stub_client.tabs.append({"name": "Orphan"})
    stub_client.tabs.append({"pageId": {"$oid": "64aa"}, "name": "Wrapped"})

    sections = fetcher.fetch_sections()

    assert sections == [
        Section("home", "Home"),
        Section("kids", "Kids"),
        Section("64aa", "Wrapped"),
    ]


def test_fetch_components_normalizes_and_drops_duplicates(
    stub_client: StubClient, fetcher: SectionCatalogFetcher
) -> None:
    stub_client.components["home"].append({"_id": "A", "componentKey": "x"})

    components = fetcher.fetch_components("home")

    assert [component.id for component in components] == ["A", "B"]
    assert components[0].series_ids() == ["s1", "s2"]
    assert all(component.section_id == "home" for component in components)


def test_fail_open_returns_configured_fallback_exactly(
    stub_client: StubClient,
) -> None:
    """Transport errors under FALLBACK yield the fallback list unchanged."""
    fallback = FallbackDataset(
        sections=(Section("offline", "Offline"),),
        components={"offline": (ComponentItem("o1", "Offline rail", "offline"),)},
    )
    fetcher = SectionCatalogFetcher(
        typ.cast("typ.Any", stub_client),
        policy=FailurePolicy.FALLBACK,
        fallback=fallback,
    )
    stub_client.error = CatalogApiError("boom")

    assert fetcher.fetch_sections() == list(fallback.sections)
    assert fetcher.fetch_components("offline") == list(fallback.components["offline"])
    assert fetcher.fetch_components("unknown") == []


def test_fail_closed_propagates_and_call_site_can_override(
    stub_client: StubClient, fetcher: SectionCatalogFetcher
) -> None:
    stub_client.error = CatalogShapeError("bad shape")

    with pytest.raises(CatalogShapeError):
        fetcher.fetch_sections()

    sections = fetcher.fetch_sections(policy=FailurePolicy.FALLBACK)
    assert sections == list(DEFAULT_FALLBACK.sections)
    assert [s.id for s in sections] == ["singing", "acting"]

    fetcher.policy = FailurePolicy.FALLBACK
    with pytest.raises(CatalogShapeError):
        fetcher.fetch_components("home", policy=FailurePolicy.PROPAGATE)

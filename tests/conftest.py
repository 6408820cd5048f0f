"""Shared fixtures for catalog tests."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import pytest

from series_catalog.client import CatalogApiError
from series_catalog.fetcher import FailurePolicy, SectionCatalogFetcher
from series_catalog.models import Catalog, ComponentItem, Series


class StubClient:
    """In-memory stand-in for :class:`CatalogApiClient`."""

    def __init__(
        self,
        *,
        tabs: list[typ.Any] | None = None,
        components: dict[str, list[typ.Any]] | None = None,
    ) -> None:
        self.tabs = tabs or []
        self.components = components or {}
        self.error: CatalogApiError | None = None
        self.submit_error: CatalogApiError | None = None
        self.submitted: list[tuple[str, cabc.Mapping[str, typ.Any]]] = []
        self.inserted: list[tuple[str, cabc.Mapping[str, typ.Any]]] = []
        self.page_calls: list[str] = []

    def fetch_tabs(self) -> list[typ.Any]:
        if self.error:
            raise self.error
        return self.tabs

    def fetch_page_components(self, section_id: str) -> list[typ.Any]:
        self.page_calls.append(section_id)
        if self.error:
            raise self.error
        return self.components.get(section_id, [])

    def submit_order(
        self, section_id: str, body: cabc.Mapping[str, typ.Any]
    ) -> None:
        if self.submit_error:
            raise self.submit_error
        self.submitted.append((section_id, body))

    def submit_insertion(
        self, section_id: str, body: cabc.Mapping[str, typ.Any]
    ) -> None:
        if self.submit_error:
            raise self.submit_error
        self.inserted.append((section_id, body))


def raw_component(
    component_id: str, key: str = "upcoming-series-card", **extra: typ.Any
) -> dict[str, typ.Any]:
    """Return a raw component record as served by the page endpoint."""
    return {"_id": component_id, "componentKey": key, **extra}


def card_entries(*task_ids: str) -> list[dict[str, typ.Any]]:
    return [
        {"taskDetail": {"_id": task_id}, "title": task_id.upper()}
        for task_id in task_ids
    ]


@pytest.fixture
def stub_client() -> StubClient:
    """Return a stub client serving two sections with card components."""
    return StubClient(
        tabs=[
            {"pageId": "home", "name": "Home"},
            {"pageId": "kids", "name": "Kids"},
        ],
        components={
            "home": [
                raw_component("A", title="Alpha", actionData=card_entries("s1", "s2")),
                raw_component("B", title="Beta", actionData=[]),
            ],
            "kids": [raw_component("K", title="Kids rail")],
        },
    )


@pytest.fixture
def fetcher(stub_client: StubClient) -> SectionCatalogFetcher:
    return SectionCatalogFetcher(
        typ.cast("typ.Any", stub_client), policy=FailurePolicy.PROPAGATE
    )


@pytest.fixture
def sample_catalog() -> Catalog:
    """Return a three-component catalog with a few series each."""
    return Catalog(
        section_id="home",
        components=(
            ComponentItem(
                id="c0",
                name="Zero",
                section_id="home",
                tag="hero",
                series=(Series("a"), Series("b"), Series("c")),
            ),
            ComponentItem(id="c1", name="One", section_id="home"),
            ComponentItem(
                id="c2",
                name="Two",
                section_id="home",
                series=(Series("x", title="X"),),
            ),
        ),
    )

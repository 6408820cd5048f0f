"""Fetch sections and their normalized components from the content API.

:class:`SectionCatalogFetcher` turns the raw responses of
:class:`~series_catalog.client.CatalogApiClient` into :class:`Section` and
:class:`ComponentItem` lists. What happens when the API cannot be reached or
answers with an unexpected shape is decided by a :class:`FailurePolicy`:
``FALLBACK`` substitutes a fixed dataset and carries on, ``PROPAGATE`` raises
:class:`~series_catalog.client.CatalogApiError`. The fetcher has a default
policy and every call may override it.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import typing as typ

from .client import CatalogApiError
from .models import ComponentItem, Section, Series
from .normalizer import normalize
from .raw_components import coerce_id

if typ.TYPE_CHECKING:
    from .client import CatalogApiClient

logger = logging.getLogger(__name__)


class FailurePolicy(enum.StrEnum):
    """How a fetch reacts to transport or shape failures."""

    FALLBACK = "fallback"
    PROPAGATE = "propagate"


@dc.dataclass(frozen=True, slots=True)
class FallbackDataset:
    """Sections and components served when a fail-open fetch fails."""

    sections: tuple[Section, ...] = ()
    components: cabc.Mapping[str, tuple[ComponentItem, ...]] = dc.field(
        default_factory=dict
    )

    def components_for(self, section_id: str) -> list[ComponentItem]:
        """Return the fallback components of ``section_id`` (possibly empty)."""
        return list(self.components.get(section_id, ()))


def _component(
    section_id: str, component_id: str, name: str, series: list[tuple[str, str]]
) -> ComponentItem:
    return ComponentItem(
        id=component_id,
        name=name,
        section_id=section_id,
        series=tuple(Series(id=sid, title=title) for sid, title in series),
    )


DEFAULT_FALLBACK = FallbackDataset(
    sections=(
        Section(id="singing", name="Singing"),
        Section(id="acting", name="Acting"),
    ),
    components={
        "singing": (
            _component(
                "singing",
                "vocals",
                "Vocal Warmups",
                [("vw-1", "Lip Trills"), ("vw-2", "Humming Scales"), ("vw-3", "Sirens")],
            ),
            _component(
                "singing",
                "breathing",
                "Breathing Exercises",
                [
                    ("be-1", "Box Breathing"),
                    ("be-2", "Diaphragmatic Breathing"),
                    ("be-3", "Sustained Notes"),
                ],
            ),
            _component(
                "singing",
                "pitch",
                "Pitch Training",
                [("pt-1", "Intervals"), ("pt-2", "Arpeggios")],
            ),
        ),
        "acting": (
            _component(
                "acting",
                "method",
                "Method Acting Basics",
                [("ma-1", "Sense Memory"), ("ma-2", "Emotional Recall")],
            ),
            _component(
                "acting",
                "scenes",
                "Scene Study",
                [
                    ("ss-1", "Beat Breakdown"),
                    ("ss-2", "Objective & Obstacle"),
                    ("ss-3", "Tactics"),
                ],
            ),
        ),
    },
)


class SectionCatalogFetcher:
    """Retrieve sections and per-section component catalogs."""

    def __init__(
        self,
        client: CatalogApiClient,
        *,
        policy: FailurePolicy = FailurePolicy.PROPAGATE,
        fallback: FallbackDataset = DEFAULT_FALLBACK,
    ) -> None:
        self.client = client
        self.policy = policy
        self.fallback = fallback

    def fetch_sections(self, *, policy: FailurePolicy | None = None) -> list[Section]:
        """Return the sections listed by the header endpoint.

        Tabs without a ``pageId`` are dropped. Under the ``FALLBACK`` policy
        a failed request yields the fallback sections unchanged.
        """
        try:
            tabs = self.client.fetch_tabs()
        except CatalogApiError as exc:
            if self._resolve(policy) is FailurePolicy.PROPAGATE:
                raise
            logger.warning("Using fallback sections: %s", exc)
            return list(self.fallback.sections)
        return _sections_from_tabs(tabs)

    def fetch_components(
        self, section_id: str, *, policy: FailurePolicy | None = None
    ) -> list[ComponentItem]:
        """Return the normalized components of ``section_id`` in upstream order.

        Components repeating an earlier component id are dropped. Under the
        ``FALLBACK`` policy a failed request yields the fallback components
        for the section (an empty list for unknown sections).
        """
        try:
            raw_components = self.client.fetch_page_components(section_id)
        except CatalogApiError as exc:
            if self._resolve(policy) is FailurePolicy.PROPAGATE:
                raise
            logger.warning(
                "Using fallback components for section '%s': %s", section_id, exc
            )
            return self.fallback.components_for(section_id)

        components: list[ComponentItem] = []
        seen: set[str] = set()
        for raw in raw_components:
            if not isinstance(raw, cabc.Mapping):
                continue
            item = normalize(raw, section_id)
            if item.id in seen:
                logger.warning(
                    "Dropping duplicate component '%s' in section '%s'",
                    item.id,
                    section_id,
                )
                continue
            seen.add(item.id)
            components.append(item)
        return components

    def _resolve(self, policy: FailurePolicy | None) -> FailurePolicy:
        return self.policy if policy is None else policy


def _sections_from_tabs(tabs: list[typ.Any]) -> list[Section]:
    sections: list[Section] = []
    for tab in tabs:
        if not isinstance(tab, cabc.Mapping):
            continue
        page_id = coerce_id(tab.get("pageId"))
        if page_id is None:
            continue
        name = tab.get("name")
        sections.append(Section(id=page_id, name=str(name) if name else page_id))
    return sections


__all__ = [
    "DEFAULT_FALLBACK",
    "FailurePolicy",
    "FallbackDataset",
    "SectionCatalogFetcher",
]

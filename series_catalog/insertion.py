"""Series insertion requests and the "all series" browsing helpers.

A caller browses candidate series (for example with :func:`browse_series`),
collects a :class:`SeriesSelection` seeded with the target component's
current series, and turns it into an :class:`InsertionRequest` with
:func:`build_insertion`. Building a request never touches the catalog
store; after the backend accepts it the caller re-fetches or merges.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from .commit import oid
from .models import Catalog, ComponentItem, Series


@dc.dataclass(frozen=True, slots=True)
class InsertionRequest:
    """Target component, tag, order, and final series set of an insertion."""

    section_id: str
    component_id: str
    tag: str | None
    order: int
    series: tuple[Series, ...]

    def to_wire(self) -> dict[str, typ.Any]:
        """Return the JSON body for the insertion endpoint."""
        return {
            "componentId": oid(self.component_id),
            "tag": self.tag,
            "order": self.order,
            "series": [
                {"seriesId": oid(entry.id), "order": position}
                for position, entry in enumerate(self.series, start=1)
            ],
        }


class SeriesSelection:
    """An ordered set of chosen series, unique by id.

    Seeding the selection with a component's current series makes selecting
    one of them again a no-op.
    """

    def __init__(self, initial: cabc.Iterable[Series] = ()) -> None:
        self._chosen: dict[str, Series] = {}
        for entry in initial:
            self.select(entry)

    @classmethod
    def for_component(cls, component: ComponentItem) -> SeriesSelection:
        return cls(component.series)

    def __contains__(self, series_id: object) -> bool:
        return series_id in self._chosen

    def __len__(self) -> int:
        return len(self._chosen)

    def select(self, entry: Series) -> bool:
        """Add ``entry``; return ``False`` if its id was already selected."""
        if entry.id in self._chosen:
            return False
        self._chosen[entry.id] = entry
        return True

    def deselect(self, series_id: str) -> bool:
        """Remove ``series_id``; return ``False`` if it was not selected."""
        return self._chosen.pop(series_id, None) is not None

    def toggle(self, entry: Series) -> bool:
        """Flip the selection of ``entry`` and return whether it is now selected."""
        if self.deselect(entry.id):
            return False
        self.select(entry)
        return True

    def as_tuple(self) -> tuple[Series, ...]:
        return tuple(self._chosen.values())


def build_insertion(
    section_id: str,
    tag: str | None,
    component_id: str,
    order: int,
    selected_series: cabc.Iterable[Series] | SeriesSelection,
) -> InsertionRequest:
    """Return the insertion request for ``selected_series``.

    Parameters
    ----------
    section_id : str
        Section owning the target component.
    tag : str or None
        Tag to record on the component.
    component_id : str
        Component receiving the series.
    order : int
        1-based position the component should occupy.
    selected_series : Iterable[Series] or SeriesSelection
        Final series set in display order; repeated ids keep their first
        occurrence.

    Raises
    ------
    ValueError
        If ``section_id`` or ``component_id`` is blank or ``order`` is below 1.
    """
    if not section_id.strip() or not component_id.strip():
        msg = "Insertion requires both a section id and a component id"
        raise ValueError(msg)
    if order < 1:
        msg = f"Insertion order must be 1 or greater, got {order}"
        raise ValueError(msg)

    if isinstance(selected_series, SeriesSelection):
        series = selected_series.as_tuple()
    else:
        series = SeriesSelection(selected_series).as_tuple()

    return InsertionRequest(
        section_id=section_id,
        component_id=component_id,
        tag=tag,
        order=order,
        series=series,
    )


@dc.dataclass(frozen=True, slots=True)
class SeriesListing:
    """A browsable series with the title shown for it."""

    series: Series
    position: int
    display_title: str


def browse_series(catalog: Catalog) -> list[SeriesListing]:
    """List every distinct series of ``catalog`` in component order.

    Untitled series are displayed as ``Series <position>``.
    """
    listings: list[SeriesListing] = []
    seen: set[str] = set()
    for component in catalog.components:
        for entry in component.series:
            if entry.id in seen:
                continue
            seen.add(entry.id)
            position = len(listings) + 1
            listings.append(
                SeriesListing(
                    series=entry,
                    position=position,
                    display_title=entry.title or f"Series {position}",
                )
            )
    return listings


__all__ = [
    "InsertionRequest",
    "SeriesListing",
    "SeriesSelection",
    "browse_series",
    "build_insertion",
]

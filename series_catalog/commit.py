"""Build the order-commit payload sent back to the content backend.

:func:`build_commit_payload` reads nothing but the positions of components
and series in a :class:`Catalog`; ``order`` values are always recomputed as
1-based indexes, so the payload mirrors the live order no matter how the
catalog was assembled.

Example
-------
>>> from series_catalog.models import Catalog, ComponentItem, Series
>>> catalog = Catalog("s", (ComponentItem("a", "A", "s", series=(Series("x"),)),))
>>> build_commit_payload(catalog).to_wire()["components"][0]["order"]
1
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import OID_KEY
from .models import Catalog, ComponentItem, Series


@dc.dataclass(frozen=True, slots=True)
class CommitSeries:
    """Position of one series inside its component."""

    series_id: str
    order: int


@dc.dataclass(frozen=True, slots=True)
class CommitComponent:
    """Position, tag, and series order of one component."""

    component_id: str
    order: int
    tag: str | None
    series: tuple[CommitSeries, ...]


@dc.dataclass(frozen=True, slots=True)
class CommitPayload:
    """The full order of one section as submitted to the update endpoint."""

    section_id: str
    components: tuple[CommitComponent, ...]

    def to_wire(self) -> dict[str, typ.Any]:
        """Return the JSON body, with identifiers in ``{"$oid": ...}`` envelopes."""
        return {
            "components": [
                {
                    "componentId": oid(component.component_id),
                    "order": component.order,
                    "tag": component.tag,
                    "series": [
                        {"seriesId": oid(entry.series_id), "order": entry.order}
                        for entry in component.series
                    ],
                }
                for component in self.components
            ]
        }

    def components_as_items(self) -> list[ComponentItem]:
        """Re-materialize the payload as components in payload order.

        Names and media are not part of the payload, so the component id
        stands in for the name and series carry only their identifiers.
        """
        ordered = sorted(self.components, key=lambda component: component.order)
        return [
            ComponentItem(
                id=component.component_id,
                name=component.component_id,
                section_id=self.section_id,
                tag=component.tag,
                series=tuple(
                    Series(id=entry.series_id)
                    for entry in sorted(component.series, key=lambda s: s.order)
                ),
            )
            for component in ordered
        ]


def build_commit_payload(catalog: Catalog) -> CommitPayload:
    """Return the commit payload for the current order of ``catalog``."""
    return CommitPayload(
        section_id=catalog.section_id,
        components=tuple(
            CommitComponent(
                component_id=component.id,
                order=position,
                tag=component.tag,
                series=tuple(
                    CommitSeries(series_id=entry.id, order=series_position)
                    for series_position, entry in enumerate(component.series, start=1)
                ),
            )
            for position, component in enumerate(catalog.components, start=1)
        ),
    )


def oid(identifier: str) -> dict[str, str]:
    """Wrap ``identifier`` in the backend's object-id envelope."""
    return {OID_KEY: identifier}


__all__ = [
    "CommitComponent",
    "CommitPayload",
    "CommitSeries",
    "build_commit_payload",
    "oid",
]

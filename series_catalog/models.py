"""Typed dataclasses describing sections, components, and their series.

Every value here is immutable: reordering produces new :class:`Catalog`
instances rather than editing lists in place, so unaffected components keep
their identity across moves.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc


class CatalogIntegrityError(ValueError):
    """Raised when a catalog would violate its uniqueness or ownership rules."""


@dc.dataclass(frozen=True, slots=True)
class Section:
    """A top-level grouping sourced from an upstream tab.

    Attributes
    ----------
    id : str
        Backend page identifier of the tab.
    name : str
        Human-friendly tab label.
    """

    id: str
    name: str


@dc.dataclass(frozen=True, slots=True)
class Series:
    """The smallest orderable item shown to end users.

    Attributes
    ----------
    id : str
        Backend-assigned identifier; its source depends on the component kind.
    title : str | None
        Display title when the upstream record carries one.
    media_url : str | None
        Thumbnail or banner URL when the upstream record carries one.
    """

    id: str
    title: str | None = None
    media_url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ComponentItem:
    """A display component and its ordered series."""

    id: str
    name: str
    section_id: str
    tag: str | None = None
    series: tuple[Series, ...] = ()

    def series_ids(self) -> list[str]:
        """Return the series identifiers in their current order."""
        return [entry.id for entry in self.series]


@dc.dataclass(frozen=True, slots=True)
class Catalog:
    """The ordered components of one section."""

    section_id: str
    components: tuple[ComponentItem, ...] = ()

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> cabc.Iterator[ComponentItem]:
        return iter(self.components)

    def component_ids(self) -> list[str]:
        """Return the component identifiers in their current order."""
        return [component.id for component in self.components]

    def index_of(self, component_id: str) -> int | None:
        """Return the position of ``component_id`` or ``None`` when absent."""
        for index, component in enumerate(self.components):
            if component.id == component_id:
                return index
        return None

    def get(self, component_id: str) -> ComponentItem | None:
        """Return the component named ``component_id`` or ``None``."""
        index = self.index_of(component_id)
        if index is None:
            return None
        return self.components[index]


def check_integrity(catalog: Catalog) -> None:
    """Raise :class:`CatalogIntegrityError` if ``catalog`` breaks an invariant.

    Component identifiers must be unique within the catalog, series
    identifiers unique within their component, and every component must
    belong to the catalog's section.
    """
    seen_components: set[str] = set()
    for component in catalog.components:
        if component.section_id != catalog.section_id:
            msg = (
                f"Component '{component.id}' belongs to section "
                f"'{component.section_id}', not '{catalog.section_id}'"
            )
            raise CatalogIntegrityError(msg)
        if component.id in seen_components:
            msg = (
                f"Duplicate component id '{component.id}' in section "
                f"'{catalog.section_id}'"
            )
            raise CatalogIntegrityError(msg)
        seen_components.add(component.id)

        seen_series: set[str] = set()
        for entry in component.series:
            if entry.id in seen_series:
                msg = (
                    f"Duplicate series id '{entry.id}' in component "
                    f"'{component.id}'"
                )
                raise CatalogIntegrityError(msg)
            seen_series.add(entry.id)


__all__ = [
    "Catalog",
    "CatalogIntegrityError",
    "ComponentItem",
    "Section",
    "Series",
    "check_integrity",
]

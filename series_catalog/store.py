"""Ordered catalog operations and the per-section catalog store.

The move functions are pure permutations: each returns a new
:class:`Catalog` holding exactly the same component and series objects in a
new order. Out-of-range or equal indices, and unknown component ids, leave
the order untouched.

Examples
--------
>>> from series_catalog.models import Catalog, ComponentItem
>>> catalog = Catalog("s", tuple(ComponentItem(c, c, "s") for c in "abc"))
>>> move_component(catalog, 0, 2).component_ids()
['b', 'c', 'a']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from .models import Catalog, ComponentItem, check_integrity

T = typ.TypeVar("T")


def _move(items: tuple[T, ...], from_index: int, to_index: int) -> tuple[T, ...]:
    size = len(items)
    if from_index == to_index:
        return items
    if not (0 <= from_index < size and 0 <= to_index < size):
        return items
    reordered = list(items)
    moved = reordered.pop(from_index)
    reordered.insert(to_index, moved)
    return tuple(reordered)


def move_component(catalog: Catalog, from_index: int, to_index: int) -> Catalog:
    """Return ``catalog`` with the component at ``from_index`` moved to ``to_index``.

    Components between the two positions shift by one. Equal or
    out-of-range indices return an unchanged catalog.
    """
    components = _move(catalog.components, from_index, to_index)
    if components is catalog.components:
        return catalog
    return dc.replace(catalog, components=components)


def move_series(
    catalog: Catalog, component_id: str, from_index: int, to_index: int
) -> Catalog:
    """Return ``catalog`` with one component's series reordered.

    Only the component named ``component_id`` is replaced; every other
    component object is carried over as-is. An unknown ``component_id`` or
    equal/out-of-range indices return an unchanged catalog.
    """
    index = catalog.index_of(component_id)
    if index is None:
        return catalog
    component = catalog.components[index]
    series = _move(component.series, from_index, to_index)
    if series is component.series:
        return catalog
    components = list(catalog.components)
    components[index] = dc.replace(component, series=series)
    return dc.replace(catalog, components=tuple(components))


def replace_catalog(catalog: Catalog, items: cabc.Iterable[ComponentItem]) -> Catalog:
    """Return a catalog for the same section holding exactly ``items``.

    Raises
    ------
    CatalogIntegrityError
        If ``items`` repeat a component id, repeat a series id within a
        component, or belong to a different section.
    """
    replaced = Catalog(section_id=catalog.section_id, components=tuple(items))
    check_integrity(replaced)
    return replaced


class CatalogStore:
    """Own the working catalog of each section for one editing session.

    Alongside each working catalog the store keeps a baseline: the catalog as
    last fetched or successfully committed. :meth:`is_dirty` compares the
    two.
    """

    def __init__(self) -> None:
        self._catalogs: dict[str, Catalog] = {}
        self._baselines: dict[str, Catalog] = {}

    def __contains__(self, section_id: object) -> bool:
        return section_id in self._catalogs

    def create(self, section_id: str) -> Catalog:
        """Register an empty catalog for ``section_id`` and return it."""
        catalog = Catalog(section_id=section_id)
        self._catalogs[section_id] = catalog
        self._baselines[section_id] = catalog
        return catalog

    def get(self, section_id: str) -> Catalog | None:
        """Return the working catalog of ``section_id`` if one exists."""
        return self._catalogs.get(section_id)

    def replace(self, section_id: str, items: cabc.Iterable[ComponentItem]) -> Catalog:
        """Replace the catalog of ``section_id`` wholesale, as after a fetch."""
        current = self._catalogs.get(section_id) or Catalog(section_id=section_id)
        catalog = replace_catalog(current, items)
        self._catalogs[section_id] = catalog
        self._baselines[section_id] = catalog
        return catalog

    def update(self, catalog: Catalog) -> Catalog:
        """Store a reordered ``catalog`` as the working copy of its section."""
        if catalog.section_id not in self._catalogs:
            msg = f"No catalog loaded for section '{catalog.section_id}'"
            raise KeyError(msg)
        self._catalogs[catalog.section_id] = catalog
        return catalog

    def mark_committed(self, catalog: Catalog) -> None:
        """Record ``catalog`` as the state the backend now holds."""
        self._baselines[catalog.section_id] = catalog

    def baseline(self, section_id: str) -> Catalog | None:
        """Return the last fetched or committed catalog of ``section_id``."""
        return self._baselines.get(section_id)

    def is_dirty(self, section_id: str) -> bool:
        """Return whether the working order differs from the baseline."""
        current = self._catalogs.get(section_id)
        baseline = self._baselines.get(section_id)
        if current is None or baseline is None:
            return False
        return current != baseline

    def discard(self, section_id: str) -> None:
        """Forget everything held for ``section_id``."""
        self._catalogs.pop(section_id, None)
        self._baselines.pop(section_id, None)


__all__ = ["CatalogStore", "move_component", "move_series", "replace_catalog"]

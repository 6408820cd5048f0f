"""Async editing session coordinating fetches, moves, commits, and insertions.

An :class:`EditingSession` is the single owner of the mutable editing state
for one user. It is driven from one asyncio event loop: fetches and commits
are coroutines that suspend only while the blocking HTTP call runs, and moves
are plain synchronous methods, so two moves never interleave and no move can
observe a half-applied fetch.

Two rules keep that state consistent:

* A components fetch remembers which selection started it. If the selection
  changed before the fetch resolved, the result is discarded.
* Only one commit may be in flight. :attr:`EditingSession.commit_in_progress`
  lets a presentation layer disable its submit control; a second
  :meth:`EditingSession.commit` raises :class:`CommitInProgressError`.

Example
-------
>>> import asyncio
>>> from series_catalog.session import EditingSession
>>> session = EditingSession(fetcher)  # doctest: +SKIP
>>> asyncio.run(session.load_sections())  # doctest: +SKIP
>>> session.move_component(0, 2)  # doctest: +SKIP
True
>>> asyncio.run(session.commit())  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import typing as typ

from .client import CatalogApiError
from .commit import CommitPayload, build_commit_payload
from .insertion import InsertionRequest, SeriesSelection, build_insertion
from .store import CatalogStore, move_component, move_series

if typ.TYPE_CHECKING:
    from .fetcher import FailurePolicy, SectionCatalogFetcher
    from .models import Catalog, Section, Series

logger = logging.getLogger(__name__)


class CommitInProgressError(RuntimeError):
    """Raised when a commit is requested while another one is in flight."""


class CatalogNotReadyError(RuntimeError):
    """Raised when no catalog is available for the selected section."""


class NoticeKind(enum.StrEnum):
    """Kinds of user-facing acknowledgements emitted by a session."""

    COMPONENTS_REORDERED = "components-reordered"
    SERIES_REORDERED = "series-reordered"
    COMMIT_SUCCEEDED = "commit-succeeded"
    COMMIT_FAILED = "commit-failed"
    INSERT_SUCCEEDED = "insert-succeeded"
    INSERT_FAILED = "insert-failed"
    RELOAD_SKIPPED = "reload-skipped"
    RELOAD_FAILED = "reload-failed"


@dc.dataclass(frozen=True, slots=True)
class Notice:
    """A user-facing acknowledgement of a move, commit, or insertion."""

    kind: NoticeKind
    section_id: str
    message: str

    @property
    def is_error(self) -> bool:
        return self.kind in {
            NoticeKind.COMMIT_FAILED,
            NoticeKind.INSERT_FAILED,
            NoticeKind.RELOAD_FAILED,
        }


class EditingSession:
    """Hold the selected section's catalog and apply the user's edits to it."""

    def __init__(
        self,
        fetcher: SectionCatalogFetcher,
        *,
        store: CatalogStore | None = None,
        on_notice: cabc.Callable[[Notice], None] | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.store = store or CatalogStore()
        self.sections: list[Section] = []
        self.notices: list[Notice] = []
        self._on_notice = on_notice
        self._selected: str | None = None
        self._generation = 0
        self._loading: str | None = None
        self._commit_in_progress = False

    @property
    def selected_section(self) -> str | None:
        return self._selected

    @property
    def commit_in_progress(self) -> bool:
        return self._commit_in_progress

    @property
    def loading(self) -> bool:
        """Whether the selected section's components are still being fetched."""
        return self._loading is not None and self._loading == self._selected

    @property
    def catalog(self) -> Catalog | None:
        """Return the working catalog of the selected section, if loaded."""
        if self._selected is None or self.loading:
            return None
        return self.store.get(self._selected)

    async def load_sections(
        self, *, policy: FailurePolicy | None = None
    ) -> list[Section]:
        """Fetch the section list and select the first section if none is selected."""
        sections = await asyncio.to_thread(self.fetcher.fetch_sections, policy=policy)
        self.sections = sections
        if self._selected is None and sections:
            await self.select_section(sections[0].id, policy=policy)
        return sections

    async def select_section(
        self, section_id: str, *, policy: FailurePolicy | None = None
    ) -> Catalog | None:
        """Select ``section_id`` and load its components.

        Returns
        -------
        Catalog or None
            The freshly stored catalog, or ``None`` when the selection moved
            on before the fetch resolved and the result was discarded.
        """
        self._generation += 1
        generation = self._generation
        self._selected = section_id
        self._loading = section_id
        try:
            items = await asyncio.to_thread(
                self.fetcher.fetch_components, section_id, policy=policy
            )
        except CatalogApiError:
            if generation != self._generation:
                logger.info("Ignoring failed stale fetch for section '%s'", section_id)
                return None
            raise
        finally:
            if generation == self._generation:
                self._loading = None

        if generation != self._generation:
            logger.info("Discarding stale components for section '%s'", section_id)
            return None
        return self.store.replace(section_id, items)

    async def reload(self, *, policy: FailurePolicy | None = None) -> Catalog | None:
        """Fetch the selected section again, replacing its working catalog."""
        if self._selected is None:
            msg = "No section is selected"
            raise CatalogNotReadyError(msg)
        return await self.select_section(self._selected, policy=policy)

    def move_component(self, from_index: int, to_index: int) -> bool:
        """Move a component within the selected catalog; return whether it moved."""
        catalog = self._require_catalog()
        moved = move_component(catalog, from_index, to_index)
        if moved is catalog:
            return False
        self.store.update(moved)
        self._notify(
            NoticeKind.COMPONENTS_REORDERED,
            catalog.section_id,
            "Components order updated",
        )
        return True

    def move_component_by_id(self, active_id: str, over_id: str) -> bool:
        """Move component ``active_id`` into the position held by ``over_id``."""
        catalog = self._require_catalog()
        if active_id == over_id:
            return False
        from_index = catalog.index_of(active_id)
        to_index = catalog.index_of(over_id)
        if from_index is None or to_index is None:
            return False
        return self.move_component(from_index, to_index)

    def move_series(self, component_id: str, from_index: int, to_index: int) -> bool:
        """Move a series within one component; return whether it moved."""
        catalog = self._require_catalog()
        moved = move_series(catalog, component_id, from_index, to_index)
        if moved is catalog:
            return False
        self.store.update(moved)
        self._notify(
            NoticeKind.SERIES_REORDERED,
            catalog.section_id,
            f"Series order updated in '{component_id}'",
        )
        return True

    def move_series_by_id(
        self, component_id: str, active_id: str, over_id: str
    ) -> bool:
        """Move series ``active_id`` into the position held by ``over_id``."""
        catalog = self._require_catalog()
        component = catalog.get(component_id)
        if component is None or active_id == over_id:
            return False
        series_ids = component.series_ids()
        if active_id not in series_ids or over_id not in series_ids:
            return False
        return self.move_series(
            component_id, series_ids.index(active_id), series_ids.index(over_id)
        )

    async def commit(self) -> CommitPayload:
        """Submit the selected catalog's order to the backend.

        On success the submitted catalog becomes the store's baseline for the
        section. On failure a ``COMMIT_FAILED`` notice is recorded, the error
        propagates, and the store is left exactly as it was.

        Raises
        ------
        CommitInProgressError
            If another commit has not resolved yet.
        CatalogNotReadyError
            If the selected section has no loaded catalog.
        CatalogApiError
            If the backend rejects or cannot receive the commit.
        """
        if self._commit_in_progress:
            msg = "A commit is already in progress"
            raise CommitInProgressError(msg)
        catalog = self._require_catalog()
        payload = build_commit_payload(catalog)

        self._commit_in_progress = True
        try:
            await asyncio.to_thread(
                self.fetcher.client.submit_order,
                catalog.section_id,
                payload.to_wire(),
            )
        except CatalogApiError as exc:
            self._notify(
                NoticeKind.COMMIT_FAILED,
                catalog.section_id,
                f"Saving the order failed: {exc}",
            )
            raise
        finally:
            self._commit_in_progress = False

        self.store.mark_committed(catalog)
        self._notify(
            NoticeKind.COMMIT_SUCCEEDED, catalog.section_id, "Order saved"
        )
        return payload

    def selection_for(self, component_id: str) -> SeriesSelection:
        """Return a selection seeded with ``component_id``'s current series."""
        catalog = self._require_catalog()
        component = catalog.get(component_id)
        if component is None:
            msg = f"Unknown component '{component_id}' in section '{catalog.section_id}'"
            raise KeyError(msg)
        return SeriesSelection.for_component(component)

    async def insert_series(
        self,
        component_id: str,
        selected: cabc.Iterable[Series] | SeriesSelection,
        *,
        order: int | None = None,
        tag: str | None = None,
        reconcile: bool = True,
    ) -> InsertionRequest:
        """Send an insertion for ``component_id`` and optionally re-fetch.

        ``order`` and ``tag`` default to the component's current position and
        tag. The working catalog is not edited locally; with ``reconcile``
        the section is fetched again once the backend accepts the request.
        The re-fetch is skipped while the section holds uncommitted moves,
        and a failed re-fetch is reported as a notice rather than raised:
        the insertion itself has already been accepted.
        """
        catalog = self._require_catalog()
        index = catalog.index_of(component_id)
        if index is None:
            msg = f"Unknown component '{component_id}' in section '{catalog.section_id}'"
            raise KeyError(msg)
        component = catalog.components[index]
        request = build_insertion(
            catalog.section_id,
            tag if tag is not None else component.tag,
            component_id,
            order if order is not None else index + 1,
            selected,
        )

        try:
            await asyncio.to_thread(
                self.fetcher.client.submit_insertion,
                request.section_id,
                request.to_wire(),
            )
        except CatalogApiError as exc:
            self._notify(
                NoticeKind.INSERT_FAILED,
                request.section_id,
                f"Adding series to '{component_id}' failed: {exc}",
            )
            raise

        self._notify(
            NoticeKind.INSERT_SUCCEEDED,
            request.section_id,
            f"Series added to '{component_id}'",
        )
        if reconcile and self._selected == request.section_id:
            await self._reconcile(request.section_id)
        return request

    async def _reconcile(self, section_id: str) -> None:
        if self.store.is_dirty(section_id):
            self._notify(
                NoticeKind.RELOAD_SKIPPED,
                section_id,
                "Reload skipped to keep unsaved order changes",
            )
            return
        try:
            await self.reload()
        except CatalogApiError as exc:
            self._notify(
                NoticeKind.RELOAD_FAILED,
                section_id,
                f"Reloading '{section_id}' after the insertion failed: {exc}",
            )

    def _require_catalog(self) -> Catalog:
        if self._selected is None:
            msg = "No section is selected"
            raise CatalogNotReadyError(msg)
        if self.loading:
            msg = f"Components for section '{self._selected}' are still loading"
            raise CatalogNotReadyError(msg)
        catalog = self.store.get(self._selected)
        if catalog is None:
            msg = f"No catalog loaded for section '{self._selected}'"
            raise CatalogNotReadyError(msg)
        return catalog

    def _notify(self, kind: NoticeKind, section_id: str, message: str) -> None:
        notice = Notice(kind=kind, section_id=section_id, message=message)
        self.notices.append(notice)
        if notice.is_error:
            logger.error("%s: %s", section_id, message)
        else:
            logger.info("%s: %s", section_id, message)
        if self._on_notice is not None:
            self._on_notice(notice)


__all__ = [
    "CatalogNotReadyError",
    "CommitInProgressError",
    "EditingSession",
    "Notice",
    "NoticeKind",
]

"""Cyclopts CLI entrypoint for inspecting and reordering section catalogs.

The ``catalog`` console script defined here lists sections, prints a
section's components and series, browses every series of a section, and
applies component or series moves before committing the new order to the
content backend. Endpoints come from ``config/catalog.yaml``; the API token
comes from ``--api-token`` or ``CATALOG_API_TOKEN``.

Examples
--------
Preview the payload for moving the first component to third place:

>>> from series_catalog.cli import app
>>> app.run(
...     ["reorder", "--section", "singing", "--move-component", "0:2", "--dry-run"]
... )  # doctest: +SKIP

Commit a series move inside the ``vocals`` component:

>>> app.run(
...     ["reorder", "--section", "singing", "--move-series", "vocals:2:0"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import typing as typ
from pathlib import Path

import cyclopts
import msgspec.json as msgspec_json
from cyclopts import App, Parameter

from .client import CatalogApiClient, CatalogApiError
from .commit import build_commit_payload
from .config import load_catalog_config
from .fetcher import FailurePolicy, SectionCatalogFetcher
from .insertion import browse_series, build_insertion
from .models import Series
from .session import EditingSession, Notice

if typ.TYPE_CHECKING:
    from .models import Catalog

DEFAULT_CONFIG = Path("config/catalog.yaml")

app = App(name="catalog", config=cyclopts.config.Env("CATALOG_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to catalog config", env_var="CATALOG_CONFIG")
]
TokenOption = typ.Annotated[
    str | None,
    Parameter(
        help="Bearer token (falls back to CATALOG_API_TOKEN)",
        env_var="CATALOG_API_TOKEN",
    ),
]
PolicyOption = typ.Annotated[
    FailurePolicy | None,
    Parameter(help="Override the configured fetch failure policy"),
]


def _print_notice(notice: Notice) -> None:
    stream = sys.stderr if notice.is_error else sys.stdout
    prefix = "error" if notice.is_error else "ok"
    print(f"{prefix}: {notice.message}", file=stream)


def build_session(
    config: Path,
    *,
    api_token: str | None = None,
    failure_policy: FailurePolicy | None = None,
) -> EditingSession:
    """Build an :class:`EditingSession` wired to the configured endpoints."""
    catalog_config = load_catalog_config(config)
    token = api_token or os.getenv("CATALOG_API_TOKEN")
    client = CatalogApiClient(
        header_api=catalog_config.api.header_api,
        page_api=catalog_config.api.page_api,
        update_comp_api=catalog_config.api.update_comp_api,
        insert_series_api=catalog_config.api.insert_series_api,
        token=token,
        timeout=catalog_config.api.timeout,
    )
    fetcher = SectionCatalogFetcher(
        client,
        policy=failure_policy or catalog_config.failure_policy,
        fallback=catalog_config.fallback,
    )
    return EditingSession(fetcher, on_notice=_print_notice)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _load(session: EditingSession, section: str) -> Catalog:
    catalog = asyncio.run(session.select_section(section))
    if catalog is None:  # pragma: no cover - single selection cannot go stale
        msg = f"Components for section '{section}' were discarded"
        raise RuntimeError(msg)
    return catalog


def _parse_component_move(value: str) -> tuple[int, int]:
    try:
        source, target = value.split(":")
        return int(source), int(target)
    except ValueError as exc:
        msg = f"Component moves look like FROM:TO, got {value!r}"
        raise ValueError(msg) from exc


def _parse_series_move(value: str) -> tuple[str, int, int]:
    try:
        component_id, source, target = value.rsplit(":", 2)
        return component_id, int(source), int(target)
    except ValueError as exc:
        msg = f"Series moves look like COMPONENT:FROM:TO, got {value!r}"
        raise ValueError(msg) from exc


def _dump(body: dict[str, typ.Any]) -> str:
    return msgspec_json.format(msgspec_json.encode(body), indent=2).decode("utf-8")


@app.command(help="List the sections exposed by the content API.")
def sections(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    api_token: TokenOption = None,
    failure_policy: PolicyOption = None,
    verbose: bool = False,
) -> None:
    """Print one ``id: name`` line per section."""
    _configure_logging(verbose)
    session = build_session(
        config, api_token=api_token, failure_policy=failure_policy
    )
    for section in session.fetcher.fetch_sections():
        print(f"{section.id}: {section.name}")


@app.command(help="Show the ordered components and series of a section.")
def show(
    *,
    section: typ.Annotated[str, Parameter(help="Section id")],
    config: ConfigOption = DEFAULT_CONFIG,
    api_token: TokenOption = None,
    failure_policy: PolicyOption = None,
    verbose: bool = False,
) -> None:
    """Print each component with its position, tag, and series."""
    _configure_logging(verbose)
    session = build_session(
        config, api_token=api_token, failure_policy=failure_policy
    )
    catalog = _load(session, section)
    if not catalog.components:
        print("No components found.")
        return
    for position, component in enumerate(catalog.components, start=1):
        tag = f" [{component.tag}]" if component.tag else ""
        print(f"{position}. {component.name} ({component.id}){tag}")
        if not component.series:
            print("    No series.")
        for series_position, entry in enumerate(component.series, start=1):
            print(f"    {series_position}. {entry.title or 'Untitled'} ({entry.id})")


@app.command(name="series", help="Browse every series of a section.")
def browse(
    *,
    section: typ.Annotated[str, Parameter(help="Section id")],
    config: ConfigOption = DEFAULT_CONFIG,
    api_token: TokenOption = None,
    failure_policy: PolicyOption = None,
    verbose: bool = False,
) -> None:
    """Print the distinct series of a section in display order."""
    _configure_logging(verbose)
    session = build_session(
        config, api_token=api_token, failure_policy=failure_policy
    )
    listings = browse_series(_load(session, section))
    print(f"{len(listings)} items")
    for listing in listings:
        media = f" {listing.series.media_url}" if listing.series.media_url else ""
        print(f"{listing.position}. {listing.display_title} ({listing.series.id}){media}")


@app.command(help="Reorder components or series and commit the new order.")
def reorder(
    *,
    section: typ.Annotated[str, Parameter(help="Section id")],
    move_component: typ.Annotated[
        list[str] | None,
        Parameter(help="Component move as FROM:TO (zero-based, repeatable)"),
    ] = None,
    move_series: typ.Annotated[
        list[str] | None,
        Parameter(help="Series move as COMPONENT:FROM:TO (zero-based, repeatable)"),
    ] = None,
    dry_run: typ.Annotated[
        bool, Parameter(help="Print the commit payload instead of sending it")
    ] = False,
    config: ConfigOption = DEFAULT_CONFIG,
    api_token: TokenOption = None,
    failure_policy: PolicyOption = None,
    verbose: bool = False,
) -> None:
    """Apply the requested moves in order, then commit or print the payload.

    Raises
    ------
    SystemExit
        With status 1 when the backend rejects the commit; the failure is
        reported on stderr first.
    """
    _configure_logging(verbose)
    session = build_session(
        config, api_token=api_token, failure_policy=failure_policy
    )
    _load(session, section)

    for value in move_component or []:
        session.move_component(*_parse_component_move(value))
    for value in move_series or []:
        session.move_series(*_parse_series_move(value))

    catalog = session.catalog
    if catalog is None:  # pragma: no cover - loaded above
        msg = f"No catalog loaded for section '{section}'"
        raise RuntimeError(msg)
    if dry_run:
        print(_dump(build_commit_payload(catalog).to_wire()))
        return
    try:
        asyncio.run(session.commit())
    except CatalogApiError as exc:
        raise SystemExit(1) from exc


@app.command(help="Add series to a component through the insertion endpoint.")
def insert(
    *,
    section: typ.Annotated[str, Parameter(help="Section id")],
    component: typ.Annotated[str, Parameter(help="Target component id")],
    series: typ.Annotated[
        list[str], Parameter(help="Series id to add (repeatable)")
    ],
    order: typ.Annotated[
        int | None, Parameter(help="1-based target order of the component")
    ] = None,
    tag: typ.Annotated[str | None, Parameter(help="Tag for the component")] = None,
    dry_run: typ.Annotated[
        bool, Parameter(help="Print the insertion payload instead of sending it")
    ] = False,
    config: ConfigOption = DEFAULT_CONFIG,
    api_token: TokenOption = None,
    failure_policy: PolicyOption = None,
    verbose: bool = False,
) -> None:
    """Send the component's current series plus ``series`` as an insertion."""
    _configure_logging(verbose)
    session = build_session(
        config, api_token=api_token, failure_policy=failure_policy
    )
    catalog = _load(session, section)
    selection = session.selection_for(component)
    known = {listing.series.id: listing.series for listing in browse_series(catalog)}
    for series_id in series:
        selection.select(known.get(series_id, Series(id=series_id)))

    if dry_run:
        index = typ.cast("int", catalog.index_of(component))
        request = build_insertion(
            section,
            tag if tag is not None else catalog.components[index].tag,
            component,
            order if order is not None else index + 1,
            selection,
        )
        print(_dump(request.to_wire()))
        return
    try:
        asyncio.run(session.insert_series(component, selection, order=order, tag=tag))
    except CatalogApiError as exc:
        raise SystemExit(1) from exc


def main() -> None:
    """Invoke the Cyclopts application that powers the ``catalog`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

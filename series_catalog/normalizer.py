"""Map raw content-API components onto the uniform :class:`ComponentItem`.

:func:`normalize` is total: every record, whatever its ``componentKey``,
produces a component. Kinds without an extraction rule keep an empty series
list, and entries missing optional fields simply leave ``title`` or
``media_url`` unset.

Examples
--------
>>> from series_catalog.normalizer import normalize
>>> item = normalize({"_id": "c9", "componentKey": "brand-new-widget"}, "home")
>>> item.name, item.series
('brand-new-widget', ())
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

from .models import ComponentItem, Series
from .raw_components import (
    ActionButtonComponent,
    BannerComponent,
    CardComponent,
    CardEntry,
    FeatureBannerComponent,
    RawComponent,
    UnknownComponent,
    parse_raw_component,
)

logger = logging.getLogger(__name__)


def normalize(
    raw: RawComponent | cabc.Mapping[str, typ.Any], section_id: str
) -> ComponentItem:
    """Return the uniform component for one raw upstream record.

    Parameters
    ----------
    raw : RawComponent or Mapping[str, Any]
        Either a decoded JSON record from the page endpoint or a variant
        already produced by :func:`parse_raw_component`.
    section_id : str
        Section the component is being loaded for.

    Returns
    -------
    ComponentItem
        The component with its series in upstream order. Series whose
        identifier repeats an earlier entry are dropped so identifiers stay
        unique within the component.
    """
    if isinstance(raw, cabc.Mapping):
        raw = parse_raw_component(raw)

    return ComponentItem(
        id=raw.id,
        name=raw.title or raw.component_key,
        section_id=section_id,
        tag=raw.tag_name,
        series=_unique(_extract_series(raw)),
    )


def _extract_series(raw: RawComponent) -> list[Series]:
    match raw:
        case BannerComponent():
            return [Series(id=raw.id, title=raw.media_title, media_url=raw.media_url)]
        case ActionButtonComponent():
            return [
                Series(id=str(index), title=item.title, media_url=item.media_url)
                for index, item in enumerate(raw.items)
            ]
        case CardComponent():
            series: list[Series] = []
            for entry in raw.entries:
                series_id = card_series_id(entry)
                if series_id is None:
                    logger.warning("Skipping card entry without an id in '%s'", raw.id)
                    continue
                series.append(
                    Series(id=series_id, title=entry.title, media_url=entry.thumbnail)
                )
            return series
        case FeatureBannerComponent():
            banner_series: list[Series] = []
            for media in raw.media:
                if media.media_id is None:
                    logger.warning(
                        "Skipping feature media without a mediaId in '%s'", raw.id
                    )
                    continue
                banner_series.append(
                    Series(id=media.media_id, title=media.title, media_url=media.media_url)
                )
            return banner_series
        case UnknownComponent():
            return []
    typ.assert_never(raw)


def card_series_id(entry: CardEntry) -> str | None:
    """Return the series identifier of a card entry.

    ``taskDetail._id`` is authoritative. The top-level ``processId`` is only
    consulted when a payload carries no task detail at all.
    """
    if entry.task_id is not None:
        return entry.task_id
    return entry.process_id


def _unique(series: list[Series]) -> tuple[Series, ...]:
    seen: set[str] = set()
    kept: list[Series] = []
    for entry in series:
        if entry.id in seen:
            continue
        seen.add(entry.id)
        kept.append(entry)
    return tuple(kept)


__all__ = ["card_series_id", "normalize"]

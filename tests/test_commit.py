"""Unit tests for the commit payload builder."""

from __future__ import annotations

from series_catalog.commit import build_commit_payload
from series_catalog.models import Catalog, ComponentItem, Series
from series_catalog.store import move_component, move_series, replace_catalog


def test_orders_follow_positions_not_ids() -> None:
    catalog = Catalog(
        section_id="home",
        components=(
            ComponentItem("zz", "Z", "home"),
            ComponentItem("aa", "A", "home"),
            ComponentItem("mm", "M", "home"),
        ),
    )

    payload = build_commit_payload(catalog)

    assert [c.order for c in payload.components] == [1, 2, 3]
    assert [c.component_id for c in payload.components] == ["zz", "aa", "mm"]


def test_payload_reflects_moves(sample_catalog: Catalog) -> None:
    moved = move_series(move_component(sample_catalog, 0, 2), "c0", 0, 2)

    payload = build_commit_payload(moved)

    assert [(c.component_id, c.order) for c in payload.components] == [
        ("c1", 1),
        ("c2", 2),
        ("c0", 3),
    ]
    last = payload.components[2]
    assert [(s.series_id, s.order) for s in last.series] == [
        ("b", 1),
        ("c", 2),
        ("a", 3),
    ]
    assert last.tag == "hero"


def test_wire_shape_wraps_identifiers(sample_catalog: Catalog) -> None:
    body = build_commit_payload(sample_catalog).to_wire()

    assert body["components"][0] == {
        "componentId": {"$oid": "c0"},
        "order": 1,
        "tag": "hero",
        "series": [
            {"seriesId": {"$oid": "a"}, "order": 1},
            {"seriesId": {"$oid": "b"}, "order": 2},
            {"seriesId": {"$oid": "c"}, "order": 3},
        ],
    }
    assert body["components"][1]["tag"] is None, "expected missing tags as null"
    assert body["components"][1]["series"] == []


def test_round_trip_through_items_is_idempotent(sample_catalog: Catalog) -> None:
    payload = build_commit_payload(sample_catalog)

    rebuilt = replace_catalog(sample_catalog, payload.components_as_items())

    assert build_commit_payload(rebuilt) == payload


def test_end_to_end_reorder_of_two_components() -> None:
    catalog = Catalog(
        section_id="home",
        components=(
            ComponentItem("A", "A", "home", series=(Series("s1"), Series("s2"))),
            ComponentItem("B", "B", "home"),
        ),
    )

    body = build_commit_payload(move_component(catalog, 1, 0)).to_wire()

    assert body == {
        "components": [
            {"componentId": {"$oid": "B"}, "order": 1, "tag": None, "series": []},
            {
                "componentId": {"$oid": "A"},
                "order": 2,
                "tag": None,
                "series": [
                    {"seriesId": {"$oid": "s1"}, "order": 1},
                    {"seriesId": {"$oid": "s2"}, "order": 2},
                ],
            },
        ]
    }

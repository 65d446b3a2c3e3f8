import json
from pathlib import Path

import pytest

from opus_api.core import ClassAssignment, StoreError
from opus_api.data import InMemoryStyleStore


def test_from_json_seeds_every_table(tmp_path: Path) -> None:
    seed = {
        "styles": [{"id": "s1", "name": "Chill"}],
        "tracks": [
            {"style_id": "s1", "library_song_id": "t1", "sim_duration_seconds": 200},
            {"style_id": "s1", "library_song_id": "t2"},
        ],
        "assignments": [
            {
                "style_id": "s1",
                "library_song_id": "t1",
                "class_code": "A",
                "moved_at": "2025-01-01T00:00:00+00:00",
            }
        ],
        "weights": [{"style_id": "s1", "class_code": "A", "weight_pct": 100}],
    }
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(seed), encoding="utf-8")

    store = InMemoryStyleStore.from_json(path)

    assert store.list_styles() == [{"id": "s1", "name": "Chill"}]
    assert store.list_style_track_ids("s1", 10) == [
        {"library_song_id": "t1"},
        {"library_song_id": "t2"},
    ]
    assert store.list_assignments("s1") == [
        {"library_song_id": "t1", "class_code": "A", "moved_at": "2025-01-01T00:00:00+00:00"}
    ]
    assert store.list_weights("s1") == [{"class_code": "A", "weight_pct": 100}]


def test_from_json_missing_file_is_empty_store(tmp_path: Path) -> None:
    store = InMemoryStyleStore.from_json(tmp_path / "missing.json")
    assert store.list_styles() == []


def test_from_json_invalid_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{ not json", encoding="utf-8")
    with pytest.raises(StoreError):
        InMemoryStyleStore.from_json(path)


def test_upsert_overwrites_per_style_and_song() -> None:
    store = InMemoryStyleStore()
    store.upsert_assignments(
        [
            ClassAssignment(style_id="s1", library_song_id="t1", class_code="A"),
            ClassAssignment(style_id="s2", library_song_id="t1", class_code="B"),
        ]
    )
    store.upsert_assignments([ClassAssignment(style_id="s1", library_song_id="t1", class_code="C")])

    assert [a["class_code"] for a in store.list_assignments("s1")] == ["C"]
    assert [a["class_code"] for a in store.list_assignments("s2")] == ["B"]


def test_track_limit_is_applied() -> None:
    store = InMemoryStyleStore()
    for i in range(5):
        store.add_track("s1", f"t{i}")
    assert len(store.list_style_tracks("s1", 3)) == 3

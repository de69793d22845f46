import json

import pytest

from anilist_export.anilist.archive import (
    build_export,
    dedupe_by_id,
    load_archive,
    merge_user,
    prior_score_names,
    resume_start_page,
    write_archive,
)


def test_dedupe_last_wins():
    assert dedupe_by_id([{"id": 1, "v": "a"}, {"id": 1, "v": "b"}]) == [{"id": 1, "v": "b"}]


def test_dedupe_is_idempotent():
    records = [{"id": 2, "v": "x"}, {"id": 1, "v": "a"}, {"id": 2, "v": "y"}, {"id": 3, "v": "z"}]
    once = dedupe_by_id(records)
    assert dedupe_by_id(once) == once
    assert sorted(r["id"] for r in once) == [1, 2, 3]
    assert {r["id"]: r["v"] for r in once}[2] == "y"


def test_resume_start_page():
    assert resume_start_page(120) == 2
    assert resume_start_page(100) == 2
    assert resume_start_page(150, per_page=50) == 3
    assert resume_start_page(0) == 1
    assert resume_start_page(49) == 1


def test_merge_user_prior_fields_take_precedence():
    fresh = {"display_name": "new", "avatar_url": "new.png", "advanced_scores": {"active": True, "names": ["A"]}}
    prior = {"display_name": "curated"}

    merged = merge_user(fresh, prior)

    assert merged["display_name"] == "curated"
    assert merged["avatar_url"] == "new.png"
    assert merged["advanced_scores"] == {"active": True, "names": ["A"]}
    assert merge_user(fresh, None) == fresh
    assert merge_user(fresh, {}) == fresh


def test_build_export_prior_records_are_overridden_by_fresh_ones():
    prior = {
        "user": {"display_name": "old"},
        "lists": [{"id": i, "progress": 0} for i in range(1, 121)],
        "activity": [{"id": 1, "object_value": "1"}],
    }
    fresh_lists = [{"id": i, "progress": 5} for i in range(101, 131)]
    fresh_activity = [{"id": 1, "object_value": "2"}, {"id": 2, "object_value": "1"}]

    out = build_export({"display_name": "new"}, fresh_lists, fresh_activity, prior)

    ids = [entry["id"] for entry in out["lists"]]
    assert len(ids) == 130
    assert len(set(ids)) == 130
    progress = {entry["id"]: entry["progress"] for entry in out["lists"]}
    assert progress[100] == 0
    assert progress[101] == 5
    assert out["activity"] == [{"id": 1, "object_value": "2"}, {"id": 2, "object_value": "1"}]
    assert out["user"] == {"display_name": "old"}


def test_build_export_without_prior():
    out = build_export({"display_name": "me"}, [{"id": 1}], [{"id": 5}])
    assert out == {"user": {"display_name": "me"}, "lists": [{"id": 1}], "activity": [{"id": 5}]}


def test_load_archive_missing_file(tmp_path):
    assert load_archive(tmp_path / "nope.json") is None


def test_load_archive_unparsable_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_archive(path) is None


def test_load_archive_wrong_shape(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_archive(path) is None


def test_write_then_load_archive(tmp_path):
    path = tmp_path / "nested" / "data-export.json"
    output = {
        "user": {"display_name": "Élodie", "custom_lists": {"anime": [], "manga": []}},
        "lists": [{"id": 1}],
        "activity": [],
    }

    write_archive(path, output)

    text = path.read_text(encoding="utf-8")
    assert '\n  "user": {' in text
    assert "Élodie" in text
    assert json.loads(text) == output
    assert load_archive(path) == output


@pytest.mark.parametrize(
    "payload",
    [
        {"user": {}, "lists": [1, 2], "activity": []},
        {"user": {}, "lists": [{"no_id": 1}], "activity": []},
        {"user": {}, "lists": [], "activity": {"id": 1}},
        {"user": "alice", "lists": [], "activity": []},
    ],
)
def test_load_archive_rejects_malformed_sections(tmp_path, payload):
    path = tmp_path / "data-export.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    assert load_archive(path) is None


def test_prior_score_names():
    prior = {"user": {"advanced_scores": {"active": True, "names": ["Story", 3, "Art"]}}, "lists": [], "activity": []}
    assert prior_score_names(prior) == ["Story", "Art"]
    assert prior_score_names({"user": {}, "lists": [], "activity": []}) == []
    assert prior_score_names(None) == []


def test_merge_user_keeps_prior_columns_when_fresh_ones_diverge():
    prior = {"advanced_scores": {"active": True, "names": ["Story", "Art"]}}
    fresh = {"advanced_scores": {"active": True, "names": ["Art"]}}

    assert merge_user(fresh, prior)["advanced_scores"]["names"] == ["Story", "Art"]


def test_build_export_pads_older_rows_to_new_columns():
    prior = {
        "user": {"advanced_scores": {"active": True, "names": ["Story"]}},
        "lists": [{"id": 1, "advanced_scores": [8]}],
        "activity": [],
    }
    user = {"advanced_scores": {"active": True, "names": ["Story", "Art"]}}

    out = build_export(user, [{"id": 2, "advanced_scores": [0, 6]}], [], prior)

    assert out["user"]["advanced_scores"]["names"] == ["Story", "Art"]
    assert [e["advanced_scores"] for e in out["lists"]] == [[8, 0], [0, 6]]

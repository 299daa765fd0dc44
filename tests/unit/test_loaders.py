"""Unit tests for input adapters and loaders."""

import json
from pathlib import Path

import polars as pl
import pytest

from taskhub_tag_matcher.adapters.csv_adapter import CSV_Adapter
from taskhub_tag_matcher.adapters.json_adapter import JSON_Adapter
from taskhub_tag_matcher.core.models import TagCategory, TaskStatus
from taskhub_tag_matcher.loaders import (
    load_frame,
    tags_from_frame,
    tasks_from_frame,
    user_tag_ids_from_frame,
    user_tags_mapping_from_frame,
)


class TestJSON_Adapter:
    """JSON_Adapterのテスト."""

    def test_init_with_nonexistent_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            JSON_Adapter(tmp_path / "nonexistent.json")

    def test_unknown_kind(self, tmp_path: Path) -> None:
        path = tmp_path / "tags.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(ValueError, match="Unknown record kind"):
            JSON_Adapter(path, kind="badges")

    def test_read_envelope_and_aliases(self, tmp_path: Path) -> None:
        """data エンベロープの展開と created_by → owner_id のリネーム."""
        path = tmp_path / "tasks.json"
        payload = {"data": [{"id": "t1", "created_by": "u1", "status": "open", "tags": ["a"]}]}
        path.write_text(json.dumps(payload), encoding="utf-8")

        adapter = JSON_Adapter(path, kind="tasks")
        df = adapter.read()

        assert "owner_id" in df.columns
        assert "tag_ids" in df.columns
        assert adapter.validate(df) is True

    def test_read_single_object(self, tmp_path: Path) -> None:
        path = tmp_path / "tag.json"
        path.write_text(json.dumps({"id": "1", "name": "Música", "category": "skills"}), encoding="utf-8")

        df = JSON_Adapter(path, kind="tags").read()

        assert len(df) == 1

    def test_read_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Failed to read JSON"):
            JSON_Adapter(path).read()

    def test_validate_missing_columns(self, tmp_path: Path) -> None:
        path = tmp_path / "tags.json"
        path.write_text(json.dumps([{"id": "1", "name": "Música"}]), encoding="utf-8")

        adapter = JSON_Adapter(path, kind="tags")

        assert adapter.validate(adapter.read()) is False
        assert adapter.validate(pl.DataFrame()) is False


class TestCSV_Adapter:
    """CSV_Adapterのテスト."""

    def test_ids_stay_strings(self, tmp_path: Path) -> None:
        """数値に見えるIDも文字列として読み込むこと."""
        path = tmp_path / "user_tags.csv"
        path.write_text("user_id,tag_id\n007,010\n", encoding="utf-8")

        df = CSV_Adapter(path, kind="user_tags").read()

        assert df["tag_id"].to_list() == ["010"]

    def test_blank_cells_become_null(self, tmp_path: Path) -> None:
        path = tmp_path / "tasks.csv"
        path.write_text("id,owner_id,status,tag_ids\nt1,u1,open,  \n", encoding="utf-8")

        df = CSV_Adapter(path, kind="tasks").read()

        assert df["tag_ids"][0] is None

    def test_nonexistent_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="CSV file not found"):
            CSV_Adapter(tmp_path / "missing.csv")


class TestLoadFrame:
    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "tags.xlsx"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ValueError, match="Unsupported input format"):
            load_frame(path, kind="tags")

    def test_missing_required_columns(self, tmp_path: Path) -> None:
        path = tmp_path / "tags.csv"
        path.write_text("id,name\n1,Música\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid tags data"):
            load_frame(path, kind="tags")


class TestTagsFromFrame:
    def test_converts_and_skips_invalid_rows(self) -> None:
        df = pl.DataFrame(
            {
                "id": ["1", "2", None, "4"],
                "name": ["Música", "Tricô", "Sem ID", "Xadrez"],
                "category": ["skills", "communities", "skills", "hobbies"],
            }
        )

        tags = tags_from_frame(df)

        assert [t.id for t in tags] == ["1", "2"]
        assert tags[1].category == TagCategory.COMMUNITIES

    def test_empty(self) -> None:
        assert tags_from_frame(pl.DataFrame()) == []


class TestTasksFromFrame:
    def test_comma_separated_tag_ids(self) -> None:
        df = pl.DataFrame(
            {
                "id": ["t1", "t2"],
                "owner_id": ["u1", "u2"],
                "status": ["open", "completed"],
                "tag_ids": ["a, b", None],
                "created_at": ["2024-05-01T10:00:00Z", "not a date"],
            }
        )

        tasks = tasks_from_frame(df)

        assert tasks[0].tag_ids == frozenset({"a", "b"})
        assert tasks[0].created_at is not None
        assert tasks[1].tag_ids == frozenset()
        assert tasks[1].status == TaskStatus.COMPLETED
        assert tasks[1].created_at is None

    def test_nested_tag_objects_and_task_tags(self) -> None:
        df = pl.DataFrame(
            {
                "id": ["t1"],
                "owner_id": ["u1"],
                "status": ["in_progress"],
                "tag_ids": [[{"id": "a", "name": "Música"}]],
            }
        )
        task_tags = pl.DataFrame({"task_id": ["t1", "t9"], "tag_id": ["b", "c"]})

        tasks = tasks_from_frame(df, task_tags)

        assert tasks[0].tag_ids == frozenset({"a", "b"})

    def test_location_columns(self) -> None:
        """所在地列は任意で、空白のみのセルは None になること."""
        df = pl.DataFrame(
            {
                "id": ["t1", "t2"],
                "owner_id": ["u1", "u2"],
                "status": ["open", "open"],
                "location": [" Recife, PE ", "  "],
                "owner_location": ["Olinda, PE", None],
            }
        )

        tasks = tasks_from_frame(df)

        assert tasks[0].location == "Recife, PE"
        assert tasks[0].owner_location == "Olinda, PE"
        assert tasks[1].location is None
        assert tasks[1].owner_location is None

    def test_skips_unknown_status(self) -> None:
        df = pl.DataFrame({"id": ["t1"], "owner_id": ["u1"], "status": ["archived"], "tag_ids": ["a"]})

        assert tasks_from_frame(df) == []


class TestUserTags:
    def test_user_tag_ids(self) -> None:
        df = pl.DataFrame({"user_id": ["u1", "u2", "u1"], "tag_id": ["a", "b", "c"]})

        assert user_tag_ids_from_frame(df, "u1") == frozenset({"a", "c"})
        assert user_tag_ids_from_frame(df, "u9") == frozenset()

    def test_mapping(self) -> None:
        df = pl.DataFrame({"user_id": ["u1", "u2", "u1"], "tag_id": ["a", "b", "c"]})

        assert user_tags_mapping_from_frame(df) == {
            "u1": frozenset({"a", "c"}),
            "u2": frozenset({"b"}),
        }

"""入力ファイル → モデル（Tag/Task）の変換.

バックエンドから取得済みのカタログ・タスク一覧をファイル経由で受け取り、
matcher/ranker に渡せる形にします。不正な行はスキップして警告を出します。
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import polars as pl
from loguru import logger

from taskhub_tag_matcher.adapters.base_adapter import BaseAdapter
from taskhub_tag_matcher.adapters.csv_adapter import CSV_Adapter
from taskhub_tag_matcher.adapters.json_adapter import JSON_Adapter
from taskhub_tag_matcher.core.models import Tag, TagCategory, Task, TaskStatus

_ADAPTERS: dict[str, type[BaseAdapter]] = {
    ".csv": CSV_Adapter,
    ".json": JSON_Adapter,
}


def load_frame(path: Path | str, kind: str | None = None) -> pl.DataFrame:
    """拡張子に応じたアダプタで読み込む.

    Args:
        path: CSV/JSONファイルのパス
        kind: レコード種別（"tags", "tasks", "user_tags", "task_tags"）

    Returns:
        標準列名の DataFrame（0件の場合もそのまま返す）

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: 未対応の拡張子、読み込み失敗、必須列の欠落
    """
    path = Path(path)
    adapter_cls = _ADAPTERS.get(path.suffix.lower())
    if adapter_cls is None:
        raise ValueError(f"Unsupported input format: {path} (expected one of {sorted(_ADAPTERS)})")

    adapter = adapter_cls(path, kind=kind)
    df = adapter.read()
    if not df.is_empty() and not adapter.validate(df):
        raise ValueError(f"Invalid {kind or 'input'} data: {path}")

    logger.info(f"Loaded {len(df)} {kind or 'row'} record(s) from {path}")
    return df


def _clean_id(value: object) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _split_tag_ids(value: object) -> frozenset[str]:
    """tag_ids セルを ID 集合に変換する（リスト / {"id": ...} のリスト / カンマ区切り）."""
    if value is None:
        return frozenset()

    if isinstance(value, str):
        items: Iterable[object] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    elif isinstance(value, pl.Series):
        items = value.to_list()
    else:
        items = [value]

    ids: set[str] = set()
    for item in items:
        if isinstance(item, dict):
            item = item.get("id")
        tag_id = _clean_id(item)
        if tag_id:
            ids.add(tag_id)
    return frozenset(ids)


def _parse_datetime(value: object) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable created_at value ignored: {s!r}")
        return None


def tags_from_frame(df: pl.DataFrame) -> list[Tag]:
    """tags の DataFrame から Tag 一覧を作る.

    id/name が欠けた行、未知のカテゴリの行はスキップします。
    """
    if df.is_empty():
        return []

    tags: list[Tag] = []
    skipped = 0
    valid_categories = {c.value for c in TagCategory}
    for row in df.iter_rows(named=True):
        tag_id = _clean_id(row.get("id"))
        name = row.get("name")
        category = _clean_id(row.get("category"))
        if not tag_id or name is None or not str(name).strip():
            skipped += 1
            continue
        if category not in valid_categories:
            skipped += 1
            continue
        tags.append(
            Tag(
                id=tag_id,
                name=str(name),
                category=TagCategory(category),
                created_by=_clean_id(row.get("created_by")),
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} tag row(s) with missing id/name or unknown category")
    return tags


def _task_tags_mapping(task_tags: pl.DataFrame) -> dict[str, set[str]]:
    mapping: dict[str, set[str]] = {}
    if task_tags.is_empty():
        return mapping
    for row in task_tags.iter_rows(named=True):
        task_id = _clean_id(row.get("task_id"))
        tag_id = _clean_id(row.get("tag_id"))
        if task_id and tag_id:
            mapping.setdefault(task_id, set()).add(tag_id)
    return mapping


def tasks_from_frame(df: pl.DataFrame, task_tags: pl.DataFrame | None = None) -> list[Task]:
    """tasks の DataFrame から Task 一覧を作る.

    Args:
        df: tasks（id, owner_id, status, 任意で tag_ids/title/created_at/location/owner_location）
        task_tags: 別ファイルの task_tags（task_id, tag_id）。指定時は tag_ids に合算する

    Returns:
        Task 一覧（入力順）
    """
    if df.is_empty():
        return []

    extra = _task_tags_mapping(task_tags) if task_tags is not None else {}
    valid_statuses = {s.value for s in TaskStatus}

    tasks: list[Task] = []
    skipped = 0
    for row in df.iter_rows(named=True):
        task_id = _clean_id(row.get("id"))
        owner_id = _clean_id(row.get("owner_id"))
        status = _clean_id(row.get("status"))
        if not task_id or not owner_id or status not in valid_statuses:
            skipped += 1
            continue

        tag_ids = _split_tag_ids(row.get("tag_ids")) | extra.get(task_id, set())
        tasks.append(
            Task(
                id=task_id,
                owner_id=owner_id,
                status=TaskStatus(status),
                tag_ids=frozenset(tag_ids),
                title=str(row.get("title") or ""),
                created_at=_parse_datetime(row.get("created_at")),
                location=_clean_id(row.get("location")),
                owner_location=_clean_id(row.get("owner_location")),
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} task row(s) with missing id/owner_id or unknown status")
    return tasks


def user_tag_ids_from_frame(df: pl.DataFrame, user_id: str) -> frozenset[str]:
    """user_tags の DataFrame から、指定ユーザーのタグID集合を取り出す."""
    if df.is_empty():
        return frozenset()

    rows = df.filter(pl.col("user_id").cast(pl.String) == str(user_id))
    return frozenset(
        tag_id for tag_id in (_clean_id(v) for v in rows["tag_id"].to_list()) if tag_id
    )


def user_tags_mapping_from_frame(df: pl.DataFrame) -> dict[str, frozenset[str]]:
    """user_tags の DataFrame から ユーザーID → タグID集合 を作る（出現順）."""
    mapping: dict[str, set[str]] = {}
    if df.is_empty():
        return {}
    for row in df.iter_rows(named=True):
        user_id = _clean_id(row.get("user_id"))
        tag_id = _clean_id(row.get("tag_id"))
        if user_id and tag_id:
            mapping.setdefault(user_id, set()).add(tag_id)
    return {user_id: frozenset(ids) for user_id, ids in mapping.items()}

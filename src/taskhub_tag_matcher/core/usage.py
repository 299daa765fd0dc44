"""タグの利用状況（ユーザー/タスクへの紐付け数）の集計.

user_tags / task_tags の関連行（tag_id 列）から利用数を集計し、
タグ選択UIの人気順表示に使います。
"""

from __future__ import annotations

from collections.abc import Iterable

import polars as pl

from .models import Tag

USAGE_COLUMNS = ["tag_id", "user_count", "task_count", "total_usage"]


def _count_by_tag(df: pl.DataFrame, name: str, alias: str) -> pl.DataFrame:
    if "tag_id" not in df.columns:
        raise ValueError(f"compute_tag_usage() requires 'tag_id' column in {name}.")

    return (
        df.select(pl.col("tag_id").cast(pl.String))
        .drop_nulls()
        .group_by("tag_id")
        .agg(pl.len().cast(pl.Int64).alias(alias))
    )


def compute_tag_usage(user_tags: pl.DataFrame, task_tags: pl.DataFrame) -> pl.DataFrame:
    """タグごとの利用数を集計する.

    Args:
        user_tags: ユーザーとタグの関連（tag_id 列必須）
        task_tags: タスクとタグの関連（tag_id 列必須）

    Returns:
        tag_id, user_count, task_count, total_usage の DataFrame
        （total_usage 降順、同数は tag_id 昇順）

    Raises:
        ValueError: tag_id 列が存在しない場合

    Examples:
        >>> usage = compute_tag_usage(
        ...     pl.DataFrame({"tag_id": ["a", "a", "b"]}),
        ...     pl.DataFrame({"tag_id": ["b", "c"]}),
        ... )
        >>> usage["tag_id"].to_list()
        ['a', 'b', 'c']
    """
    user_counts = _count_by_tag(user_tags, "user_tags", "user_count")
    task_counts = _count_by_tag(task_tags, "task_tags", "task_count")

    usage = user_counts.join(task_counts, on="tag_id", how="full", coalesce=True)
    usage = usage.with_columns(
        pl.col("user_count").fill_null(0),
        pl.col("task_count").fill_null(0),
    ).with_columns((pl.col("user_count") + pl.col("task_count")).alias("total_usage"))

    return usage.sort(["total_usage", "tag_id"], descending=[True, False]).select(USAGE_COLUMNS)


def _usage_map(usage: pl.DataFrame) -> dict[str, int]:
    if usage.is_empty():
        return {}
    return dict(zip(usage["tag_id"].to_list(), usage["total_usage"].to_list(), strict=True))


def sort_tags_by_usage(tags: Iterable[Tag], usage: pl.DataFrame) -> list[Tag]:
    """利用数の多い順に並べる（未集計のタグは0扱い、同数は元の順序）."""
    counts = _usage_map(usage)
    return sorted(tags, key=lambda tag: counts.get(tag.id, 0), reverse=True)


def most_popular_tags(tags: Iterable[Tag], usage: pl.DataFrame, limit: int) -> list[Tag]:
    """利用数上位 limit 件のタグ."""
    return sort_tags_by_usage(tags, usage)[: max(limit, 0)]


def tag_usage_count(usage: pl.DataFrame, tag_id: str) -> int:
    """特定タグの利用数（未集計なら0）."""
    return _usage_map(usage).get(tag_id, 0)

"""タグ・タスクのデータモデル.

マッチング/ランキングが参照する属性だけを持つ不変オブジェクトです。
取得元（外部バックエンド）の行は loaders で変換してから渡します。
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TagCategory(str, Enum):
    """タグの分類."""

    SKILLS = "skills"
    COMMUNITIES = "communities"


class TaskStatus(str, Enum):
    """タスクの進行状態."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Tag:
    id: str
    name: str
    category: TagCategory | str
    created_by: str | None = None


@dataclass(frozen=True)
class Task:
    id: str
    owner_id: str
    status: TaskStatus | str
    tag_ids: frozenset[str] = field(default_factory=frozenset)
    title: str = ""
    created_at: datetime | None = None
    location: str | None = None
    # 作成者プロフィールの所在地（タスク自体の所在地とは別）
    owner_location: str | None = None

    def __post_init__(self) -> None:
        # list/set/None で渡されても集合として扱う（単一の文字列は1件のID）
        tag_ids = self.tag_ids or ()
        if isinstance(tag_ids, str):
            tag_ids = (tag_ids,)
        object.__setattr__(self, "tag_ids", frozenset(tag_ids))

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def match_count(self, user_tag_ids: Iterable[str]) -> int:
        """ユーザーのタグ集合と共通するタグ数."""
        return len(self.tag_ids.intersection(user_tag_ids))

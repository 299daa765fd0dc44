"""タスクのおすすめ順（ユーザーのタグとの共通数）とフィード抽出.

全て純粋関数で、入力のタスク一覧は変更しない。
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import datetime, timezone

from loguru import logger

from .models import Task


def rank_recommended_tasks(
    tasks: Iterable[Task] | None,
    user_tag_ids: Collection[str] | None,
    current_user_id: str | None = None,
) -> list[Task]:
    """ユーザーのタグとの共通数でタスクを並べる.

    - ユーザーのタグが空: 未完了タスクを入力順のまま全件返す
    - それ以外: 未完了・他人のタスク・共通タグ1件以上に絞り、共通数の降順で並べる
      （同数は入力順を保持。二次キーは持たない）

    Args:
        tasks: タスク一覧
        user_tag_ids: リクエストしたユーザーのタグID集合
        current_user_id: リクエストしたユーザーのID（自分のタスクを除外する）

    Returns:
        おすすめ順のタスク一覧

    Examples:
        >>> t1 = Task(id="1", owner_id="u2", status="open", tag_ids=frozenset({"a", "b"}))
        >>> t2 = Task(id="2", owner_id="u2", status="open", tag_ids=frozenset({"a"}))
        >>> [t.id for t in rank_recommended_tasks([t2, t1], {"a", "b"}, "u1")]
        ['1', '2']
    """
    open_tasks = [task for task in tasks or () if not task.is_completed]
    if not user_tag_ids:
        return open_tasks

    wanted = frozenset(user_tag_ids)
    candidates = [
        task
        for task in open_tasks
        if task.owner_id != current_user_id and task.match_count(wanted) > 0
    ]

    # sorted() は安定ソートなので同数は入力順のまま
    ranked = sorted(candidates, key=lambda task: task.match_count(wanted), reverse=True)
    logger.debug(
        f"rank_recommended_tasks: {len(ranked)}/{len(open_tasks)} open task(s) match {len(wanted)} tag(s)"
    )
    return ranked


_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _created_key(task: Task) -> datetime:
    created = task.created_at
    if created is None:
        return _OLDEST
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def following_tasks(tasks: Iterable[Task] | None, following_ids: Collection[str] | None) -> list[Task]:
    """フォロー中ユーザーが作成した未完了タスクを新しい順に返す."""
    if not following_ids:
        return []

    followed = frozenset(following_ids)
    selected = [
        task for task in tasks or () if not task.is_completed and task.owner_id in followed
    ]
    return sorted(selected, key=_created_key, reverse=True)


def user_tasks(
    tasks: Iterable[Task] | None,
    user_id: str,
    collaborating_task_ids: Collection[str] = (),
    *,
    completed: bool = False,
) -> list[Task]:
    """ユーザーが作成した、または承認済みコラボレーターとして参加しているタスク.

    Args:
        tasks: タスク一覧
        user_id: 対象ユーザー
        collaborating_task_ids: 参加しているタスクID
        completed: True なら完了済み、False なら未完了のタスクを返す
    """
    collaborating = frozenset(collaborating_task_ids)
    return [
        task
        for task in tasks or ()
        if task.is_completed == completed
        and (task.owner_id == user_id or task.id in collaborating)
    ]


def _city(location: str | None) -> str:
    """「City, ST」形式の所在地から比較用の都市名を取り出す."""
    return (location or "").split(",")[0].strip().lower()


def nearby_tasks(
    tasks: Iterable[Task] | None,
    user_location: str | None,
    current_user_id: str | None = None,
) -> list[Task]:
    """ユーザーと同じ都市にある、他人の未完了タスクを新しい順に返す.

    都市は所在地のカンマより前の部分を前後空白除去・小文字化して比較します。
    所在地の無いタスクは対象外です。

    Args:
        tasks: タスク一覧
        user_location: ユーザーの所在地（未設定なら空リスト）
        current_user_id: リクエストしたユーザーのID（自分のタスクを除外する）

    Returns:
        近隣タスクの一覧（created_at の降順）
    """
    if not user_location:
        return []

    city = _city(user_location)
    selected = [
        task
        for task in tasks or ()
        if not task.is_completed
        and task.owner_id != current_user_id
        and task.location
        and _city(task.location) == city
    ]
    return sorted(selected, key=_created_key, reverse=True)


def nearby_people(
    tasks: Iterable[Task] | None,
    user_location: str | None,
    current_user_id: str | None = None,
) -> list[str]:
    """タスク作成者のうち、プロフィールの所在地がユーザーと同じ都市の人を返す.

    完了済みのタスクも作成者の抽出には使います。重複は除き、初出順です。
    """
    if not user_location:
        return []

    city = _city(user_location)
    people: dict[str, None] = {}
    for task in tasks or ():
        if task.owner_id == current_user_id or not task.owner_location:
            continue
        if _city(task.owner_location) == city:
            people.setdefault(task.owner_id, None)

    logger.debug(f"nearby_people: {len(people)} creator(s) in {city!r}")
    return list(people)

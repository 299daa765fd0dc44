"""ユーザー同士のタグ共通度.

- ユーザー検索: 共通タグ数 / 両者のタグの和集合
- プロフィール表示: 共通タグ数 / 少ない方のタグ数
どちらも百分率（四捨五入）の整数で返す。
"""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable, Mapping

from .models import Tag


def _percent(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    # 四捨五入（round() は偶数丸めなので使わない）
    return int(math.floor(numerator * 100 / denominator + 0.5))


def common_tags(own_tags: Iterable[Tag], other_tags: Iterable[Tag]) -> list[Tag]:
    """相手のタグのうち自分も持っているもの（相手側の順序）."""
    own_ids = {tag.id for tag in own_tags}
    return [tag for tag in other_tags if tag.id in own_ids]


def search_compatibility(own_tag_ids: Collection[str], other_tag_ids: Collection[str]) -> int:
    """和集合に対する共通タグの割合（%）."""
    own = set(own_tag_ids)
    other = set(other_tag_ids)
    return _percent(len(own & other), len(own | other))


def profile_compatibility(own_tag_ids: Collection[str], other_tag_ids: Collection[str]) -> int:
    """少ない方のタグ数に対する共通タグの割合（%）. どちらかが空なら0."""
    own = set(own_tag_ids)
    other = set(other_tag_ids)
    if not own or not other:
        return 0
    return _percent(len(own & other), min(len(own), len(other)))


def recommend_users(
    user_tags: Mapping[str, Collection[str]],
    own_tag_ids: Collection[str],
    limit: int = 5,
) -> list[tuple[str, int]]:
    """共通度が0より大きいユーザーを共通度の高い順に返す.

    Args:
        user_tags: ユーザーID → タグID集合
        own_tag_ids: 自分のタグID集合
        limit: 最大件数

    Returns:
        (ユーザーID, 共通度%) のリスト
    """
    scored = [
        (user_id, search_compatibility(own_tag_ids, tag_ids))
        for user_id, tag_ids in user_tags.items()
    ]
    scored = [item for item in scored if item[1] > 0]
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored[: max(limit, 0)]

"""タグのあいまい一致（重複検出・候補提示・検索フィルタ）.

- 重複検出: 作成時に、同カテゴリの表記揺れ（大文字小文字・アクセント）を既存タグとして扱う
- 候補提示: 作成入力欄の「もしかして」候補（最大5件、カタログ順）
- 検索フィルタ: タグ一覧の絞り込み（翻訳名も対象）

カタログは呼び出し側が取得して渡す。ここでは読み取りのみで、保存は行わない。
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable

from loguru import logger

from .exceptions import DuplicateTagError
from .models import Tag, TagCategory
from .normalize import contains_ignoring_accents, equals_ignoring_accents
from .similarity import (
    FILTER_SIMILARITY_THRESHOLD,
    SUGGEST_SIMILARITY_THRESHOLD,
    char_overlap_similarity,
)

# これより短い入力では候補を出さない
MIN_SUGGEST_QUERY_LENGTH = 2
DEFAULT_MAX_SUGGESTIONS = 5

TagTranslator = Callable[[Tag], str]


def _category_value(category: TagCategory | str | None) -> str | None:
    if category is None:
        return None
    return getattr(category, "value", str(category))


def _name(tag: Tag) -> str:
    return "" if tag.name is None else str(tag.name)


def _query_text(query: object) -> str:
    return "" if query is None else str(query)


def tags_by_category(catalog: Iterable[Tag] | None, category: TagCategory | str) -> list[Tag]:
    """カテゴリが一致するタグのみを返す（未知のカテゴリは空）."""
    wanted = _category_value(category)
    return [tag for tag in catalog or () if _category_value(tag.category) == wanted]


def find_duplicate(
    catalog: Iterable[Tag] | None,
    candidate_name: str,
    category: TagCategory | str,
) -> Tag | None:
    """作成候補名と同一視される既存タグを返す.

    同カテゴリ内で、前後空白・大文字小文字・アクセントを無視して名前が一致する
    最初のタグを返します。カテゴリが異なれば同名でも重複とはみなしません。

    Args:
        catalog: 既存タグ一覧
        candidate_name: 作成しようとしている名前
        category: 作成先カテゴリ

    Returns:
        一致した既存タグ。無ければ None

    Examples:
        >>> catalog = [Tag(id="1", name="Jardinagem", category=TagCategory.SKILLS)]
        >>> find_duplicate(catalog, "jardinagem", "skills").id
        '1'
        >>> find_duplicate(catalog, "jardinagem", "communities") is None
        True
    """
    for tag in tags_by_category(catalog, category):
        if equals_ignoring_accents(_name(tag), candidate_name):
            return tag
    return None


def check_new_tag(
    catalog: Iterable[Tag] | None,
    candidate_name: str,
    category: TagCategory | str,
) -> str:
    """新規タグ作成の可否を判定し、保存用の名前を返す.

    Returns:
        前後空白を除いた作成用の名前

    Raises:
        ValueError: 名前が空の場合
        DuplicateTagError: 同カテゴリに表記揺れの既存タグがある場合
    """
    name = (candidate_name or "").strip()
    if not name:
        raise ValueError("Tag name must not be empty")

    existing = find_duplicate(catalog, name, category)
    if existing is not None:
        raise DuplicateTagError(existing, name)

    return name


def has_exact_match(catalog: Iterable[Tag] | None, query: str) -> bool:
    """入力と同一視されるタグがカタログに存在するか."""
    return any(equals_ignoring_accents(_name(tag), query) for tag in catalog or ())


def suggest_tags(
    catalog: Iterable[Tag] | None,
    query: str,
    max_results: int = DEFAULT_MAX_SUGGESTIONS,
    *,
    translate: TagTranslator | None = None,
    category: TagCategory | str | None = None,
    exclude_ids: Collection[str] = (),
) -> list[Tag]:
    """作成入力に似ている既存タグを候補として返す.

    包含（双方向）または類似度 > 0.5 のタグを、カタログ順のまま最大 max_results 件返します。
    類似度順には並べ替えません。

    Args:
        catalog: 候補元のタグ一覧（人気順などに並べ替え済みならその順で返る）
        query: 入力テキスト（2文字未満なら候補なし）
        max_results: 最大件数
        translate: 翻訳名を返す関数（指定時は翻訳名でも判定する）
        category: 指定時はそのカテゴリのみ
        exclude_ids: 除外するタグID（選択済みなど）

    Returns:
        候補タグのリスト
    """
    query = _query_text(query)
    if len(query) < MIN_SUGGEST_QUERY_LENGTH or not query.strip():
        return []

    q = query.strip()
    tags = tags_by_category(catalog, category) if category is not None else list(catalog or ())

    results: list[Tag] = []
    for tag in tags:
        if len(results) >= max_results:
            break
        if tag.id in exclude_ids:
            continue

        names = [_name(tag)]
        if translate is not None:
            names.append(translate(tag))

        if any(
            contains_ignoring_accents(name, q)
            or char_overlap_similarity(name, q) > SUGGEST_SIMILARITY_THRESHOLD
            for name in names
        ):
            results.append(tag)

    logger.debug(f"suggest_tags: query={q!r} -> {len(results)} suggestion(s)")
    return results


def filter_tags(
    catalog: Iterable[Tag] | None,
    query: str,
    *,
    translate: TagTranslator | None = None,
) -> list[Tag]:
    """検索語でタグ一覧を絞り込む.

    空（空白のみ）の検索語ではカタログ全体を元の順序で返します。
    それ以外は、名前/翻訳名のどちらかが検索語を包含（双方向）するか、
    類似度 > 0.6 のタグを返します。

    Args:
        catalog: タグ一覧
        query: 検索語
        translate: 翻訳名を返す関数（未指定なら翻訳名 = 名前）

    Returns:
        絞り込み後のタグ一覧（カタログ順）
    """
    tags = list(catalog or ())
    query = _query_text(query)
    if not query.strip():
        return tags

    q = query.strip()
    results: list[Tag] = []
    for tag in tags:
        name = _name(tag)
        translated = translate(tag) if translate is not None else name
        if (
            contains_ignoring_accents(name, q)
            or contains_ignoring_accents(translated, q)
            or char_overlap_similarity(name, q) > FILTER_SIMILARITY_THRESHOLD
            or char_overlap_similarity(translated, q) > FILTER_SIMILARITY_THRESHOLD
        ):
            results.append(tag)

    logger.debug(f"filter_tags: query={q!r} -> {len(results)}/{len(tags)} tag(s)")
    return results

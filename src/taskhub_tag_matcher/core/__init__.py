"""タグ照合・おすすめ順のコア処理群.

- 正規化（アクセント・大文字小文字を無視した比較キー）
- あいまい一致（重複検出、候補提示、検索フィルタ）
- おすすめ順（ユーザーのタグとの共通数）
"""

from .matcher import check_new_tag, filter_tags, find_duplicate, suggest_tags
from .normalize import contains_ignoring_accents, equals_ignoring_accents, normalize_text
from .ranker import rank_recommended_tasks
from .similarity import char_overlap_similarity

__all__ = [
    "normalize_text",
    "contains_ignoring_accents",
    "equals_ignoring_accents",
    "char_overlap_similarity",
    "find_duplicate",
    "check_new_tag",
    "suggest_tags",
    "filter_tags",
    "rank_recommended_tasks",
]

"""タスク共有アプリ向けのタグ照合・おすすめ順ライブラリ."""

from taskhub_tag_matcher.core import (
    check_new_tag,
    contains_ignoring_accents,
    equals_ignoring_accents,
    filter_tags,
    find_duplicate,
    normalize_text,
    rank_recommended_tasks,
    suggest_tags,
)
from taskhub_tag_matcher.core.exceptions import DuplicateTagError
from taskhub_tag_matcher.core.models import Tag, TagCategory, Task, TaskStatus

__all__ = [
    "DuplicateTagError",
    "Tag",
    "TagCategory",
    "Task",
    "TaskStatus",
    "check_new_tag",
    "contains_ignoring_accents",
    "equals_ignoring_accents",
    "filter_tags",
    "find_duplicate",
    "normalize_text",
    "rank_recommended_tasks",
    "suggest_tags",
]

"""タグ照合ツールのCLI.

バックエンドから書き出したタグ/タスク/関連行のファイルに対して、
重複チェック・候補提示・検索・おすすめ順・利用状況・重複監査を実行します。
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import polars as pl
from loguru import logger

from taskhub_tag_matcher.config import MatcherSettings, load_settings
from taskhub_tag_matcher.core.compatibility import recommend_users
from taskhub_tag_matcher.core.exceptions import DuplicateTagError
from taskhub_tag_matcher.core.matcher import check_new_tag, filter_tags, suggest_tags
from taskhub_tag_matcher.core.models import Tag, TagCategory
from taskhub_tag_matcher.core.ranker import rank_recommended_tasks
from taskhub_tag_matcher.core.reports import export_duplicate_report, find_catalog_duplicates
from taskhub_tag_matcher.core.translations import load_translations
from taskhub_tag_matcher.core.usage import compute_tag_usage, sort_tags_by_usage
from taskhub_tag_matcher.loaders import (
    load_frame,
    tags_from_frame,
    tasks_from_frame,
    user_tag_ids_from_frame,
    user_tags_mapping_from_frame,
)


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _translator(settings: MatcherSettings, language: str | None) -> Callable[[Tag], str] | None:
    if settings.translations_path is None:
        return None
    translations = load_translations(settings.translations_path)
    return translations.translator(language or settings.language)


def _load_tags(path: Path) -> list[Tag]:
    return tags_from_frame(load_frame(path, kind="tags"))


def _format_tag(tag: Tag, translate: Callable[[Tag], str] | None = None) -> str:
    category = getattr(tag.category, "value", str(tag.category))
    line = f"{tag.id}\t{tag.name}\t{category}"
    if translate is not None:
        line += f"\t{translate(tag)}"
    return line


def _cmd_duplicate(args: argparse.Namespace, settings: MatcherSettings) -> int:
    catalog = _load_tags(args.tags)
    try:
        name = check_new_tag(catalog, args.name, args.category)
    except DuplicateTagError as e:
        print(f"DUPLICATE\t{_format_tag(e.existing_tag)}")
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 2

    print(f"OK\t{name}")
    return 0


def _cmd_suggest(args: argparse.Namespace, settings: MatcherSettings) -> int:
    catalog = _load_tags(args.tags)
    if args.user_tags_file and args.task_tags_file:
        usage = compute_tag_usage(
            load_frame(args.user_tags_file, kind="user_tags"),
            load_frame(args.task_tags_file, kind="task_tags"),
        )
        catalog = sort_tags_by_usage(catalog, usage)

    translate = _translator(settings, args.language)
    max_results = args.max_results if args.max_results is not None else settings.max_suggestions
    for tag in suggest_tags(
        catalog,
        args.query,
        max_results,
        translate=translate,
        category=args.category,
    ):
        print(_format_tag(tag, translate))
    return 0


def _cmd_filter(args: argparse.Namespace, settings: MatcherSettings) -> int:
    catalog = _load_tags(args.tags)
    translate = _translator(settings, args.language)
    for tag in filter_tags(catalog, args.query, translate=translate):
        print(_format_tag(tag, translate))
    return 0


def _cmd_recommend(args: argparse.Namespace, settings: MatcherSettings) -> int:
    task_tags = load_frame(args.task_tags_file, kind="task_tags") if args.task_tags_file else None
    tasks = tasks_from_frame(load_frame(args.tasks, kind="tasks"), task_tags)
    user_tag_ids = user_tag_ids_from_frame(load_frame(args.user_tags_file, kind="user_tags"), args.user)

    ranked = rank_recommended_tasks(tasks, user_tag_ids, args.user)
    if args.limit is not None:
        ranked = ranked[: args.limit]
    for task in ranked:
        print(f"{task.id}\t{task.match_count(user_tag_ids)}\t{task.title}")
    return 0


def _cmd_users(args: argparse.Namespace, settings: MatcherSettings) -> int:
    mapping = user_tags_mapping_from_frame(load_frame(args.user_tags_file, kind="user_tags"))
    own_tag_ids = mapping.pop(args.user, frozenset())
    for user_id, compatibility in recommend_users(mapping, own_tag_ids, args.limit):
        print(f"{user_id}\t{compatibility}")
    return 0


def _cmd_usage(args: argparse.Namespace, settings: MatcherSettings) -> int:
    usage = compute_tag_usage(
        load_frame(args.user_tags_file, kind="user_tags"),
        load_frame(args.task_tags_file, kind="task_tags"),
    )
    if args.tags:
        catalog = _load_tags(args.tags)
        names = pl.DataFrame(
            {
                "tag_id": [tag.id for tag in catalog],
                "name": [tag.name for tag in catalog],
            },
            schema={"tag_id": pl.String, "name": pl.String},
        )
        usage = usage.join(names, on="tag_id", how="left").sort(
            ["total_usage", "tag_id"], descending=[True, False]
        )
    if args.limit is not None:
        usage = usage.head(args.limit)

    print(usage.write_csv(separator="\t"), end="")
    return 0


def _cmd_audit(args: argparse.Namespace, settings: MatcherSettings) -> int:
    duplicates = find_catalog_duplicates(_load_tags(args.tags))
    report_dir = args.report_dir or settings.report_dir
    if report_dir is not None:
        export_duplicate_report(duplicates, report_dir)

    for row in duplicates.iter_rows(named=True):
        print(f"{row['category']}\t{row['normalized_name']}\t{row['tag_id']}\t{row['name']}")
    return 1 if len(duplicates) > 0 else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskhub-tags",
        description="Accent-insensitive tag matching and task recommendations",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (language, max_suggestions, translations_path, report_dir)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    categories = [c.value for c in TagCategory]

    p = sub.add_parser("duplicate", help="Check whether a new tag duplicates an existing one")
    p.add_argument("--tags", type=Path, required=True, help="Tag catalog (CSV/JSON)")
    p.add_argument("--name", required=True, help="Name of the tag to create")
    p.add_argument("--category", choices=categories, required=True)
    p.set_defaults(handler=_cmd_duplicate)

    p = sub.add_parser("suggest", help="Suggest existing tags similar to the input")
    p.add_argument("--tags", type=Path, required=True, help="Tag catalog (CSV/JSON)")
    p.add_argument("--query", required=True)
    p.add_argument("--category", choices=categories, default=None)
    p.add_argument("--max-results", type=int, default=None)
    p.add_argument("--language", default=None, help="Translation language (overrides settings)")
    p.add_argument(
        "--user-tags",
        dest="user_tags_file",
        type=Path,
        default=None,
        help="user_tags rows; with --task-tags, suggestions follow popularity order",
    )
    p.add_argument("--task-tags", dest="task_tags_file", type=Path, default=None, help="task_tags rows")
    p.set_defaults(handler=_cmd_suggest)

    p = sub.add_parser("filter", help="Filter the tag catalog by a search query")
    p.add_argument("--tags", type=Path, required=True, help="Tag catalog (CSV/JSON)")
    p.add_argument("--query", default="")
    p.add_argument("--language", default=None, help="Translation language (overrides settings)")
    p.set_defaults(handler=_cmd_filter)

    p = sub.add_parser("recommend", help="Rank open tasks by shared tags")
    p.add_argument("--tasks", type=Path, required=True, help="Task list (CSV/JSON)")
    p.add_argument("--task-tags", dest="task_tags_file", type=Path, default=None, help="task_tags rows")
    p.add_argument("--user-tags", dest="user_tags_file", type=Path, required=True, help="user_tags rows")
    p.add_argument("--user", required=True, help="Requesting user id")
    p.add_argument("--limit", type=int, default=None)
    p.set_defaults(handler=_cmd_recommend)

    p = sub.add_parser("users", help="Recommend users sharing the most tags")
    p.add_argument("--user-tags", dest="user_tags_file", type=Path, required=True, help="user_tags rows")
    p.add_argument("--user", required=True, help="Requesting user id")
    p.add_argument("--limit", type=int, default=5)
    p.set_defaults(handler=_cmd_users)

    p = sub.add_parser("usage", help="Show tag usage counts")
    p.add_argument("--user-tags", dest="user_tags_file", type=Path, required=True, help="user_tags rows")
    p.add_argument("--task-tags", dest="task_tags_file", type=Path, required=True, help="task_tags rows")
    p.add_argument("--tags", type=Path, default=None, help="Tag catalog for names (optional)")
    p.add_argument("--limit", type=int, default=None)
    p.set_defaults(handler=_cmd_usage)

    p = sub.add_parser("audit", help="Report existing tags that differ only by case/accents")
    p.add_argument("--tags", type=Path, required=True, help="Tag catalog (CSV/JSON)")
    p.add_argument("--report-dir", type=Path, default=None, help="Write duplicate_tags.csv here")
    p.set_defaults(handler=_cmd_audit)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI エントリポイント."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    settings = load_settings(args.config) if args.config else MatcherSettings()

    return args.handler(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())

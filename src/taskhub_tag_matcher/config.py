"""CLI設定（YAML）の読み込み.

YAML形式:
    language: pt
    max_suggestions: 5
    translations_path: translations.yml
    report_dir: reports

相対パスは設定ファイルのあるディレクトリ基準で解決します。
類似度のしきい値や候補提示の最小文字数は設定対象外（コード側の定数）。
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml
from loguru import logger

from taskhub_tag_matcher.core.matcher import DEFAULT_MAX_SUGGESTIONS


@dataclass(frozen=True)
class MatcherSettings:
    language: str = "en"
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    translations_path: Path | None = None
    report_dir: Path | None = None


_PATH_KEYS = {"translations_path", "report_dir"}


def load_settings(settings_path: Path | str) -> MatcherSettings:
    """YAMLファイルから設定を読み込む.

    Args:
        settings_path: 設定YAMLファイルのパス

    Returns:
        設定オブジェクト（未指定のキーはデフォルト値）

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: YAML形式が不正、未知のキー、型不一致の場合
    """
    settings_path = Path(settings_path)

    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    try:
        with open(settings_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in settings file: {settings_path}"
        raise ValueError(msg) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"Settings file must contain a mapping, got {type(data)}"
        raise ValueError(msg)

    known = {f.name for f in fields(MatcherSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        msg = f"Unknown settings key(s) in {settings_path}: {unknown}. Valid keys: {sorted(known)}"
        raise ValueError(msg)

    values: dict[str, object] = {}
    for key, value in data.items():
        if value is None:
            continue
        if key in _PATH_KEYS:
            if not isinstance(value, str):
                raise ValueError(f"Invalid value for '{key}': expected path string, got {type(value)}")
            path = Path(value)
            values[key] = path if path.is_absolute() else settings_path.parent / path
        elif key == "max_suggestions":
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"Invalid value for 'max_suggestions': expected positive int, got {value!r}")
            values[key] = value
        elif key == "language":
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Invalid value for 'language': expected non-empty string, got {value!r}")
            values[key] = value.strip()

    settings = MatcherSettings(**values)
    logger.info(f"Loaded settings from {settings_path}: {settings}")
    return settings

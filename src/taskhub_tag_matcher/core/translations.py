"""タグ表示名の翻訳.

タグは作成時の名前（例: "Jardinagem"）で保存されるが、UIでは言語ごとの
翻訳名でも表示・検索する。翻訳は YAML で管理する。

YAML形式:
    en:
      Jardinagem: Gardening
      Música: Music
    es:
      Jardinagem: Jardinería
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path

import yaml
from loguru import logger

from .models import Tag
from .normalize import normalize_text


class TagTranslations:
    """言語 → {タグ名 → 翻訳名} の管理クラス.

    タグ名の照合は前後空白・大文字小文字・アクセントを無視します。
    """

    def __init__(self, translations: Mapping[str, Mapping[str, str]]) -> None:
        """翻訳表を初期化.

        Args:
            translations: 言語コード → {タグ名 → 翻訳名}

        Raises:
            ValueError: 形式が不正な場合
        """
        self._translations: dict[str, dict[str, str]] = {}
        for language, names in translations.items():
            if not isinstance(names, Mapping):
                msg = f"Invalid translations for '{language}': expected mapping, got {type(names)}"
                raise ValueError(msg)

            table: dict[str, str] = {}
            for name, translated in names.items():
                if not isinstance(translated, str):
                    msg = (
                        f"Invalid translation for '{language}:{name}': "
                        f"expected string, got {type(translated)}"
                    )
                    raise ValueError(msg)
                table[normalize_text(str(name).strip())] = translated
            self._translations[str(language)] = table

    @property
    def languages(self) -> list[str]:
        return sorted(self._translations)

    def get(self, tag_name: str, language: str) -> str | None:
        """翻訳名を取得（無ければ None）."""
        table = self._translations.get(language)
        if not table:
            return None
        return table.get(normalize_text(tag_name.strip()))

    def translate(self, tag: Tag, language: str) -> str:
        """翻訳名を返す. 翻訳が無ければタグ名そのまま."""
        return self.get(tag.name, language) or tag.name

    def translator(self, language: str) -> Callable[[Tag], str]:
        """指定言語の翻訳関数（matcher の translate 引数向け）."""

        def _translate(tag: Tag) -> str:
            return self.translate(tag, language)

        return _translate


def load_translations(translations_path: Path | str) -> TagTranslations:
    """YAMLファイルから翻訳表を読み込む.

    Args:
        translations_path: 翻訳YAMLファイルのパス

    Returns:
        翻訳表

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: YAML形式が不正な場合
    """
    translations_path = Path(translations_path)

    if not translations_path.exists():
        raise FileNotFoundError(f"Translations file not found: {translations_path}")

    try:
        with open(translations_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in translations file: {translations_path}"
        raise ValueError(msg) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"Translations file must contain a mapping, got {type(data)}"
        raise ValueError(msg)

    translations = TagTranslations(data)
    logger.info(f"Loaded translations for {len(translations.languages)} language(s) from {translations_path}")
    return translations

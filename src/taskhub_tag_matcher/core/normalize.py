"""アクセント非依存の文字列比較（タグ名・検索語）.

タグ名や入力テキストを比較用のキーに変換する関数群です。

設計方針:
    - 比較キーは「小文字化 → NFD分解 → 結合文字（U+0300–U+036F）除去」で作る
    - 比較キーは保存しない（表示名はそのまま残す）
    - どの関数も例外を投げない（None は空文字として扱う）
"""

from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")


def normalize_text(text: str | None) -> str:
    """比較用の正規化キーを返す.

    Args:
        text: 任意の入力文字列（タグ名、検索語など）

    Returns:
        アクセント除去・小文字化済みの文字列

    Examples:
        >>> normalize_text("água")
        'agua'
        >>> normalize_text("MÚSICA")
        'musica'
    """
    if not text:
        return ""

    # 小文字化を先に行う（"İ" のように小文字化で結合文字が生じるケースも除去される）
    s = str(text).lower()
    s = unicodedata.normalize("NFD", s)
    return _COMBINING_MARKS.sub("", s)


def contains_ignoring_accents(text: str | None, other: str | None) -> bool:
    """どちらか一方がもう一方を含むかを判定する（アクセント・大文字小文字無視）.

    短い検索語が長いタグ名に、長い入力が短い略称タグにマッチするよう、
    包含判定は双方向で行う。
    """
    a = normalize_text(text)
    b = normalize_text(other)
    return b in a or a in b


def equals_ignoring_accents(text: str | None, other: str | None) -> bool:
    """前後空白を除いた上で、正規化キーが一致するかを判定する."""
    a = normalize_text(str(text).strip() if text else "")
    b = normalize_text(str(other).strip() if other else "")
    return a == b

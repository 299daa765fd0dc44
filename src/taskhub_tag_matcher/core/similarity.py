"""文字重複ベースの類似度.

タグ候補提示・タグ検索で使う簡易的な類似度です。
編集距離やトークン類似度ではなく「短い方の各文字が長い方に含まれるか」を数えるだけの
粗いヒューリスティックで、文字順は考慮しない（"aab" と "ba" は 2/3 になる）。
UIの候補表示はこの緩さを前提にしているため、挙動は変えないこと。
"""

from __future__ import annotations

from .normalize import normalize_text

# 候補提示（作成入力欄の「もしかして」）用
SUGGEST_SIMILARITY_THRESHOLD = 0.5

# タグ一覧の検索フィルタ用（候補提示より厳しめ）
FILTER_SIMILARITY_THRESHOLD = 0.6


def char_overlap_similarity(text: str | None, other: str | None) -> float:
    """2つの文字列の文字重複率を [0, 1] で返す.

    Args:
        text: 比較対象1（内部で正規化する）
        other: 比較対象2（内部で正規化する）

    Returns:
        短い方の文字のうち長い方に出現するものの数 / 長い方の長さ。
        両方とも空なら 1.0。

    Examples:
        >>> char_overlap_similarity("Café", "cafe")
        1.0
        >>> char_overlap_similarity("abc", "xyz")
        0.0
    """
    a = normalize_text(text)
    b = normalize_text(other)

    longer, shorter = (a, b) if len(a) > len(b) else (b, a)
    if not longer:
        return 1.0

    matches = sum(1 for ch in shorter if ch in longer)
    return matches / len(longer)

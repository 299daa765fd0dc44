"""Tag matcher exceptions.

カスタム例外クラスを定義します。
"""

from __future__ import annotations

from .models import Tag


class DuplicateTagError(Exception):
    """作成しようとしたタグが既存タグの表記揺れである場合の例外.

    データベースエラーではなく「既存タグを使うべき」というポリシー上の通知です。
    呼び出し側は existing_tag を選択状態にする等で扱います。

    Attributes:
        existing_tag: 既に存在するタグ
        candidate_name: 作成しようとした名前
    """

    def __init__(self, existing_tag: Tag, candidate_name: str) -> None:
        """例外初期化.

        Args:
            existing_tag: 一致した既存タグ
            candidate_name: 作成しようとした名前
        """
        self.existing_tag = existing_tag
        self.candidate_name = candidate_name
        message = (
            f"Tag creation blocked: '{candidate_name}' duplicates existing tag "
            f"'{existing_tag.name}' (id={existing_tag.id}, category={_category_value(existing_tag)}). "
            "Use the existing tag instead."
        )
        super().__init__(message)


def _category_value(tag: Tag) -> str:
    return getattr(tag.category, "value", str(tag.category))

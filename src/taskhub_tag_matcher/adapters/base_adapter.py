"""入力ソースアダプタ（基底クラス）.

バックエンドから書き出したタグ/タスク/関連行（CSV/JSON）を共通インターフェースで
扱うための抽象基底クラスを定義します。
"""

from abc import ABC, abstractmethod

import polars as pl

# 入力ごとの必須列（loaders はこの列名を前提にする。tasks の tag_ids は任意）
STANDARD_COLUMNS = {
    "tags": ["id", "name", "category"],
    "tasks": ["id", "owner_id", "status"],
    "user_tags": ["user_id", "tag_id"],
    "task_tags": ["task_id", "tag_id"],
}

# バックエンドの列名揺れ → 標準列名（レコード種別ごと）
COLUMN_ALIASES = {
    "tasks": {
        "created_by": "owner_id",
        "tags": "tag_ids",
    },
}


class BaseAdapter(ABC):
    """入力ソースアダプタの基底クラス.

    全てのアダプタはこのクラスを継承し、read()/validate()/repair() を実装します。
    """

    @abstractmethod
    def read(self) -> pl.DataFrame:
        """データソースを読み込み、Polars DataFrame に変換する.

        Raises:
            FileNotFoundError: ファイルが存在しない場合
            ValueError: データ形式が不正な場合
        """
        ...

    @abstractmethod
    def validate(self, df: pl.DataFrame) -> bool:
        """データ整合性を検証する."""
        ...

    @abstractmethod
    def repair(self, df: pl.DataFrame) -> pl.DataFrame:
        """列名揺れなどを修復する."""
        ...


def rename_aliased_columns(df: pl.DataFrame, kind: str | None) -> pl.DataFrame:
    """COLUMN_ALIASES に従って列名を標準形に寄せる（標準列が既にあれば何もしない）."""
    renames = {
        alias: standard
        for alias, standard in COLUMN_ALIASES.get(kind or "", {}).items()
        if alias in df.columns and standard not in df.columns
    }
    if not renames:
        return df
    return df.rename(renames)

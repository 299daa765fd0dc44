"""CSV読み込みアダプタ.

バックエンドの管理画面から書き出した CSV（タグ・タスク・関連行）を読み込みます。
tag_ids 列はカンマ区切り文字列のまま読み込み、分割は loaders 側で行います。
"""

from pathlib import Path

import polars as pl
from loguru import logger

from .base_adapter import STANDARD_COLUMNS, BaseAdapter, rename_aliased_columns


class CSV_Adapter(BaseAdapter):
    """汎用CSVアダプタ.

    Args:
        file_path: CSVファイルのパス
        kind: レコード種別（"tags", "tasks", "user_tags", "task_tags"）
    """

    def __init__(self, file_path: Path | str, kind: str | None = None) -> None:
        """アダプタ初期化.

        Args:
            file_path: CSVファイルのパス
            kind: レコード種別（None なら列チェックなし）

        Raises:
            FileNotFoundError: CSVファイルが存在しない場合
            ValueError: 未知のレコード種別の場合
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {self.file_path}")
        if kind is not None and kind not in STANDARD_COLUMNS:
            raise ValueError(f"Unknown record kind: {kind} (expected one of {sorted(STANDARD_COLUMNS)})")
        self.kind = kind

    def read(self) -> pl.DataFrame:
        """CSVファイルを読み込む.

        IDは数値に見えても文字列として扱う（先頭ゼロやUUIDの混在に備える）。

        Returns:
            標準列名に揃えた Polars DataFrame

        Raises:
            ValueError: CSV読み込みに失敗した場合
        """
        try:
            df = pl.read_csv(
                self.file_path,
                infer_schema=False,
                truncate_ragged_lines=True,
            )
        except Exception as e:
            raise ValueError(f"Failed to read CSV: {self.file_path}") from e

        logger.debug(f"Read {len(df)} row(s) from {self.file_path}")
        return self.repair(df)

    def validate(self, df: pl.DataFrame) -> bool:
        """データ整合性検証."""
        if df.is_empty():
            return False

        if self.kind is not None:
            missing = [col for col in STANDARD_COLUMNS[self.kind] if col not in df.columns]
            if missing:
                logger.error(f"{self.file_path}: missing required column(s) for {self.kind}: {missing}")
                return False

        return True

    def repair(self, df: pl.DataFrame) -> pl.DataFrame:
        """列名揺れの修復と、空文字セルの null 化."""
        df = rename_aliased_columns(df, self.kind)
        string_cols = [col for col, dtype in df.schema.items() if dtype == pl.String]
        return df.with_columns(
            [
                pl.when(pl.col(col).str.strip_chars() == "")
                .then(None)
                .otherwise(pl.col(col))
                .alias(col)
                for col in string_cols
            ]
        )

"""JSON_Adapter for reading exported JSON records.

This adapter handles JSON exports of tags, tasks and association rows.
"""

import json
from pathlib import Path

import polars as pl
from loguru import logger

from .base_adapter import STANDARD_COLUMNS, BaseAdapter, rename_aliased_columns


class JSON_Adapter(BaseAdapter):
    """Adapter for JSON record exports.

    Args:
        file_path: Path to JSON file
        kind: Record kind ("tags", "tasks", "user_tags", "task_tags") used by validate()
    """

    def __init__(self, file_path: Path | str, kind: str | None = None) -> None:
        """Initialize adapter.

        Args:
            file_path: Path to JSON file
            kind: Record kind, or None to skip column checks

        Raises:
            FileNotFoundError: JSON file does not exist
            ValueError: Unknown record kind
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"JSON file not found: {self.file_path}")
        if kind is not None and kind not in STANDARD_COLUMNS:
            raise ValueError(f"Unknown record kind: {kind} (expected one of {sorted(STANDARD_COLUMNS)})")
        self.kind = kind

    def read(self) -> pl.DataFrame:
        """Read a JSON file into a Polars DataFrame.

        A single object is treated as a one-record list, and an object holding a
        "data" list (backend response envelope) is unwrapped.

        Returns:
            Parsed Polars DataFrame with standard column names

        Raises:
            ValueError: Failed to read JSON
        """
        try:
            with open(self.file_path, encoding="utf-8") as f:
                data = json.load(f)

            if isinstance(data, dict) and isinstance(data.get("data"), list):
                data = data["data"]
            if not isinstance(data, list):
                data = [data]

            df = pl.DataFrame(data)

        except Exception as e:
            raise ValueError(f"Failed to read JSON: {self.file_path}") from e

        logger.debug(f"Read {len(df)} record(s) from {self.file_path}")
        return self.repair(df)

    def validate(self, df: pl.DataFrame) -> bool:
        """Validate a DataFrame."""
        if df.is_empty():
            return False

        if self.kind is not None:
            missing = [col for col in STANDARD_COLUMNS[self.kind] if col not in df.columns]
            if missing:
                logger.error(f"{self.file_path}: missing required column(s) for {self.kind}: {missing}")
                return False

        return True

    def repair(self, df: pl.DataFrame) -> pl.DataFrame:
        """Rename aliased backend columns to the standard names."""
        return rename_aliased_columns(df, self.kind)

"""既存カタログの表記揺れ重複レポート.

重複ブロックは作成時のみ行うため、それ以前に作られたタグには
同カテゴリ・同一正規化名のものが残り得る。ここでは検出してCSVに書き出すだけで、
カタログの修正は行わない。
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import polars as pl
from loguru import logger

from .models import Tag
from .normalize import normalize_text

DUPLICATE_COLUMNS = ["category", "normalized_name", "tag_id", "name"]


def find_catalog_duplicates(catalog: Iterable[Tag]) -> pl.DataFrame:
    """同カテゴリで正規化名が一致するタグを列挙する.

    Args:
        catalog: タグ一覧

    Returns:
        category, normalized_name, tag_id, name の DataFrame
        （重複グループに属するタグのみ。category, normalized_name, tag_id 順）
    """
    rows = [
        {
            "category": getattr(tag.category, "value", str(tag.category)),
            "normalized_name": normalize_text(str(tag.name).strip()),
            "tag_id": str(tag.id),
            "name": str(tag.name),
        }
        for tag in catalog
    ]
    if not rows:
        return pl.DataFrame(schema={col: pl.String for col in DUPLICATE_COLUMNS})

    df = pl.DataFrame(rows, schema={col: pl.String for col in DUPLICATE_COLUMNS})
    duplicates = df.filter(pl.len().over(["category", "normalized_name"]) > 1)
    return duplicates.sort(["category", "normalized_name", "tag_id"])


def export_duplicate_report(duplicates: pl.DataFrame, output_dir: Path | str) -> Path | None:
    """重複レポートをCSVファイルとして出力する.

    Args:
        duplicates: find_catalog_duplicates() の戻り値
        output_dir: 出力ディレクトリ

    Returns:
        出力したCSVのパス（重複が無ければ None）
    """
    if len(duplicates) == 0:
        logger.info("No duplicate tags found; report not written")
        return None

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / "duplicate_tags.csv"
    duplicates.write_csv(report_path)
    logger.warning(f"Found {len(duplicates)} tag(s) in duplicate groups: {report_path}")
    return report_path

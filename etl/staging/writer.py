from datetime import datetime, timezone as UTC
from pathlib import Path

import polars as pl

from dataimport._logging import get_logger
from dataimport.sources.base_connector import Record

logger = get_logger("staging.writer")


def _safe_name(value: str) -> str:
    return value.replace("/", "_").replace(".", "_")


def write_rows_to_parquet(
    rows: list[Record],
    lake_path: str,
    source_name: str,
    protocol: str = "jsonapi",
) -> str | None:
    """Write imported rows to one Parquet file partitioned by ingestion date."""
    if not rows:
        return None

    now = datetime.now(UTC.utc)
    target_dir = Path(lake_path) / protocol / source_name / now.strftime("%Y-%m-%d")
    target_dir.mkdir(parents=True, exist_ok=True)

    target_path = target_dir / f"{_safe_name(source_name)}_{now.strftime('%Y%m%dT%H%M%S%fZ')}.parquet"

    frame = pl.DataFrame(rows).with_columns(pl.lit(now.isoformat()).alias("_ingested_at"))
    frame.write_parquet(target_path)

    logger.info(
        "Parquet written for imported rows",
        extra={"source": source_name, "rows": frame.height, "path": str(target_path)},
    )
    return str(target_path)

from .writer import write_rows_to_parquet

__all__ = ["write_rows_to_parquet"]

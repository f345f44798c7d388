import uuid
from datetime import datetime, timezone as UTC

from dataimport._logging import get_logger
from dataimport.context import Context, QueryCounter
from dataimport.sources.base_connector import Record
from dataimport.sources.factory import create_connector
from dataimport.sources.jsonapi.entity_processor import URL, JSONAPIEntityProcessor
from staging import write_rows_to_parquet

logger = get_logger("pipeline.runner")


def run_import(
    connector_config: dict,
    query: str,
    *,
    source_name: str = "jsonapi",
    lake_path: str | None = None,
    variables: dict | None = None,
    counter: QueryCounter | None = None,
) -> dict:
    """
    Run one entity import:
    1. Build the data source from its config
    2. Fetch every page for the query through the entity processor
    3. Drain rows until the processor reports exhaustion
    4. Optionally stage the rows to Parquet
    """
    run_id = str(uuid.uuid4())
    started_at = datetime.now(UTC.utc)
    counter = counter or QueryCounter()
    queries_before = counter.value

    try:
        context = Context(variables=variables, entity_attributes={URL: query}, counter=counter)
        context.data_source = create_connector(connector_config, context=context, counter=counter)

        processor = JSONAPIEntityProcessor()
        processor.init(context)

        rows: list[Record] = []
        while True:
            row = processor.next_row()
            if row is None:
                break
            rows.append(row)

        parquet_path = None
        if lake_path:
            parquet_path = write_rows_to_parquet(rows, lake_path=lake_path, source_name=source_name)

    except Exception:
        logger.exception("Import failed", extra={"run_id": run_id, "source": source_name})
        raise

    finished_at = datetime.now(UTC.utc)
    logger.info("Import %s finished with %s rows", run_id, len(rows))

    return {
        "run_id": run_id,
        "status": "success",
        "rows_fetched": len(rows),
        "queries": counter.value - queries_before,
        "parquet_files": 1 if parquet_path else 0,
        "parquet_path": parquet_path,
        "duration_seconds": (finished_at - started_at).total_seconds(),
    }

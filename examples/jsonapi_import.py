import sys
from pathlib import Path

# Add the etl source root to the path
ROOT = Path(__file__).resolve().parents[1]
ETL_PATH = ROOT / "etl"
if str(ETL_PATH) not in sys.path:
    sys.path.insert(0, str(ETL_PATH))

from dataimport import QueryCounter
from pipeline.runner import run_import


def main():
    """
    Example: importing every page of a JSON:API collection.

    Demonstrates:
    - Relative query appended verbatim to base_url
    - Template variables substituted into the query
    - Following links.next until the last page
    - Staging the rows to Parquet
    """
    connector_config = {
        "protocol": "jsonapi",
        "base_url": "https://api.example.com/v1/",
        "connection_timeout": 3000,
        "read_timeout": 15000,
    }

    counter = QueryCounter()

    print("Starting JSON API import...")

    result = run_import(
        connector_config=connector_config,
        query="articles?page[size]=${page_size}",
        source_name="articles",
        lake_path="./lake",
        variables={"page_size": 100},
        counter=counter,
    )

    print(f"Imported {result['rows_fetched']} rows in {result['queries']} requests.")
    print(f"Run ID: {result['run_id']}")


if __name__ == "__main__":
    main()

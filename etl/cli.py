import argparse
import json
import sys

from dataimport import test_connection as test_source_connection
from dataimport.sources.factory import load_connector_config
from pipeline.runner import run_import


def _parse_variables(pairs: list[str] | None) -> dict[str, str]:
    variables: dict[str, str] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Expected NAME=VALUE, got '{pair}'")
        variables[name] = value
    return variables


def cmd_test_connection(args):
    """Handle test-connection subcommand."""
    try:
        config = load_connector_config(args.config)
        protocol = config.get("protocol", "unknown")
        success = test_source_connection(config, args.query)
        label = f"Source ({protocol}) from {args.config}"
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps({"success": success, "label": label}))

    if success:
        print(f"Connection to {label} successful.", file=sys.stderr)
        sys.exit(0)
    else:
        print(f"Connection to {label} failed.", file=sys.stderr)
        sys.exit(1)


def cmd_run(args):
    """Handle run subcommand."""
    try:
        connector_config = load_connector_config(args.config)
        variables = _parse_variables(args.var)
    except Exception as e:
        print(f"Error loading connector config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        result = run_import(
            connector_config=connector_config,
            query=args.query,
            source_name=args.source,
            lake_path=args.lake,
            variables=variables,
        )
    except Exception as e:
        print(f"Import failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result))
    print(f"Import finished successfully. Rows fetched: {result['rows_fetched']}", file=sys.stderr)
    sys.exit(0)


def main():
    parser = argparse.ArgumentParser(description="JSON API import CLI")
    subparsers = parser.add_subparsers(dest="command", help="Subcommand to run")

    run_parser = subparsers.add_parser("run", help="Import every page of a JSON API query")
    run_parser.add_argument("--config", required=True, help="Path to data source JSON/YAML config")
    run_parser.add_argument("--query", required=True, help="Absolute URL or path appended to base_url")
    run_parser.add_argument("--source", default="jsonapi", help="Logical name of the source")
    run_parser.add_argument("--lake", help="Base path for Parquet output (rows are only counted when omitted)")
    run_parser.add_argument("--var", action="append", metavar="NAME=VALUE", help="Template variable for ${NAME} tokens")

    test_parser = subparsers.add_parser("test-connection", help="Fetch the first page of a query")
    test_parser.add_argument("--config", required=True, help="Path to data source JSON/YAML config")
    test_parser.add_argument("--query", required=True, help="Absolute URL or path appended to base_url")

    args = parser.parse_args()

    if args.command == "run":
        cmd_run(args)
    elif args.command == "test-connection":
        cmd_test_connection(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import sys

# Importing the package registers the stubdb dialect (works even without an
# installed distribution/entrypoints).
import stubdb

from sqlalchemy import create_engine, text


def main() -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Tiny smoke test for stubdb.\n\n"
            "Stubs a query with CSV rows and runs it through a stubdb:// engine:\n"
            "  python scripts/smoke_test.py --query 'SELECT id, name FROM users' \\\n"
            "      --columns id,name --csv $'1,tim\\n2,joe'\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--query",
        default="SELECT id, created_at FROM users",
        help="Query to stub and then execute.",
    )
    parser.add_argument(
        "--columns",
        default="id,created_at",
        help="Comma-separated column names.",
    )
    parser.add_argument(
        "--csv",
        default="1,2023-01-02T15:04:05Z\n2,2023-01-03T09:30:00Z",
        help="CSV text for the stubbed rows.",
    )
    parser.add_argument(
        "--parse-times",
        action="store_true",
        help="Convert RFC 3339 fields to datetimes.",
    )
    args = parser.parse_args()

    columns = [c.strip() for c in args.columns.split(",") if c.strip()]
    if not columns:
        print("Missing --columns.", file=sys.stderr)
        return 2

    stubdb.enable_time_parsing(args.parse_times)
    stubdb.stub_query(args.query, stubdb.rows_from_csv_string(columns, args.csv))

    engine = create_engine("stubdb://")
    with engine.connect() as conn:
        result = conn.execute(text(args.query))
        print(f"columns: {list(result.keys())}")
        rows = result.all()
        print(f"rows: {len(rows)}")
        for row in rows:
            print(f"- {tuple(row)!r}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Command line entry point: `q-fallback rows.jsonl --where 'active == true' --fallback 'id == 3'`."""
import argparse
import json
import os
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .banner import banner
from .db import open_source
from .errors import InvalidArgument
from .expr import parse
from .history import PersistHistory
from .lookup import FirstOrFallback

EXIT_FOUND = 0
EXIT_NONE = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="q-fallback",
        description="Find the first record matching --where, else the first matching --fallback, in one fetch.",
    )
    p.add_argument("source", nargs="?", help="JSON, JSONL or SQLite file")
    p.add_argument("--where", help="primary filter, e.g. \"active == true\"")
    p.add_argument("--fallback", help="fallback filter, e.g. \"id == 3\"")
    p.add_argument("--table", help="table name for SQLite sources")
    p.add_argument(
        "--order-by",
        nargs="+",
        default=None,
        help="SQLite ordering columns, e.g. `id` or `id:desc`",
    )
    p.add_argument("--json", action="store_true", help="print the record as JSON")
    p.add_argument("--trace", action="store_true", help="print the lookup trace")
    p.add_argument(
        "--history",
        default=os.environ.get("Q_FALLBACK_HISTORY"),
        help="append the lookup to this JSONL file (default: $Q_FALLBACK_HISTORY)",
    )
    p.add_argument("--version", action="store_true", help="show version and exit")
    return p


def render_record(console: Console, lookup) -> None:
    table = Table(title=f"{lookup.matched} match ({lookup.fetched} fetched)")
    table.add_column("field")
    table.add_column("value")
    element = lookup.element
    items = element.items() if isinstance(element, dict) else [("value", element)]
    for key, value in items:
        table.add_row(str(key), repr(value))
    console.print(table)


def render_trace(console: Console, lookup) -> None:
    table = Table(title="trace")
    table.add_column("op")
    table.add_column("payload")
    for ev in lookup.trace:
        table.add_row(ev.op, json.dumps(ev.payload, default=repr))
    console.print(table)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()
    err = Console(stderr=True)

    if args.version:
        banner(__version__)
        return EXIT_FOUND

    try:
        if not args.source:
            raise InvalidArgument("A source file is required")
        if not args.where or not args.fallback:
            raise InvalidArgument("Both --where and --fallback are required")
        op = FirstOrFallback(parse(args.where), parse(args.fallback))
        source = open_source(args.source, table=args.table, order_by=args.order_by)
    except InvalidArgument as e:
        err.print(f"[bold red]error:[/bold red] {escape(str(e))}")
        return EXIT_INVALID

    try:
        lookup = op(source)
    finally:
        close = getattr(source, "close", None)
        if close:
            close()

    if args.history:
        PersistHistory(args.history).record(lookup)

    if args.json:
        print(json.dumps({"matched": lookup.matched, "element": lookup.element}, default=repr))
    elif lookup.found:
        render_record(console, lookup)
    else:
        console.print(f"[yellow]No record found[/yellow] ({lookup.fetched} fetched)")

    if args.trace:
        render_trace(console, lookup)
    return EXIT_FOUND if lookup.found else EXIT_NONE


if __name__ == "__main__":
    sys.exit(main())

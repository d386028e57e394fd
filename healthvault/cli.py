#!/usr/bin/env python3
"""
HealthVault CLI - talks to a running backend over HTTP
"""
import argparse
import os
import sys

from healthvault.client import ClientError, RecordsClient, format_date, normalize_record

BACKEND_URL = os.getenv("HEALTHVAULT_URL", "http://localhost:3000")


def print_records(rows):
    if not rows:
        print("No medical records found.")
        return

    for row in map(normalize_record, rows):
        condition = f" [{row['condition']}]" if row["condition"] else ""
        print(
            f"#{row['id']:<4} {row['medicine']}{condition} - {row['dosage']}, {row['duration']} "
            f"({format_date(row['startDate'])} -> {format_date(row['endDate'])})"
        )


def build_parser():
    parser = argparse.ArgumentParser(prog="healthvault-cli", description="Manage medical records")
    parser.add_argument("--url", default=BACKEND_URL, help=f"backend URL (default {BACKEND_URL})")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="list all records")

    search = commands.add_parser("search", help="search records on the server")
    search.add_argument("term")

    add = commands.add_parser("add", help="add a record")
    add.add_argument("medicine")
    add.add_argument("dosage")
    add.add_argument("duration")
    add.add_argument("start_date", metavar="START_DATE", help="YYYY-MM-DD")
    add.add_argument("end_date", metavar="END_DATE", help="YYYY-MM-DD")
    add.add_argument("--condition", default="")

    delete = commands.add_parser("delete", help="delete a record")
    delete.add_argument("record_id", type=int)

    commands.add_parser("health", help="check the backend and its database")

    return parser


def main(argv=None, session=None):
    args = build_parser().parse_args(argv)
    client = RecordsClient(args.url, session=session)

    try:
        if args.command == "list":
            print_records(client.list_records())
        elif args.command == "search":
            print_records(client.search(args.term))
        elif args.command == "add":
            record = client.create_record({
                "medicine": args.medicine,
                "dosage": args.dosage,
                "duration": args.duration,
                "startDate": args.start_date,
                "endDate": args.end_date,
                "condition": args.condition,
            })
            print(f"✓ Added record #{record['id']}")
        elif args.command == "delete":
            print(client.delete_record(args.record_id)["message"])
        elif args.command == "health":
            status = client.health()
            print(f"✓ {status['status']} ({status['backend']}: {status['database']})")
    except ClientError as e:
        print(f"✗ {e.message}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

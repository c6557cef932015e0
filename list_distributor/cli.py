"""Command line interface for distributing contact lists across agents."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import ConfigurationError, load_settings
from .distribution.service import DistributionService
from .distribution.snapshot import summarize
from .errors import DistributionError
from .factory import build_roster, build_service
from .ingestion.exporters import export_snapshot


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Split uploaded contact lists evenly across active agents",
    )
    parser.add_argument(
        "--config",
        required=True,
        help="Path to the distributor configuration file (YAML or JSON)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Distribute a CSV or Excel file across the active agents")
    upload.add_argument("input", help="Path to the contact list (CSV, TSV, XLSX or XLS)")
    upload.add_argument("--name", default=None, help="File name to record instead of the input's base name")
    upload.add_argument("--export", default=None, help="Also write the distribution to this CSV/XLSX path")

    subparsers.add_parser("list", help="List stored distributions, newest first")

    show = subparsers.add_parser("show", help="Show the assignments of one distribution")
    show.add_argument("snapshot_id", help="Identifier printed by 'upload' or 'list'")
    show.add_argument("--export", default=None, help="Write the distribution to this CSV/XLSX path")

    subparsers.add_parser("agents", help="Show the configured roster")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    try:
        settings = load_settings(args.config)
        if args.command == "agents":
            for agent in build_roster(settings).agents:
                status = "active" if agent.is_active else "inactive"
                print(f"{agent.id}\t{agent.name}\t{status}")
            return 0

        service = build_service(settings)
        if args.command == "upload":
            return _upload(service, args)
        if args.command == "list":
            return _list(service)
        return _show(service, args)
    except (ConfigurationError, DistributionError, FileNotFoundError) as exc:
        logging.error("%s", exc)
        return 1


def _upload(service: DistributionService, args: argparse.Namespace) -> int:
    snapshot = service.distribute_file(args.input, file_name=args.name)
    print(json.dumps({"id": snapshot.id, **summarize(snapshot).as_dict()}, indent=2))
    if args.export:
        destination = export_snapshot(snapshot, args.export)
        logging.info("Distribution written to %s", Path(destination).resolve())
    return 0


def _list(service: DistributionService) -> int:
    for summary in service.list_snapshots():
        print(
            f"{summary.id}\t{summary.upload_date.isoformat()}\t{summary.file_name}\t"
            f"{summary.total_records} records\t{summary.agent_count} agents"
        )
    return 0


def _show(service: DistributionService, args: argparse.Namespace) -> int:
    snapshot = service.get_snapshot(args.snapshot_id)
    print(f"{snapshot.file_name} ({snapshot.upload_date.isoformat()}): {snapshot.total_records} records")
    for assignment in snapshot.assignments:
        print(f"{assignment.agent_name} [{assignment.agent_id}]: {assignment.record_count} records")
        for record in assignment.records:
            print(f"  {record.first_name}\t{record.phone}\t{record.notes}")
    if args.export:
        destination = export_snapshot(snapshot, args.export)
        logging.info("Distribution written to %s", Path(destination).resolve())
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())

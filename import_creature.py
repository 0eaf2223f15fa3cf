#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys

from dotenv import find_dotenv, load_dotenv

from creature_import.config import (
    get_default_format, get_storage_base_url, save_storage_base_url,
)
from creature_import.creature import CustomEncoder, to_actor_data
from creature_import.exceptions import StatblockError
from creature_import.importer import import_creature_statblock
from creature_import.statblock_parser import StatblockFormat
from creature_import.storage_api import StorageAPI


def _read_input(path: str | None) -> str:
    if path:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


def _summary_lines(record) -> list[str]:
    lines = [
        f"{record.name} (level {record.level}, {record.size.value} {record.monster_type.value}, "
        f"{record.alignment.value})",
        f"  AC {record.ac}  HP {record.hp_dice} ({record.hp_value})  Speed {record.speed}  "
        f"Morale {record.morale}  XP {record.xp_award}",
    ]
    for attack in record.attacks:
        count = f"{attack.num_attacks} x " if attack.num_attacks > 1 else ""
        bonus = f"{attack.attack_bonus:+d}, " if attack.attack_type.value == "attack" else ""
        lines.append(
            f"  [{attack.attack_group}] {count}{attack.attack_name} ({bonus}{attack.attack_damage})"
        )
    for ability in record.special_abilities:
        lines.append(f"  * {ability.name}")
    return lines


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import a pasted creature statblock and store it as a new creature."
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Path to a text file containing one statblock. Reads stdin if omitted.",
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in StatblockFormat],
        default=get_default_format(),
        help="Statblock format (default: CREATURE_IMPORT_FORMAT env var or dolmenwood).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the creature payload as JSON instead of a summary.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and report only. Do not upload to the Storage API.",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Storage API base URL. Defaults to STORAGE_API_BASE env var.",
    )
    parser.add_argument(
        "--remember-base-url",
        action="store_true",
        help="Save --base-url to the user config so later runs use it by default.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the creature keys already in the Storage API and exit.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    # Mirror app behavior by loading .env in the current repo/project directory.
    load_dotenv(find_dotenv(usecwd=True), override=False)

    args = _build_parser().parse_args(argv)

    if args.remember_base_url and args.base_url:
        save_storage_base_url(args.base_url)

    base_url = args.base_url or get_storage_base_url()
    if (args.list or not args.dry_run) and not base_url:
        print(
            "No base URL set. Use --base-url or set STORAGE_API_BASE in your repo .env.",
            file=sys.stderr,
        )
        return 2

    if args.list:
        try:
            keys = StorageAPI(base_url).list_creature_keys()
        except RuntimeError as exc:
            print(f"[CreatureImport] Failed listing: {exc}", file=sys.stderr)
            return 3
        print("\n".join(sorted(keys)))
        return 0

    raw = _read_input(args.input)
    if not raw.strip():
        print("No statblock text given.", file=sys.stderr)
        return 1

    storage_api = None if args.dry_run else StorageAPI(base_url)
    try:
        result = import_creature_statblock(raw, args.format, storage_api=storage_api)
    except StatblockError as exc:
        print(f"[CreatureImport] Could not parse statblock: {exc}", file=sys.stderr)
        return 1
    except RuntimeError as exc:
        print(f"[CreatureImport] Failed upload: {exc}", file=sys.stderr)
        return 3

    if args.json:
        print(json.dumps(to_actor_data(result.record), cls=CustomEncoder, ensure_ascii=False, indent=2))
    else:
        print("\n".join(_summary_lines(result.record)))

    for warning in result.warnings:
        print(f"[CreatureImport] warning: {warning}", file=sys.stderr)

    if args.dry_run:
        print("\nDry-run only. Re-run without --dry-run to PUT to Storage API.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

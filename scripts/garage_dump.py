#!/usr/bin/env python3
"""Dump stored vehicles from a garage data directory.

Reads the per-player JSON files the garage engine writes and prints
every stored vehicle with its inventory, so broken or surprising files
can be inspected without starting a game server.

Usage
-----
::

    export GARAGE_DATA_DIR="/srv/profile/BLG"
    python scripts/garage_dump.py

Options::

    --player UID         Only dump this player (default: every file)
    --json               Output as machine-readable JSON
    --show-codes         Print key codes instead of redacting them
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any
from urllib.parse import unquote

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pygarage import GarageConfig, RecordCorruptError, RecordStore  # noqa: E402
from pygarage._constants import RECORD_FILE_SUFFIX  # noqa: E402
from pygarage._redact import redact_for_log  # noqa: E402
from pygarage.models import PlayerGarage  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _player_uids(data_dir: Path) -> list[str]:
    return sorted(unquote(path.name[: -len(RECORD_FILE_SUFFIX)]) for path in data_dir.glob(f"*{RECORD_FILE_SUFFIX}"))


def _format_garage(garage: PlayerGarage, *, show_codes: bool) -> list[str]:
    out = [_section(f"player_uid={garage.player_uid}  vehicles={len(garage)}")]
    if not garage.vehicles:
        out.append("  No stored vehicles")
        return out
    for index, vehicle in enumerate(garage.vehicles):
        code = vehicle.key_code if show_codes else "<redacted>"
        out.append(f"  [{index}] {vehicle.display_name}")
        out.append(f"      prefab   : {vehicle.prefab}")
        out.append(f"      key_id   : {vehicle.key_id}")
        out.append(f"      key_code : {code}")
        out.append(f"      items    : {vehicle.item_count}")
        for slot in vehicle.inventory:
            out.append(f"        - {slot.count} x {slot.prefab}")
    return out


# ── main ─────────────────────────────────────────────────────


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dump stored vehicles from a pygarage data directory.",
    )
    parser.add_argument("--data-dir", help="Garage data directory (default: GARAGE_DATA_DIR or ./BLG)")
    parser.add_argument("--player", help="Only dump this player UID (default: all players)")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--show-codes", action="store_true", help="Do not redact key codes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    config = GarageConfig.from_env(**overrides)
    store = RecordStore(config.data_dir)

    uids = [args.player] if args.player else _player_uids(store.data_dir)
    result: dict[str, Any] = {"data_dir": str(store.data_dir), "players": []}
    failures = 0

    for uid in uids:
        try:
            garage = store.load(uid)
        except RecordCorruptError as exc:
            failures += 1
            result["players"].append({"player_uid": uid, "error": str(exc)})
            if not args.json_mode:
                print(f"\n  !! {uid}: {exc}")
            continue

        payload = garage.to_payload()
        result["players"].append(payload if args.show_codes else redact_for_log(payload))
        if not args.json_mode:
            print("\n".join(_format_garage(garage, show_codes=args.show_codes)))

    if args.json_mode:
        print(json.dumps(result, indent=2, ensure_ascii=False))

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

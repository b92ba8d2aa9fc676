#!/usr/bin/env python3
"""Connect to a SWIOTT sensor and print what the session learns.

Usage
-----
::

    export SWIOTT_ADDRESS="AA:BB:CC:DD:EE:FF"   # optional, else first sensor found
    python scripts/swiott_console.py --seconds 15

Options::

    --address ADDR       BLE address of the sensor (overrides SWIOTT_ADDRESS)
    --demo               Simulated session; commands are only logged
    --seconds N          How long to keep the session open (default 10)
    --calibrate          Start a radar calibration after connecting
    --reboot             Reboot the sensor after connecting
    --command CMD        Send a raw AT command (repeatable)
    --json               Output the final snapshot as JSON
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyswiott import SwiottClient, SwiottConfig, SwiottError  # noqa: E402


def _section(title: str) -> str:
    return f"\n── {title} " + "─" * max(0, 60 - len(title))


def _snapshot(client: SwiottClient) -> dict[str, Any]:
    operation = client.operation
    return {
        "connection_state": client.connection_state.value,
        "demo": client.is_demo,
        "status_message": client.status_message,
        "operation": operation.model_dump(mode="json") if operation is not None else None,
        "state": {section.value: data for section, data in client.store.snapshot().items()},
        "log": [entry.model_dump(mode="json") for entry in client.log],
    }


def _print_text(snapshot: dict[str, Any], rendered_log: list[str]) -> None:
    out: list[str] = [_section("SESSION")]
    out.append(f"  state     : {snapshot['connection_state']}")
    out.append(f"  demo      : {snapshot['demo']}")
    if snapshot["status_message"]:
        out.append(f"  status    : {snapshot['status_message']}")
    for section, data in snapshot["state"].items():
        out.append(_section(section.upper()))
        width = max((len(key) for key in data), default=0)
        for key, value in data.items():
            out.append(f"  {key:<{width}} : {value}")
    out.append(_section("LOG"))
    out.extend(f"  {line}" for line in rendered_log)
    print("\n".join(out))


async def run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.address:
        overrides["address"] = args.address
    if args.demo:
        overrides["demo_mode"] = True
    config = SwiottConfig.from_env(**overrides)

    async with SwiottClient(config) as client:
        try:
            await client.connect()
        except SwiottError as exc:
            print(f"Connection failed: {exc}", file=sys.stderr)
            return 1

        if args.calibrate:
            client.calibrate()
        if args.reboot:
            client.reboot()
        for command in args.command:
            client.send_command(command)

        await asyncio.sleep(args.seconds)

        snapshot = _snapshot(client)
        rendered_log = [entry.render() for entry in client.log]

    if args.json_mode:
        print(json.dumps(snapshot, indent=2, default=str, ensure_ascii=False))
    else:
        _print_text(snapshot, rendered_log)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect a SWIOTT parking sensor over BLE.")
    parser.add_argument("--address", help="BLE address of the sensor (default: first sensor found)")
    parser.add_argument("--demo", action="store_true", help="Simulated session without hardware")
    parser.add_argument("--seconds", type=float, default=10.0, help="How long to keep the session open")
    parser.add_argument("--calibrate", action="store_true", help="Start a radar calibration")
    parser.add_argument("--reboot", action="store_true", help="Reboot the sensor")
    parser.add_argument("--command", action="append", default=[], help="Raw AT command to send (repeatable)")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()

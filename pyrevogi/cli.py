"""
Revogi command line interface.

Commands:
  devices                 - List registered power strips
  stats <sn>              - Show per-port state, watts and amps
  on <sn> <port>          - Turn a port ON (port 0 = all ports)
  off <sn> <port>         - Turn a port OFF

Credentials are read from --username/--password or the REVOGI_USERNAME and
REVOGI_PASSWORD environment variables.

Examples:
  revogi devices
  revogi stats SWW6010040000001
  revogi on SWW6010040000001 3
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .client import RevogiClient
from .exceptions import RevogiError
from .models import Config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="revogi", description="Control Revogi power strips")
    parser.add_argument("--username", default=os.environ.get("REVOGI_USERNAME"))
    parser.add_argument("--password", default=os.environ.get("REVOGI_PASSWORD"))
    parser.add_argument("--max-retries", type=int, default=3)
    parser.add_argument("--cooldown", type=float, default=5)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("devices", help="List registered power strips")

    stats = sub.add_parser("stats", help="Show per-port telemetry")
    stats.add_argument("sn")

    for name in ("on", "off"):
        power = sub.add_parser(name, help=f"Turn a port {name.upper()}")
        power.add_argument("sn")
        power.add_argument("port", type=int)

    return parser


def cmd_devices(client: RevogiClient) -> None:
    for device in client.get_devices():
        print(f"{device.sn}  {device.name}  fw {device.ver}  ip {device.ip or '-'}")
        for port, name in enumerate(device.pname, 1):
            print(f"   Port {port}: {name}")


def cmd_stats(client: RevogiClient, sn: str) -> None:
    stats = client.get_device_stats(sn)
    print(f"{stats.sn}  {'online' if stats.is_online else 'offline'}  fw {stats.softver}")
    for port in range(1, stats.port_count + 1):
        state = "ON" if stats.port_state(port) else "OFF"
        print(f"   Port {port}: {state:3}  {stats.port_watts(port)} W  {stats.port_amps(port)} A")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.username or not args.password:
        print("Error: username and password are required", file=sys.stderr)
        return 2

    config = Config(
        username=args.username,
        password=args.password,
        max_retries=args.max_retries,
        cooldown_seconds=args.cooldown,
    )

    try:
        with RevogiClient(config) as client:
            if args.command == "devices":
                cmd_devices(client)
            elif args.command == "stats":
                cmd_stats(client, args.sn)
            else:
                client.set_power(args.sn, args.port, args.command == "on")
                print(f"Port {args.port} of {args.sn}: {args.command.upper()}")
    except (RevogiError, ValueError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

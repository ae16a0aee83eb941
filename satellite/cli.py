"""Command line entry point."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import LauncherConfig
from .core.pipeline import launch_version
from .errors import LauncherError
from .utils.async_http import AsyncHTTPClient
from .utils.logger import setup_logging
from .versions.manager import VersionManager, filter_versions


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, default=None, help="path to config.json")
    common.add_argument("-v", "--verbose", action="store_true", help="debug output on the console")

    parser = argparse.ArgumentParser(prog="satellite", description="Minimal offline Minecraft launcher")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    versions = sub.add_parser("versions", parents=[common], help="list available versions")
    versions.add_argument("--all", action="store_true", help="include snapshots and old versions")

    launch = sub.add_parser("launch", parents=[common], help="download and start a version")
    launch.add_argument("version_id", metavar="VERSION")
    return parser


async def list_versions(config: LauncherConfig, show_all: bool) -> int:
    async with AsyncHTTPClient(timeout=config.download_timeout) as http:
        versions = await VersionManager(http).list_versions()
    if not show_all:
        versions = filter_versions(versions, config.show_snapshots, config.show_beta_versions)
    for version in versions:
        print(f"{version.id}\t{version.type.value}")
    return 0


async def launch(config: LauncherConfig, version_id: str) -> int:
    try:
        process = await launch_version(config, version_id)
    except LauncherError:
        # Already reported through the pipeline's error event.
        return 1
    print(f"Started process {process.pid}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = LauncherConfig.load(args.config)
        if args.command == "versions":
            return asyncio.run(list_versions(config, args.all))
        return asyncio.run(launch(config, args.version_id))
    except LauncherError as e:
        print(f"Launch failed: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

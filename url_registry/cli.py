#!/usr/bin/env python3
"""
Command-line interface for the link registry.

Usage:
    url-registry shorten <url> [--alias ALIAS]
    url-registry get <id|short-url>
    url-registry open <id|short-url>
    url-registry list
    url-registry delete <id|short-url>
    url-registry sweep
    url-registry stats
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from .config import Config, load_config
from .factory import create_registry
from .lib.errors import LinkRegistryError
from .lib.storage.models import LinkRecord
from .lib.common.logging_config import setup_logging
from .lib.common.url_builder import extract_short_id


class LinkRegistryCLI:
    """Command-line interface for the link registry."""

    def __init__(self, config: Config, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        # Logs go to stderr so stdout stays machine-readable JSON
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING", stream=sys.stderr)
        self.registry = create_registry(config, logger=self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        await self.registry.close()

    def _record_json(self, record: LinkRecord) -> dict:
        data = record.to_dict()
        data["expired"] = self.registry.is_expired(record)
        return data

    def _print(self, payload: dict, error: bool = False) -> int:
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
        return 1 if error else 0

    def _link_id(self, ref: str) -> Optional[str]:
        """Accept either a bare identifier or a complete short URL."""
        if "://" not in ref:
            return ref
        return extract_short_id(ref, self.config.base_url, self.config.path_prefix)

    def _not_found(self, ref: str) -> int:
        return self._print(
            {"success": False, "error": f"Short link '{ref}' not found"},
            error=True,
        )

    async def shorten(self, url: str, alias: Optional[str] = None) -> int:
        """Shorten a URL."""
        try:
            record = await self.registry.create_link(url, alias)
        except LinkRegistryError as e:
            return self._print({"success": False, "error": str(e)}, error=True)

        return self._print({
            "success": True,
            "link": self._record_json(record),
            "message": f"Successfully shortened URL to: {record.short_url}",
        })

    async def get(self, ref: str) -> int:
        """Show a link without counting a click."""
        link_id = self._link_id(ref)
        if link_id is None:
            return self._not_found(ref)

        try:
            record = await self.registry.resolve(link_id)
        except LinkRegistryError as e:
            return self._print({"success": False, "error": str(e)}, error=True)

        if record is None:
            return self._not_found(ref)
        return self._print({"success": True, "link": self._record_json(record)})

    async def open(self, ref: str) -> int:
        """Follow a link as a visitor would, counting the click."""
        link_id = self._link_id(ref)
        if link_id is None:
            return self._print({"success": False, "error": "URL not found"}, error=True)

        try:
            record = await self.registry.follow_link(link_id)
        except LinkRegistryError as e:
            return self._print({"success": False, "error": str(e)}, error=True)
        return self._print({"success": True, "original_url": record.original_url, "clicks": record.clicks})

    async def list_links(self) -> int:
        """List all links, newest first."""
        try:
            records = await self.registry.list_links()
        except LinkRegistryError as e:
            return self._print({"success": False, "error": str(e)}, error=True)

        records.sort(key=lambda record: record.created_at, reverse=True)
        return self._print({
            "success": True,
            "count": len(records),
            "links": [self._record_json(record) for record in records],
        })

    async def delete(self, ref: str) -> int:
        """Delete a link."""
        link_id = self._link_id(ref)
        if link_id is None:
            return self._not_found(ref)

        try:
            deleted = await self.registry.delete_link(link_id)
        except LinkRegistryError as e:
            return self._print({"success": False, "error": str(e)}, error=True)

        if not deleted:
            return self._not_found(ref)
        return self._print({"success": True, "deleted": link_id})

    async def sweep(self) -> int:
        """Remove expired links."""
        try:
            removed = await self.registry.sweep_expired()
        except LinkRegistryError as e:
            return self._print({"success": False, "error": str(e)}, error=True)
        return self._print({"success": True, "removed": removed})

    async def stats(self) -> int:
        """Show totals and the most clicked links."""
        try:
            stats = await self.registry.get_statistics()
        except LinkRegistryError as e:
            return self._print({"success": False, "error": str(e)}, error=True)

        stats["top_links"] = [self._record_json(record) for record in stats["top_links"]]
        return self._print({"success": True, "statistics": stats})


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="URL Registry CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten example.com/long/url

  # Shorten with a custom alias
  %(prog)s shorten https://example.com/long/url --alias "my link"

  # Visit a link (counts a click)
  %(prog)s open my-link

  # Remove expired links
  %(prog)s sweep
        """
    )

    parser.add_argument(
        "--storage-backend",
        choices=["file", "redis"],
        help="Storage backend (default: from STORAGE_BACKEND env or file)"
    )
    parser.add_argument(
        "--storage-dir",
        help="Directory for the file backend (default: from STORAGE_DIR env or ~/.url_registry)"
    )
    parser.add_argument(
        "--redis-url",
        help="Redis connection URL (default: from REDIS_URL env)"
    )
    parser.add_argument(
        "--base-url",
        help="Origin for short URLs (default: from BASE_URL env)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--alias", help="Custom alias")

    get_parser = subparsers.add_parser("get", help="Show a link")
    get_parser.add_argument("link_id", help="Short identifier or short URL")

    open_parser = subparsers.add_parser("open", help="Follow a link and count the click")
    open_parser.add_argument("link_id", help="Short identifier or short URL")

    subparsers.add_parser("list", help="List links")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("link_id", help="Short identifier or short URL")

    subparsers.add_parser("sweep", help="Remove expired links")
    subparsers.add_parser("stats", help="Show statistics")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    overrides = {
        "storage_backend": args.storage_backend,
        "storage_dir": args.storage_dir,
        "redis_url": args.redis_url,
        "base_url": args.base_url,
    }
    config = load_config().model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )

    cli = LinkRegistryCLI(config, verbose=args.verbose)

    try:
        if args.command == "shorten":
            return await cli.shorten(args.url, args.alias)
        elif args.command == "get":
            return await cli.get(args.link_id)
        elif args.command == "open":
            return await cli.open(args.link_id)
        elif args.command == "list":
            return await cli.list_links()
        elif args.command == "delete":
            return await cli.delete(args.link_id)
        elif args.command == "sweep":
            return await cli.sweep()
        elif args.command == "stats":
            return await cli.stats()
        else:
            parser.print_help()
            return 1
    finally:
        await cli.cleanup()


def run():
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()

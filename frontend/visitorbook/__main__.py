"""
VisitorBook Frontend: Terminal Entry Point
============================================

Usage:
    python -m visitorbook                              # show the page
    python -m visitorbook --name Alice --message Hi    # sign, then show

Exit status is 1 when a submission was rejected (validation notice or
failed API call).
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from visitorbook.api.client import ApiClient
from visitorbook.app import VisitorBookApp
from visitorbook.config import ClientSettings

logger = logging.getLogger("visitorbook")


def setup_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="visitorbook", description="VisitorBook terminal client")
    parser.add_argument("--api-url", help="Backend base URL (default: VISITORBOOK_API_URL)")
    parser.add_argument("--name", help="Your name")
    parser.add_argument("--message", help="Your message")
    return parser.parse_args(argv)


def _alert(text: str) -> None:
    print(f"!! {text}", file=sys.stderr)


async def run(settings: ClientSettings, args: argparse.Namespace) -> int:
    async with ApiClient(args.api_url or settings.api_url, timeout=settings.request_timeout) as client:
        page = VisitorBookApp(client, notify=_alert)
        await page.load()

        status = 0
        if args.name is not None or args.message is not None:
            page.form.name = args.name or ""
            page.form.content = args.message or ""
            if not await page.form.submit():
                status = 1

        print(page.render())
        return status


def main(argv: Optional[List[str]] = None) -> int:
    settings = ClientSettings()
    setup_logging(settings.log_level)
    return asyncio.run(run(settings, parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())

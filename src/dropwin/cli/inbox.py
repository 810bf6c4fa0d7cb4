"""Terminal client: manage disposable mailboxes and watch the selected inbox."""

from __future__ import annotations

import argparse
import asyncio
import sys

from loguru import logger

from dropwin.api.dependencies import Services, build_services
from dropwin.domain import Message, parse_address
from dropwin.domain.errors import DropwinError
from dropwin.infrastructure import configure_logging, get_settings
from dropwin.infrastructure.email.providers.onesecmail import render_html_body

WATCH_CHECK_SECONDS = 1.0


class InboxPrinter:
    """Prints messages the first time they are seen."""

    def __init__(self, out=None):
        self.out = out or sys.stdout
        self.seen: set[int] = set()

    def __call__(self, address: str, messages: list[Message]) -> None:
        # Oldest first so the terminal reads chronologically
        for message in reversed(messages):
            if message.id in self.seen:
                continue
            self.seen.add(message.id)
            when = message.date.strftime("%Y-%m-%d %H:%M")
            print(f"[{message.id}] {when}  {message.sender}  {message.subject}", file=self.out)


async def _new(services: Services, args: argparse.Namespace) -> int:
    mailbox = services.store.create()
    print(mailbox.address)
    return 0


async def _list(services: Services, args: argparse.Namespace) -> int:
    mailboxes = services.store.all()
    if not mailboxes:
        print("No mailboxes yet. Create one with: dropwin new")
        return 0
    for mailbox in mailboxes:
        created = mailbox.created_at.strftime("%Y-%m-%d %H:%M")
        print(f"{mailbox.address:<40} {created}  {mailbox.message_count} message(s)")
    return 0


async def _rm(services: Services, args: argparse.Namespace) -> int:
    if services.store.remove(args.address):
        print(f"Removed {args.address}")
    else:
        print(f"Not tracked: {args.address}")
    return 0


async def _read(services: Services, args: argparse.Namespace) -> int:
    message = await services.provider.read_message(parse_address(args.address), args.id)
    print(f"From:    {message.sender}")
    print(f"Subject: {message.subject}")
    print(f"Date:    {message.date.isoformat()}")
    for attachment in message.attachments:
        print(f"Attachment: {attachment.get('filename', '?')} ({attachment.get('size', '?')} bytes)")
    print()
    print(render_html_body(message) if args.html else message.text_body or "(Empty message)")
    return 0


async def _watch(services: Services, args: argparse.Namespace) -> int:
    engine = services.engine
    engine.listener = InboxPrinter()

    if args.address:
        address = args.address
    else:
        newest = services.store.newest()
        address = newest.address if newest else (await engine.create()).address

    print(f"Watching {address} (Ctrl-C to stop)")
    await engine.select(address)
    try:
        while engine.selected == address:
            await asyncio.sleep(WATCH_CHECK_SECONDS)
    finally:
        engine.deselect()
    return 0


COMMANDS = {
    "new": _new,
    "list": _list,
    "rm": _rm,
    "read": _read,
    "watch": _watch,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dropwin", description="Disposable inboxes from the terminal")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("new", help="Create a new mailbox")
    sub.add_parser("list", help="List tracked mailboxes")

    rm = sub.add_parser("rm", help="Stop tracking a mailbox")
    rm.add_argument("address")

    read = sub.add_parser("read", help="Print one message")
    read.add_argument("address")
    read.add_argument("id", type=int)
    read.add_argument("--html", action="store_true", help="Print the HTML body")

    watch = sub.add_parser("watch", help="Poll a mailbox and print new messages")
    watch.add_argument("address", nargs="?", help="Defaults to the newest mailbox")
    return parser


async def run(args: argparse.Namespace) -> int:
    services = build_services(get_settings())
    try:
        if args.command == "watch" and args.address and args.address not in services.store:
            print(f"Not tracked: {args.address}", file=sys.stderr)
            return 1
        return await COMMANDS[args.command](services, args)
    except DropwinError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        await services.aclose()


def main(argv: list[str] | None = None) -> int:
    """Entry point for the dropwin command."""
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())

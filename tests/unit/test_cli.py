"""Terminal client commands."""

import argparse
import asyncio
import io

import pytest

from dropwin.api.dependencies import Services, build_services
from dropwin.cli import inbox
from dropwin.infrastructure import MemoryBlobStore, Settings
from tests.fakes import FakeProvider, FakeScheduler, make_message, settle


@pytest.fixture
def sqlite_settings(tmp_path, monkeypatch):
    settings = Settings(_env_file=None, storage_backend="sqlite", sqlite_db_path=str(tmp_path / "cli.db"))
    monkeypatch.setattr(inbox, "get_settings", lambda: settings)
    return settings


def test_new_list_and_rm_share_persisted_state(sqlite_settings, capsys):
    assert inbox.main(["new"]) == 0
    address = capsys.readouterr().out.strip()
    assert "@" in address

    assert inbox.main(["list"]) == 0
    assert address in capsys.readouterr().out

    assert inbox.main(["rm", address]) == 0
    assert f"Removed {address}" in capsys.readouterr().out

    assert inbox.main(["list"]) == 0
    assert "No mailboxes yet" in capsys.readouterr().out


def test_watch_rejects_untracked_address(sqlite_settings):
    assert inbox.main(["watch", "ghost@1secmail.com"]) == 1


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        inbox.build_parser().parse_args([])


def test_printer_shows_each_message_once_oldest_first():
    out = io.StringIO()
    printer = inbox.InboxPrinter(out)

    printer("a@1secmail.com", [make_message(2, subject="second"), make_message(1, subject="first")])
    printer("a@1secmail.com", [make_message(3, subject="third"), make_message(2), make_message(1)])

    lines = out.getvalue().splitlines()
    assert [line.split("]")[0] for line in lines] == ["[1", "[2", "[3"]
    assert "first" in lines[0]


@pytest.fixture
def fake_services(monkeypatch) -> Services:
    settings = Settings(_env_file=None, storage_backend="memory")
    services = build_services(settings, provider=FakeProvider(), blobs=MemoryBlobStore(), scheduler=FakeScheduler())
    monkeypatch.setattr(inbox, "get_settings", lambda: settings)
    monkeypatch.setattr(inbox, "build_services", lambda _settings: services)
    return services


def test_read_prints_headers_attachments_and_body(fake_services, capsys):
    address = "quickbox1234@1secmail.com"
    fake_services.provider.inboxes[address] = [
        make_message(11, subject="Report", attachments=({"filename": "r.pdf", "size": 1024},))
    ]

    assert inbox.main(["read", address, "11"]) == 0

    out = capsys.readouterr().out
    assert "From:    alice@example.com" in out
    assert "Subject: Report" in out
    assert "Attachment: r.pdf (1024 bytes)" in out
    assert out.rstrip().endswith("body 11")


def test_read_html_renders_text_fallback(fake_services, capsys):
    address = "quickbox1234@1secmail.com"
    fake_services.provider.inboxes[address] = [make_message(4, text_body="a < b")]

    assert inbox.main(["read", address, "4", "--html"]) == 0
    assert "a &lt; b" in capsys.readouterr().out


def test_read_missing_message_fails(fake_services):
    assert inbox.main(["read", "quickbox1234@1secmail.com", "99"]) == 1


async def test_watch_prints_new_messages_until_deselected(fake_services, monkeypatch, capsys):
    monkeypatch.setattr(inbox, "WATCH_CHECK_SECONDS", 0)
    services = fake_services
    address = services.store.create().address
    services.provider.inboxes[address] = [make_message(7, subject="Code 4821")]

    task = asyncio.create_task(inbox._watch(services, argparse.Namespace(address=address)))
    await settle()

    services.provider.inboxes[address].append(make_message(8, subject="Second code"))
    await services.engine.scheduler.active_timers[0].tick()
    await settle()

    services.engine.deselect()
    assert await asyncio.wait_for(task, timeout=1) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"Watching {address} (Ctrl-C to stop)"
    assert [line.split("]")[0] for line in lines[1:]] == ["[7", "[8"]
    assert "Code 4821" in lines[1]
    assert services.engine.scheduler.active_timers == []

"""DropWin Mail - disposable inboxes backed by a polled mail provider."""

__version__ = "2.1.0"

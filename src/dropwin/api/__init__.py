"""HTTP API for DropWin Mail."""

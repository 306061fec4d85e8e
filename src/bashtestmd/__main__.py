"""Entry point for ``python -m bashtestmd``."""

from __future__ import annotations

from bashtestmd.cli import app

if __name__ == "__main__":
    app()

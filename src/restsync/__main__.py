"""Allow `python -m restsync ...`."""

from __future__ import annotations

from restsync.cli.main import run

if __name__ == "__main__":
    run()

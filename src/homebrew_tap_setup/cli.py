"""Console script entrypoint.

The CLI is implemented in `homebrew_tap_setup.main`.
"""

from __future__ import annotations

from homebrew_tap_setup.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())

"""``python -m pixelsketch`` entry point."""

from __future__ import annotations

from pixelsketch.cli import main

if __name__ == "__main__":
    main()

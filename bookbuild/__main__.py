"""Allow running as `python -m bookbuild`."""

from .cli import main

main()

"""Allow ``python -m wren``."""

from wren.cli import main

main()

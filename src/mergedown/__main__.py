"""Allow ``python -m mergedown``."""

from mergedown.cli import main

main()

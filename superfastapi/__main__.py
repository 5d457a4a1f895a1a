"""Allow ``python -m superfastapi``."""

from superfastapi.cli import main

main()

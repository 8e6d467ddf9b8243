"""Allow ``python -m islandmesh``."""

from .cli import main

main()

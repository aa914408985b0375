"""Allow running as ``python -m faultmap``."""

from .cli import main

main()

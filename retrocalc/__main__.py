"""Allow running as python -m retrocalc."""

from .cli import main

main(prog_name="retrocalc")

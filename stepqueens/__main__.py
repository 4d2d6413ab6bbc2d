"""Allow ``python -m stepqueens``."""

from .analysis.cli import main

main()

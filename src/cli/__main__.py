"""Allow ``python -m src.cli`` execution."""

from src.cli.docs import main

main()

"""Command-line entry point for the githashprop tool."""

from __future__ import annotations

import sys

from githashprop.cli import app


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())

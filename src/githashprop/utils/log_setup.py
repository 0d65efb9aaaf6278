"""
Logging setup for githashprop.

Console logging goes through rich, optionally mirrored to a log file.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console(stderr=True)


def setup_logging(is_verbose: bool = False, log_file_path: Path | str | None = None) -> None:
	"""
	Route log records to the rich console and, optionally, a log file.

	Args:
	    is_verbose: Log DEBUG and above instead of WARNING and above
	    log_file_path: File receiving every record at DEBUG level, or None

	"""
	log_level = logging.DEBUG if is_verbose else logging.WARNING

	root_logger = logging.getLogger()
	root_logger.setLevel(log_level)

	# Replace handlers from earlier calls so records are not emitted twice
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)
		handler.close()

	root_logger.addHandler(
		RichHandler(console=console, level=log_level, rich_tracebacks=True, show_path=is_verbose)
	)

	if not log_file_path:
		return

	file_handler_path = Path(log_file_path)
	try:
		file_handler_path.parent.mkdir(parents=True, exist_ok=True)
		file_handler = logging.FileHandler(file_handler_path, mode="a", encoding="utf-8")
	except OSError as e:
		console.print(f"Could not log to {file_handler_path}: {e}", style="yellow", markup=False)
		return

	file_handler.setLevel(logging.DEBUG)
	file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
	root_logger.addHandler(file_handler)
	root_logger.debug("Logging to file: %s", file_handler_path)


def display_error_summary(error_message: str) -> None:
	"""
	Display an error summary with a divider and a title.

	Args:
	        error_message: The error message to display

	"""
	title = Text("Error Summary", style="bold red")

	console.print()
	console.print(Rule(title, style="red"))
	console.print(f"\n{error_message}\n", markup=False)
	console.print(Rule(style="red"))
	console.print()

"""Command for displaying what githashprop resolves for a working directory."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .resolve_cmd import ConfigOpt, PathArg, SearchParentsFlag, ShortHashFlag


def register_command(app: typer.Typer) -> None:
	"""Register the show command with the CLI app."""

	@app.command(name="show")
	def show_command(
		path: PathArg = None,
		short_hash: ShortHashFlag = None,
		config_file: ConfigOpt = None,
		search_parents: SearchParentsFlag = False,
		no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output")] = False,
	) -> None:
		"""Show the HEAD reference, branch and commit hash in a table."""
		_show_command_impl(
			path=path,
			short_hash=short_hash,
			config_file=config_file,
			search_parents=search_parents,
			no_color=no_color,
		)


def _show_command_impl(
	path: Path | None,
	short_hash: bool | None,
	config_file: Path | None,
	search_parents: bool,
	no_color: bool,
) -> None:
	"""Actual implementation of the show command."""
	from rich.console import Console
	from rich.table import Table

	from githashprop.resolver import HashSource, resolve
	from githashprop.utils.cli_utils import console, exit_with_error
	from githashprop.utils.config_loader import ConfigError, ConfigLoader

	from .resolve_cmd import locate_repo_root

	repo_root = locate_repo_root(path, search_parents=search_parents)

	try:
		config_loader = ConfigLoader.get_instance(config_file, reload=True, repo_root=repo_root)
		config = config_loader.resolver_config(short_hash=short_hash)
	except ConfigError as e:
		exit_with_error("Could not load configuration", exception=e)
		return

	result = resolve(repo_root, config)

	table = Table(title=f"Git metadata for {repo_root}", show_header=True, header_style="bold")
	table.add_column("Field", style="cyan")
	table.add_column("Value")
	table.add_row("HEAD ref", result.ref_path or "-")
	table.add_row(f"Property '{result.property_name}'", result.hash_value or "-")
	if result.branch_property_name:
		table.add_row(f"Property '{result.branch_property_name}'", result.branch_value or "-")
	source_style = "green" if result.source is HashSource.REPOSITORY else "yellow"
	table.add_row("Source", f"[{source_style}]{result.source.value}[/{source_style}]")
	if result.reason:
		table.add_row("Note", result.reason)

	output_console = Console(no_color=True) if no_color else console
	output_console.print(table)

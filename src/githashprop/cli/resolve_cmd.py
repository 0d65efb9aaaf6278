"""Command for resolving the commit hash and branch properties of a working directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from githashprop.properties import OutputFormat

logger = logging.getLogger(__name__)

# --- Command Argument Annotations ---

PathArg = Annotated[
	Path | None,
	typer.Argument(
		help="Working directory containing the .git directory (defaults to the current directory)",
		show_default=False,
	),
]

PropertyNameOpt = Annotated[
	str | None, typer.Option("--property-name", "-p", help="Property receiving the commit hash")
]

PrefixOpt = Annotated[str | None, typer.Option("--prefix", help="Text placed before the hash")]

SuffixOpt = Annotated[str | None, typer.Option("--suffix", help="Text placed after the hash")]

ShortHashFlag = Annotated[
	bool | None,
	typer.Option("--short/--no-short", help="Truncate a hash read from the repository to 7 characters"),
]

FallbackOpt = Annotated[
	str | None, typer.Option("--fallback", help="Value used when the commit hash cannot be read")
]

BranchPropertyOpt = Annotated[
	str | None, typer.Option("--branch-property", "-b", help="Property receiving the branch name")
]

FallbackBranchOpt = Annotated[
	str | None, typer.Option("--fallback-branch", help="Value used when no branch name can be derived")
]

ConfigOpt = Annotated[Path | None, typer.Option("--config", "-c", help="Path to config file")]

SearchParentsFlag = Annotated[
	bool, typer.Option("--search-parents", help="Look for the .git directory in parent directories too")
]

FormatOpt = Annotated[
	OutputFormat | None,
	typer.Option("--format", "-f", help="Output format (overrides config)", case_sensitive=False),
]

OutputOpt = Annotated[
	Path | None,
	typer.Option("--output", "-o", help="Merge the properties into this file instead of printing them"),
]

StrictFlag = Annotated[bool, typer.Option("--strict", help="Exit with status 1 when no hash property was set")]


def register_command(app: typer.Typer) -> None:
	"""Register the resolve command with the CLI app."""

	@app.command(name="resolve")
	def resolve_command(
		path: PathArg = None,
		property_name: PropertyNameOpt = None,
		prefix: PrefixOpt = None,
		suffix: SuffixOpt = None,
		short_hash: ShortHashFlag = None,
		fallback: FallbackOpt = None,
		branch_property: BranchPropertyOpt = None,
		fallback_branch: FallbackBranchOpt = None,
		config_file: ConfigOpt = None,
		search_parents: SearchParentsFlag = False,
		output_format: FormatOpt = None,
		output: OutputOpt = None,
		strict: StrictFlag = False,
	) -> None:
		"""
		Resolve the commit hash and branch name and print them as properties.

		Nothing is printed for values that cannot be determined and have no
		fallback configured.

		"""
		_resolve_command_impl(
			path=path,
			overrides={
				"property_name": property_name,
				"property_prefix": prefix,
				"property_suffix": suffix,
				"short_hash": short_hash,
				"fallback_value": fallback,
				"branch_property_name": branch_property,
				"fallback_branch_value": fallback_branch,
			},
			config_file=config_file,
			search_parents=search_parents,
			output_format=output_format,
			output=output,
			strict=strict,
		)


def locate_repo_root(path: Path | None, *, search_parents: bool) -> Path:
	"""Pick the working directory to resolve, optionally searching parent directories."""
	from githashprop.resolver import discover_repo_root

	repo_root = path or Path.cwd()
	if search_parents:
		discovered = discover_repo_root(repo_root)
		if discovered is None:
			logger.warning("No .git directory found at or above %s", repo_root)
		else:
			repo_root = discovered
	elif not repo_root.is_dir():
		logger.warning("Working directory %s does not exist", repo_root)
	return repo_root


def _resolve_command_impl(
	path: Path | None,
	overrides: dict[str, str | bool | None],
	config_file: Path | None,
	search_parents: bool,
	output_format: OutputFormat | None,
	output: Path | None,
	strict: bool,
) -> None:
	"""Actual implementation of the resolve command."""
	from githashprop.properties import apply_result, format_properties, write_properties_file
	from githashprop.resolver import resolve
	from githashprop.utils.cli_utils import exit_with_error
	from githashprop.utils.config_loader import ConfigError, ConfigLoader

	repo_root = locate_repo_root(path, search_parents=search_parents)

	try:
		config_loader = ConfigLoader.get_instance(config_file, reload=True, repo_root=repo_root)
		config = config_loader.resolver_config(**overrides)
		fmt = OutputFormat(output_format or config_loader.get("output", "format", OutputFormat.PROPERTIES))
	except ConfigError as e:
		exit_with_error("Could not load configuration", exception=e)
		return
	except ValueError as e:
		exit_with_error("Unsupported output format in configuration", exception=e)
		return

	result = resolve(repo_root, config)
	values = apply_result(result, {})

	if output is not None:
		try:
			write_properties_file(output, values)
		except OSError as e:
			exit_with_error(f"Could not write properties to {output}", exception=e)
	else:
		typer.echo(format_properties(values, fmt), nl=False)

	if strict and result.hash_value is None:
		logger.error("No commit hash could be resolved for %s", repo_root)
		raise typer.Exit(1)

"""
Writing resolved values into a property space.

The resolver only computes values. This module puts them into a caller-owned
mapping or a ``key=value`` file and renders them for other consumers, logging
which resolution path was taken along the way.

"""

from __future__ import annotations

import json
import logging
import re
import shlex
from enum import Enum
from typing import TYPE_CHECKING

from githashprop.resolver import HashSource, ResolutionResult

if TYPE_CHECKING:
	from collections.abc import Mapping, MutableMapping
	from pathlib import Path

logger = logging.getLogger(__name__)

_ENV_KEY_PATTERN = re.compile(r"[^A-Za-z0-9_]")
_PROPERTY_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "=": "\\=", ":": "\\:"}


class OutputFormat(str, Enum):
	"""Supported renderings of resolved properties."""

	PROPERTIES = "properties"
	ENV = "env"
	JSON = "json"


def apply_result(result: ResolutionResult, properties: MutableMapping[str, str]) -> dict[str, str]:
	"""
	Write the determined values of a resolution into a property space.

	Values that were not determined leave the corresponding key untouched.

	Args:
	    result: Resolution to apply
	    properties: Mapping that receives the values

	Returns:
	    dict[str, str]: The key/value pairs actually written

	"""
	if result.source is HashSource.UNRESOLVED:
		logger.info("%s, so not setting property", result.reason or "commit hash not resolved")
		return {}
	if result.source is HashSource.FALLBACK:
		logger.info("%s, will use fallback value", result.reason)

	written = result.properties()
	properties.update(written)

	logger.info("Commit hash '%s' assigned to property '%s'", result.hash_value, result.property_name)
	if result.branch_property_name:
		if result.branch_value is None:
			logger.info("No branch name available for property '%s'", result.branch_property_name)
		else:
			logger.info(
				"Branch name '%s' assigned to property '%s'", result.branch_value, result.branch_property_name
			)
	return written


def _escape_property(text: str, *, is_key: bool = False) -> str:
	escaped = "".join(_PROPERTY_ESCAPES.get(char, char) for char in text)
	if is_key:
		escaped = escaped.replace(" ", "\\ ")
	elif escaped.startswith(" "):
		escaped = "\\" + escaped
	return escaped


def env_key(key: str) -> str:
	"""Turn a property name into an environment variable name."""
	name = _ENV_KEY_PATTERN.sub("_", key).upper()
	if name and name[0].isdigit():
		name = f"_{name}"
	return name


def format_properties(values: Mapping[str, str], output_format: OutputFormat | str = OutputFormat.PROPERTIES) -> str:
	"""
	Render property values as text.

	Args:
	    values: Property values to render
	    output_format: One of ``properties``, ``env`` or ``json``

	Returns:
	    str: Rendered text, newline terminated unless empty

	"""
	output_format = OutputFormat(output_format)
	if output_format is OutputFormat.JSON:
		return json.dumps(dict(values), indent=2, sort_keys=True) + "\n"

	if output_format is OutputFormat.ENV:
		lines = [f"{env_key(key)}={shlex.quote(value)}" for key, value in values.items()]
	else:
		lines = [f"{_escape_property(key, is_key=True)}={_escape_property(value)}" for key, value in values.items()]
	return "".join(f"{line}\n" for line in lines)


def _property_key(line: str) -> str | None:
	stripped = line.strip()
	if not stripped or stripped[0] in "#!":
		return None
	for index, char in enumerate(stripped):
		if char in "=:" and (index == 0 or stripped[index - 1] != "\\"):
			return stripped[:index].strip()
	return stripped


def write_properties_file(path: Path, values: Mapping[str, str]) -> None:
	"""
	Merge property values into a ``key=value`` file.

	Existing entries with the same key are replaced in place. Other entries
	and comment lines are kept, new keys are appended. The file is created
	if it does not exist.

	Args:
	    path: Properties file to update
	    values: Property values to write

	"""
	rendered = {
		_escape_property(key, is_key=True): _escape_property(value) for key, value in values.items()
	}
	lines = path.read_text(encoding="utf-8").splitlines() if path.exists() else []

	pending = dict(rendered)
	merged: list[str] = []
	for line in lines:
		key = _property_key(line)
		if key is not None and key in rendered:
			if key in pending:
				merged.append(f"{key}={pending.pop(key)}")
			continue
		merged.append(line)
	merged.extend(f"{key}={value}" for key, value in pending.items())

	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text("".join(f"{line}\n" for line in merged), encoding="utf-8")
	logger.debug("Wrote %d properties to %s", len(values), path)

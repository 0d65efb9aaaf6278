"""
Commit hash and branch resolution from plain git metadata files.

This module reads ``.git/HEAD`` and the reference it points to directly,
without invoking the git executable, and turns the result into property
values ready to be handed to a build.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

GIT_DIR = ".git"
HEAD_FILE = "HEAD"
REF_PREFIX = "ref: "
HEADS_PREFIX = "refs/heads/"
DEFAULT_PROPERTY_NAME = "git_hash"
SHORT_HASH_LENGTH = 7


class HashSource(str, Enum):
	"""Where the hash value of a resolution came from."""

	REPOSITORY = "repository"
	FALLBACK = "fallback"
	UNRESOLVED = "unresolved"


class ResolverConfig(BaseModel):
	"""Immutable settings for a single resolution."""

	model_config = ConfigDict(frozen=True, extra="forbid")

	property_name: str = DEFAULT_PROPERTY_NAME
	property_prefix: str = ""
	property_suffix: str = ""
	short_hash: bool = False
	fallback_value: str | None = None
	branch_property_name: str | None = None
	fallback_branch_value: str | None = None

	@field_validator("property_name", "property_prefix", "property_suffix", mode="before")
	@classmethod
	def _none_as_empty(cls, value: object) -> object:
		return "" if value is None else value

	@property
	def effective_property_name(self) -> str:
		"""Trimmed property name, or ``git_hash`` when blank."""
		return self.property_name.strip() or DEFAULT_PROPERTY_NAME


@dataclass(frozen=True)
class ResolutionResult:
	"""Outcome of a resolution; ``None`` values mean "do not set"."""

	property_name: str
	hash_value: str | None = None
	branch_property_name: str | None = None
	branch_value: str | None = None
	ref_path: str | None = None
	source: HashSource = HashSource.UNRESOLVED
	reason: str | None = field(default=None, compare=False)

	def properties(self) -> dict[str, str]:
		"""Return the key/value pairs that should be written."""
		values: dict[str, str] = {}
		if self.hash_value is not None:
			values[self.property_name] = self.hash_value
		if self.branch_property_name and self.branch_value is not None:
			values[self.branch_property_name] = self.branch_value
		return values


def read_first_line(path: Path) -> str | None:
	"""
	Read the first meaningful line of a text file.

	Blank lines and lines starting with ``#`` are skipped. Reading stops at
	the first remaining line.

	Args:
	    path: File to read

	Returns:
	    The line without its line terminator, or None if the file is missing,
	    unreadable or has no meaningful content

	"""
	try:
		with path.open(encoding="utf-8") as f:
			for line in f:
				stripped = line.strip()
				if not stripped or stripped.startswith("#"):
					continue
				return line.rstrip("\r\n")
	except (OSError, UnicodeDecodeError) as e:
		logger.debug("Could not read %s: %s", path, e)
	return None


def discover_repo_root(start: Path | None = None) -> Path | None:
	"""Find the closest directory at or above ``start`` containing a ``.git`` directory."""
	current = (start or Path.cwd()).resolve()
	for candidate in (current, *current.parents):
		if (candidate / GIT_DIR).is_dir():
			return candidate
	return None


def resolve(repo_root: Path | str, config: ResolverConfig | None = None) -> ResolutionResult:
	"""
	Resolve the current commit hash and branch name of a working directory.

	Never raises for filesystem conditions: every read failure degrades to
	the configured fallback values, or to an empty result.

	Args:
	    repo_root: Working directory containing the ``.git`` directory
	    config: Resolution settings, defaults when omitted

	Returns:
	    ResolutionResult: The formatted values to set

	"""
	config = config or ResolverConfig()
	git_dir = Path(repo_root) / GIT_DIR
	property_name = config.effective_property_name

	ref_path: str | None = None
	branch_name: str | None = None
	commit_hash: str | None = None
	reason: str | None = None

	head = read_first_line(git_dir / HEAD_FILE)
	if head is None:
		reason = "HEAD info not found"
	elif not head.startswith(REF_PREFIX):
		# Detached HEAD: the literal hash it holds is not used.
		reason = "ref entry not found in HEAD file"
	else:
		ref_path = head[len(REF_PREFIX) :].strip()
		if not ref_path:
			ref_path = None
			reason = "ref entry is empty in HEAD file"
		else:
			if ref_path.startswith(HEADS_PREFIX):
				branch_name = ref_path[len(HEADS_PREFIX) :]
			ref_file = git_dir / ref_path
			commit_hash = read_first_line(ref_file)
			if commit_hash is None:
				reason = f"commit hash not found in file '{ref_file}'"

	if commit_hash is not None:
		source = HashSource.REPOSITORY
		if config.short_hash:
			commit_hash = commit_hash[:SHORT_HASH_LENGTH]
	elif config.fallback_value is not None:
		source = HashSource.FALLBACK
		commit_hash = config.fallback_value
	else:
		return ResolutionResult(
			property_name=property_name,
			branch_property_name=config.branch_property_name or None,
			ref_path=ref_path,
			reason=reason,
		)

	branch_value: str | None = None
	if config.branch_property_name:
		if branch_name:
			branch_value = branch_name
		elif config.fallback_branch_value:
			branch_value = config.fallback_branch_value

	return ResolutionResult(
		property_name=property_name,
		hash_value=f"{config.property_prefix}{commit_hash}{config.property_suffix}",
		branch_property_name=config.branch_property_name or None,
		branch_value=branch_value,
		ref_path=ref_path,
		source=source,
		reason=reason,
	)

from __future__ import annotations

import json
import os
from typing import List, Literal

from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError
from .model import AllowEntry, DialectName


class ScanConfig(BaseModel):
	"""
	Process-wide defaults for a masking check.

	- allowed: names that may be duplicated, with the scope you intend to use
	  them from, or "any".
	- extra_scripts: script paths appended to every check. The value "self"
	  scans the checker's own source.
	- default_dialect: syntax used for files whose extension is not recognized.
	- on_unreadable: "abort" fails the whole check when a file cannot be read,
	  "skip" logs a warning and continues.
	"""

	allowed: List[AllowEntry] = []
	extra_scripts: List[str] = []
	default_dialect: DialectName = "r"
	on_unreadable: Literal["abort", "skip"] = "abort"

	@classmethod
	def from_env(cls) -> "ScanConfig":
		values = {}
		allowed = os.getenv("MASKCHECK_ALLOWED")
		if allowed is not None:
			values["allowed"] = parse_allowed(allowed)
		extra = os.getenv("MASKCHECK_EXTRA_SCRIPTS")
		if extra is not None:
			values["extra_scripts"] = [p for p in extra.split(os.pathsep) if p.strip()]
		dialect = os.getenv("MASKCHECK_DIALECT", "").strip()
		if dialect:
			values["default_dialect"] = dialect
		on_unreadable = os.getenv("MASKCHECK_ON_UNREADABLE", "").strip()
		if on_unreadable:
			values["on_unreadable"] = on_unreadable
		try:
			return cls(**values)
		except ValidationError as e:
			raise ConfigurationError(f"Invalid MASKCHECK_* environment: {e}") from e

	@classmethod
	def from_file(cls, path: str) -> "ScanConfig":
		try:
			with open(path, "r", encoding="utf-8") as fh:
				data = json.load(fh)
		except (OSError, json.JSONDecodeError) as e:
			raise ConfigurationError(f"Cannot load config {path}: {e}") from e
		try:
			return cls.model_validate(data)
		except ValidationError as e:
			raise ConfigurationError(f"Invalid config {path}: {e}") from e


def parse_allowed(text: str) -> List[AllowEntry]:
	"""Parse ``name:scope,name2:any``. An empty string allows nothing."""
	entries: List[AllowEntry] = []
	for part in text.split(","):
		if not part.strip():
			continue
		entry = AllowEntry.parse(part)
		if not entry.name:
			raise ConfigurationError(f"Allow entry without a name: {part!r}")
		entries.append(entry)
	return entries

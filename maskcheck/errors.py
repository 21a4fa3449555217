from __future__ import annotations

from typing import Optional


class MaskCheckError(Exception):
	"""Base error for masking-check failures."""


class ConfigurationError(MaskCheckError):
	"""Raised when configuration is invalid or a package/scope cannot be located."""


class SourceUnavailableError(MaskCheckError):
	"""Raised when a file Source cannot be opened or read."""

	def __init__(self, path: str, reason: Optional[str] = None):
		self.path = path
		self.reason = reason
		message = f"Cannot read source {path}"
		if reason:
			message = f"{message}: {reason}"
		super().__init__(message)


class DesignViolationError(MaskCheckError):
	"""Raised when a deprecation marker has no clear replacement argument."""

	def __init__(self, binding: str, marker: str):
		self.binding = binding
		self.marker = marker
		super().__init__(
			f"{binding} calls a deprecation marker without clear arguments: {marker.strip()}"
		)

from __future__ import annotations

import inspect
import logging
import os
from typing import Any, Iterable, List, Mapping, Optional, Set, Tuple

from .errors import ConfigurationError, SourceUnavailableError
from .filters import EXTENSION_DIALECT, detect_dialect
from .model import Source
from .scopes import ScopeProvider, printed_source


logger = logging.getLogger(__name__)

SELF = "self"
IGNORED_DIRS = {".git", ".Rproj.user", "renv", "node_modules", "__pycache__", ".venv"}


def _blank(entry: Any) -> bool:
	return entry is None or (isinstance(entry, str) and not entry.strip())


def expand_paths(path: str) -> List[str]:
	"""A script path, or every script file below a directory (sorted)."""
	if not os.path.isdir(path):
		return [path]
	found: List[str] = []
	for dirpath, dirnames, filenames in os.walk(path):
		dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
		for filename in sorted(filenames):
			_, ext = os.path.splitext(filename)
			if ext.lower() in EXTENSION_DIALECT:
				found.append(os.path.join(dirpath, filename))
	return found


def file_sources(paths: Iterable[Optional[str]], prefix: str, default_dialect: str) -> List[Source]:
	sources: List[Source] = []
	for entry in paths:
		if _blank(entry):
			continue
		if entry == SELF:
			sources.append(Source(label=f"{prefix}:{SELF}", kind="self", dialect="python"))
			continue
		for path in expand_paths(entry):
			sources.append(
				Source(
					label=f"{prefix}:{path}",
					kind="file",
					path=path,
					dialect=detect_dialect(path, default_dialect),
				)
			)
	return sources


def _callable_source(label: str, obj: Any, default_dialect: str, closure: Iterable[str] = ()) -> Source:
	if isinstance(obj, str):
		# Providers built from plain data hand back source text.
		return Source(label=label, kind="text", text=obj, dialect=default_dialect, closure=list(closure))
	return Source(label=label, kind="callable", target=obj, dialect="python")


def _siblings(provider: ScopeProvider, scope: str) -> List[str]:
	return [name for name, _ in provider.functions(scope)]


def function_sources(functions: Iterable[Any], provider: ScopeProvider, default_dialect: str) -> List[Source]:
	"""Function names are looked up through the scope chain; callables are used as given."""
	named: List[Source] = []
	direct: List[Source] = []
	for fn in functions:
		if _blank(fn):
			continue
		if isinstance(fn, str):
			scope, obj = provider.locate(fn)
			named.append(_callable_source(f"functionnames:{fn}", obj, default_dialect, _siblings(provider, scope)))
		else:
			direct.append(_callable_source(f"directfunction nr {len(direct) + 1}", fn, default_dialect))
	return named + direct


def package_sources(packages: Iterable[str], provider: ScopeProvider, default_dialect: str) -> List[Source]:
	sources: List[Source] = []
	for package in packages:
		if _blank(package):
			continue
		try:
			scope = provider.resolve(package)
			functions = provider.functions(scope)
		except ConfigurationError as e:
			logger.warning("%s, continuing with other code", e)
			continue
		siblings = [name for name, _ in functions]
		for name, obj in functions:
			sources.append(_callable_source(f"{scope}:{name}", obj, default_dialect, siblings))
	return sources


def text_sources(texts: Mapping[str, str], default_dialect: str) -> List[Source]:
	return [
		Source(label=f"text:{label}", kind="text", text=text, dialect=default_dialect)
		for label, text in texts.items()
	]


def closure_names(obj: Any) -> Set[str]:
	"""Callables visible from where ``obj`` was defined: its module namespace and closure cells."""
	namespace = getattr(obj, "__globals__", None)
	if namespace is None:
		module = inspect.getmodule(obj)
		namespace = vars(module) if module is not None else {}
	names = {name for name, value in namespace.items() if callable(value)}
	if inspect.isfunction(obj):
		nonlocals = inspect.getclosurevars(obj).nonlocals
		names |= {name for name, value in nonlocals.items() if callable(value)}
	return names


def materialize(source: Source) -> Tuple[List[str], Set[str]]:
	"""Lines of ``source`` and the names its own definition legitimately uses."""
	if source.kind == "file":
		try:
			with open(source.path, "r", encoding="utf-8") as fh:
				return fh.read().splitlines(), set()
		except (OSError, UnicodeDecodeError) as e:
			raise SourceUnavailableError(source.path, str(e)) from e
	if source.kind == "text":
		return (source.text or "").splitlines(), set(source.closure)
	if source.kind == SELF:
		from .driver import check_masking

		return printed_source(check_masking).splitlines(), closure_names(check_masking)
	return printed_source(source.target).splitlines(), closure_names(source.target)

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .config import ScanConfig
from .errors import SourceUnavailableError
from .filters import get_dialect
from .model import NO_PROBLEMS, AllowEntry, Duplicate, Finding, ScanResult, Source
from .resolver import find_duplicates
from .scanner import scan_lines
from .scopes import ScopeProvider
from .sources import file_sources, function_sources, materialize, package_sources, text_sources


logger = logging.getLogger(__name__)


def collect_sources(
	provider: ScopeProvider,
	config: ScanConfig,
	scripts: Iterable[str] = (),
	extra_scripts: Optional[Iterable[str]] = None,
	functions: Iterable[Any] = (),
	packages: Iterable[str] = (),
	texts: Optional[Mapping[str, str]] = None,
) -> List[Source]:
	extra = config.extra_scripts if extra_scripts is None else extra_scripts
	return (
		file_sources(scripts, "scripts", config.default_dialect)
		+ file_sources(extra, "extrascripts", config.default_dialect)
		+ function_sources(functions, provider, config.default_dialect)
		+ package_sources(packages, provider, config.default_dialect)
		+ text_sources(texts or {}, config.default_dialect)
	)


def scan_source(source: Source, duplicates: List[Duplicate], allowed: Iterable[str] = ()) -> List[Finding]:
	lines, own_names = materialize(source)
	return scan_lines(lines, duplicates, set(allowed) | own_names, get_dialect(source.dialect))


def check_masking(
	provider: ScopeProvider,
	scripts: Iterable[str] = (),
	functions: Iterable[Any] = (),
	packages: Iterable[str] = (),
	texts: Optional[Mapping[str, str]] = None,
	allowed: Optional[Iterable[AllowEntry]] = None,
	extra_scripts: Optional[Iterable[str]] = None,
	config: Optional[ScanConfig] = None,
) -> ScanResult:
	"""
	Check scripts, functions, packages and literal texts for calls to names that are masked.

	Call this after every scope of interest is available from ``provider``.
	``allowed`` and ``extra_scripts`` default to the values in ``config``.
	Returns a copy of ``NO_PROBLEMS`` when nothing is masked at all. Otherwise
	the result lists the masked names and holds, keyed by source label, only the
	sources with findings.
	"""
	config = config or ScanConfig()
	allowed = config.allowed if allowed is None else list(allowed)

	duplicates = find_duplicates(provider.scopes(), allowed)
	if not duplicates:
		return NO_PROBLEMS.model_copy(deep=True)
	logger.debug("Masked names: %s", ", ".join(d.name for d in duplicates))

	sources = collect_sources(provider, config, scripts, extra_scripts, functions, packages, texts)

	findings: Dict[str, List[Finding]] = {}
	scanned = 0
	for source in sources:
		try:
			found = scan_source(source, duplicates)
		except SourceUnavailableError as e:
			if config.on_unreadable == "abort":
				raise
			logger.warning("%s, skipping", e)
			continue
		scanned += 1
		if found:
			findings[source.label] = found

	return ScanResult(
		problems=bool(findings),
		masked_names=[d.name for d in duplicates],
		sources_scanned=scanned,
		findings=findings,
	)

"""Masking checker: find calls to functions that are shadowed by another scope.

Modules:
- scopes.py: Scope providers (static data or imported Python modules).
- resolver.py: Names bound in more than one scope that are real masking risks.
- deprecation.py: Deprecated aliases that defer to an earlier scope.
- filters.py: Line filters (comments, strings, argument names, field access).
- scanner.py: Search one source for masked names.
- sources.py: Scripts, functions and packages turned into lines of text.
- driver.py: check_masking, which runs the whole check.
- report.py: Deterministic textual summaries.
"""

from .config import ScanConfig
from .driver import check_masking
from .errors import ConfigurationError, DesignViolationError, MaskCheckError, SourceUnavailableError
from .model import NO_PROBLEMS, AllowEntry, Duplicate, Finding, ScanResult
from .resolver import find_duplicates
from .scopes import ModuleScopeProvider, ScopeProvider, StaticScopeProvider

__all__ = [
	"AllowEntry",
	"ConfigurationError",
	"DesignViolationError",
	"Duplicate",
	"Finding",
	"MaskCheckError",
	"ModuleScopeProvider",
	"NO_PROBLEMS",
	"ScanConfig",
	"ScanResult",
	"ScopeProvider",
	"SourceUnavailableError",
	"StaticScopeProvider",
	"check_masking",
	"find_duplicates",
]

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Set

from .deprecation import is_deprecated_override
from .model import ANY_SCOPE, AllowEntry, Binding, Duplicate
from .scopes import PACKAGE_PREFIX, ScopeEntry


logger = logging.getLogger(__name__)


def _bare(scope: str) -> str:
	return scope[len(PACKAGE_PREFIX):] if scope.startswith(PACKAGE_PREFIX) else scope


def _same_scope(a: str, b: str) -> bool:
	return _bare(a) == _bare(b)


def _collisions(table: Dict[str, List[Binding]]) -> Dict[str, List[Binding]]:
	return OrderedDict(
		(name, bindings)
		for name, bindings in table.items()
		if len({b.scope for b in bindings}) >= 2
	)


def _drop(table: Dict[str, List[Binding]], keep) -> Dict[str, List[Binding]]:
	return OrderedDict((name, [b for b in bindings if keep(b)]) for name, bindings in table.items())


def _drop_identical(bindings: List[Binding]) -> List[Binding]:
	kept: List[Binding] = []
	for b in bindings:
		if not any(k.source == b.source for k in kept):
			kept.append(b)
	return kept


def allowed_names(table: Dict[str, List[Binding]], allowed: Iterable[AllowEntry]) -> Set[str]:
	"""Names exempted by the allow list.

	An entry counts when its scope is "any", or when it names the scope the
	duplicate is found in first, i.e. the one that is actually used.
	"""
	names: Set[str] = set()
	for entry in allowed:
		bindings = table.get(entry.name)
		if entry.scope == ANY_SCOPE:
			names.add(entry.name)
		elif bindings and _same_scope(bindings[0].scope, entry.scope):
			names.add(entry.name)
	return names


def find_duplicates(entries: List[ScopeEntry], allowed: Optional[Iterable[AllowEntry]] = None) -> List[Duplicate]:
	"""Names bound in two or more scopes that are genuine masking risks."""
	positions: Dict[str, int] = {scope.name: scope.position for scope, _ in entries}
	table: Dict[str, List[Binding]] = OrderedDict()
	for scope, bindings in sorted(entries, key=lambda e: e[0].position):
		for b in bindings:
			table.setdefault(b.name, []).append(b)

	table = _collisions(table)
	logger.debug("%d names bound in more than one scope", len(table))

	table = _collisions(_drop(table, lambda b: b.kind != "generic"))
	table = _collisions(OrderedDict((name, _drop_identical(bs)) for name, bs in table.items()))
	table = _collisions(_drop(table, lambda b: not is_deprecated_override(b, positions)))
	logger.debug("%d duplicates after generic, identical and deprecation filters", len(table))

	exempt = allowed_names(table, allowed or [])
	table = _collisions(OrderedDict((n, bs) for n, bs in table.items() if n not in exempt))
	logger.debug("%d duplicates after allow list", len(table))

	duplicates = [
		Duplicate(name=name, scopes=list(OrderedDict.fromkeys(b.scope for b in bindings)))
		for name, bindings in table.items()
	]
	duplicates.sort(key=lambda d: (positions.get(d.scopes[0], 0), d.name))
	return duplicates

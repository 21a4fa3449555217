from __future__ import annotations

import re
from re import Pattern
from typing import Iterable, List, Optional, Set, Tuple

from .filters import Dialect, Line, apply_stages, number_lines, strip_qualified
from .model import Duplicate, Finding


SIMPLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_simple_name(name: str) -> bool:
	"""Names for which a ``\\b`` word boundary is well defined."""
	return bool(SIMPLE_NAME.match(name))


def mention_pattern(name: str) -> Pattern[str]:
	if is_simple_name(name):
		return re.compile(rf"\b{re.escape(name)}\b")
	return re.compile(re.escape(name))


def rebound_names(lines: List[Line], names: Iterable[str], dialect: Dialect) -> Set[str]:
	"""Names explicitly assigned from a package in this source, e.g. ``count <- plyr::count``.

	The assignment has to be the first line that mentions the name. Where the
	assignment happens (a branch that never runs, say) is not checked.
	"""
	found: Set[str] = set()
	for name in names:
		patterns = dialect.rebinding_patterns(name)
		if not patterns:
			continue
		mention = mention_pattern(name)
		first_mention = next((n for n, text in lines if mention.search(text)), None)
		first_rebinding = next(
			(n for n, text in lines if any(p.search(text) for p in patterns)), None
		)
		if first_mention is not None and first_mention == first_rebinding:
			found.add(name)
	return found


def strip_rebindings(lines: List[Line], names: Iterable[str], dialect: Dialect) -> List[Line]:
	"""Remove the rebinding statements themselves; they are not calls of the masked name."""
	patterns = [p for name in names for p in dialect.rebinding_patterns(name)]
	out: List[Line] = []
	for number, text in lines:
		for pattern in patterns:
			text = pattern.sub("", text)
		out.append((number, text))
	return out


def _first_match(text: str, matchers: List[Tuple[str, Pattern[str]]], fixed: List[str]) -> Optional[str]:
	for name, pattern in matchers:
		if pattern.search(text):
			return name
	for name in fixed:
		if name in text:
			return name
	return None


def scan_lines(
	lines: List[str],
	duplicates: List[Duplicate],
	allowed: Iterable[str],
	dialect: Dialect,
) -> List[Finding]:
	"""Find lines of one source that mention a masked name.

	``allowed`` is copied; names discovered here only apply to this source.
	Each line is reported once, for the first name it matches.
	"""
	local_allowed = set(allowed)
	names = list(dict.fromkeys(d.name for d in duplicates))

	numbered = apply_stages(number_lines(lines), dialect)
	local_allowed |= rebound_names(numbered, [n for n in names if n not in local_allowed], dialect)
	remaining = [n for n in names if n not in local_allowed]
	if not remaining:
		return []

	numbered = strip_qualified(strip_rebindings(numbered, remaining, dialect), dialect)

	matchers = [(n, mention_pattern(n)) for n in remaining if is_simple_name(n)]
	fixed = [n for n in remaining if not is_simple_name(n)]

	findings: List[Finding] = []
	for number, text in numbered:
		name = _first_match(text, matchers, fixed)
		if name is not None:
			findings.append(Finding(line_number=number, line=text, masked_name=name))
	return findings

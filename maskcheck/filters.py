"""Line filters applied to a Source before it is searched for masked names.

Every stage takes and returns a list of ``(line_number, text)`` pairs and can
be used on its own. ``STAGES`` lists them in the order the scanner applies
them. A line whose quoting or commenting cannot be made sense of (an
unbalanced quote, say) is left as it is and stays in the scan.
"""

from __future__ import annotations

import os
import re
from re import Pattern
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .model import DialectName


Line = Tuple[int, str]
Stage = Callable[[List[Line], "Dialect"], List[Line]]


class Dialect(BaseModel):
	model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

	name: DialectName
	comment: Pattern[str]
	strings: Pattern[str]
	named_argument: Pattern[str]
	field_access: Optional[Pattern[str]] = None
	qualified: Pattern[str]
	# Triple-quoted strings may span lines.
	docstrings: bool = False
	# Templates formatted with the escaped name.
	rebindings: Tuple[str, ...] = ()

	def rebinding_patterns(self, name: str) -> List[Pattern[str]]:
		escaped = re.escape(name)
		return [re.compile(t.format(name=escaped)) for t in self.rebindings]


_STRINGS = re.compile(r"'.*?'|\".*?\"")
_NAMED_ARGUMENT = re.compile(r"([(,]\s*)[A-Za-z._][A-Za-z0-9._]*\s*=(?!=)")
_TRIPLE_QUOTE = re.compile(r"\"\"\"|'''")

R = Dialect(
	name="r",
	comment=re.compile(r"#.*$"),
	strings=_STRINGS,
	named_argument=_NAMED_ARGUMENT,
	field_access=re.compile(r"\$[A-Za-z0-9_.]+"),
	qualified=re.compile(r"[A-Za-z][A-Za-z0-9._]*:::?(`[^`]*`|[A-Za-z0-9._]+)"),
	rebindings=(
		r"(?<![\w.]){name}\s*(<<?-|=)\s*[A-Za-z][A-Za-z0-9._]*:::?`?{name}`?(?![\w.])",
	),
)

PYTHON = Dialect(
	name="python",
	comment=re.compile(r"#.*$"),
	strings=_STRINGS,
	named_argument=_NAMED_ARGUMENT,
	qualified=re.compile(r"(?<![\w.])[A-Za-z_]\w*(\.[A-Za-z_]\w*)+"),
	docstrings=True,
	rebindings=(
		r"(?<![\w.]){name}\s*=\s*[A-Za-z_][\w.]*\.{name}\b",
		r"^\s*from\s+[\w.]+\s+import\s+.*\b{name}\b",
	),
)

DIALECTS: Dict[str, Dialect] = {"r": R, "python": PYTHON}

EXTENSION_DIALECT: Dict[str, str] = {
	".r": "r",
	".rmd": "r",
	".rprofile": "r",
	".py": "python",
}


def get_dialect(name: str) -> Dialect:
	return DIALECTS[name]


def detect_dialect(path: str, default: str) -> str:
	_, ext = os.path.splitext(path)
	return EXTENSION_DIALECT.get(ext.lower(), default)


def number_lines(lines: List[str]) -> List[Line]:
	return [(i, text) for i, text in enumerate(lines, start=1)]


def _substitute(lines: List[Line], pattern: Optional[Pattern[str]], repl: str = "") -> List[Line]:
	if pattern is None:
		return list(lines)
	return [(n, pattern.sub(repl, text)) for n, text in lines]


def strip_docstrings(lines: List[Line], dialect: Dialect) -> List[Line]:
	"""Blank out triple-quoted strings, including those spanning several lines."""
	if not dialect.docstrings:
		return list(lines)
	out: List[Line] = []
	open_quote: Optional[str] = None
	for number, text in lines:
		kept: List[str] = []
		pos = 0
		for m in _TRIPLE_QUOTE.finditer(text):
			if open_quote is None:
				kept.append(text[pos:m.start()])
				open_quote = m.group()
			elif m.group() == open_quote:
				open_quote = None
				pos = m.end()
		if open_quote is None:
			kept.append(text[pos:])
		out.append((number, "".join(kept)))
	return out


def strip_comments(lines: List[Line], dialect: Dialect) -> List[Line]:
	return _substitute(lines, dialect.comment)


def strip_strings(lines: List[Line], dialect: Dialect) -> List[Line]:
	return _substitute(lines, dialect.strings)


def strip_named_arguments(lines: List[Line], dialect: Dialect) -> List[Line]:
	# Keep the opening "(" or "," so a following argument is still recognized.
	return _substitute(lines, dialect.named_argument, r"\1")


def strip_field_access(lines: List[Line], dialect: Dialect) -> List[Line]:
	return _substitute(lines, dialect.field_access)


def drop_empty(lines: List[Line], dialect: Dialect) -> List[Line]:
	return [(n, text) for n, text in lines if text.strip()]


def strip_qualified(lines: List[Line], dialect: Dialect) -> List[Line]:
	"""Remove explicit ``pkg::name`` calls, which cannot be masked."""
	return _substitute(lines, dialect.qualified)


STAGES: List[Stage] = [
	strip_docstrings,
	strip_comments,
	strip_strings,
	strip_named_arguments,
	strip_field_access,
	drop_empty,
]


def apply_stages(lines: List[Line], dialect: Dialect, stages: Optional[List[Stage]] = None) -> List[Line]:
	for stage in stages if stages is not None else STAGES:
		lines = stage(lines, dialect)
	return lines

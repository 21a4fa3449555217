from __future__ import annotations

import ast
import re
from typing import Dict, List, Optional, Tuple

from .errors import DesignViolationError
from .model import Binding


MARKER = re.compile(r"(?<![\w])@?\.?(?P<call>(Deprecated|Defunct|deprecated)\s*\()")


def find_marker(lines: List[str]) -> Optional[Tuple[int, str]]:
	"""Line index and text from the first marker call onwards."""
	for i, line in enumerate(lines):
		m = MARKER.search(line)
		if m:
			return i, line[m.start("call"):]
	return None


def balanced_call(text: str) -> Optional[str]:
	"""``text`` up to the parenthesis closing its first one, or None if it is not closed."""
	depth = 0
	quote: Optional[str] = None
	escaped = False
	for i, ch in enumerate(text):
		if quote:
			if escaped:
				escaped = False
			elif ch == "\\":
				escaped = True
			elif ch == quote:
				quote = None
		elif ch in "'\"":
			quote = ch
		elif ch == "(":
			depth += 1
		elif ch == ")":
			depth -= 1
			if depth == 0:
				return text[:i + 1]
	return None


def _parse_call(binding: Binding, lines: List[str], start: int, first: str) -> ast.Call:
	# A marker call may span several lines; grow the text until its parentheses close.
	text = first
	for extra in [None] + lines[start + 1:]:
		if extra is not None:
			text = f"{text}\n{extra}"
		call = balanced_call(text)
		if call is None:
			continue
		try:
			tree = ast.parse(call)
		except SyntaxError:
			break
		stmt = tree.body[0] if tree.body else None
		if isinstance(stmt, ast.Expr) and isinstance(stmt.value, ast.Call):
			return stmt.value
		break
	raise DesignViolationError(binding.name, first)


def replacement_of(binding: Binding) -> Optional[str]:
	"""Return the ``new`` argument of the binding's deprecation marker.

	``None`` when the source has no marker or the marker names no replacement.
	Raises :class:`DesignViolationError` when the replacement is not a single
	string literal.
	"""
	lines = binding.source.splitlines()
	found = find_marker(lines)
	if found is None:
		return None
	start, first = found
	call = _parse_call(binding, lines, start, first)

	node: Optional[ast.expr] = None
	for kw in call.keywords:
		if kw.arg == "new":
			node = kw.value
			break
	if node is None and call.args:
		node = call.args[0]
	if node is None:
		return None
	if not (isinstance(node, ast.Constant) and isinstance(node.value, str)):
		raise DesignViolationError(binding.name, first)
	return node.value


def split_qualified(name: str) -> Tuple[Optional[str], str]:
	if "::" in name:
		parts = [p for p in name.split(":") if p]
		if len(parts) != 2:
			return None, name
		return parts[0], parts[1]
	if "." in name:
		pkg, _, short = name.rpartition(".")
		return pkg, short
	return None, name


def _scope_position(package: str, positions: Dict[str, int]) -> Optional[int]:
	for candidate in (package, f"package:{package}"):
		if candidate in positions:
			return positions[candidate]
	return None


def is_deprecated_override(binding: Binding, positions: Dict[str, int]) -> bool:
	"""True when the binding defers to a same-named replacement found earlier in the scope order.

	A replacement without a package, or with a different name, does not exempt
	the binding.
	"""
	replacement = replacement_of(binding)
	if replacement is None:
		return False
	package, short = split_qualified(replacement)
	if package is None or short != binding.name:
		return False
	replacement_pos = _scope_position(package, positions)
	own_pos = positions.get(binding.scope)
	if replacement_pos is None or own_pos is None:
		return False
	return replacement_pos < own_pos

"""Scope providers: the ordered chain of namespaces a masking check looks at.

The checker never inspects the running interpreter by itself. It asks a
provider for ``(Scope, [Binding, ...])`` pairs, earliest (highest precedence)
scope first.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from .errors import ConfigurationError
from .model import Binding, Scope


logger = logging.getLogger(__name__)

PACKAGE_PREFIX = "package:"

ScopeEntry = Tuple[Scope, List[Binding]]


class ScopeProvider:
	"""Interface supplied by the host environment."""

	def scopes(self) -> List[ScopeEntry]:
		raise NotImplementedError

	def functions(self, scope: str) -> List[Tuple[str, Any]]:
		"""Name and callable (or source text) of every function bound in ``scope``."""
		raise NotImplementedError

	def locate(self, name: str) -> Tuple[str, Any]:
		"""Scope and function that ``name`` resolves to when searched through the scope chain."""
		for scope, _ in self.scopes():
			for fname, obj in self.functions(scope.name):
				if fname == name:
					return scope.name, obj
		raise ConfigurationError(f"Function {name} not found in any scope")

	def resolve(self, name: str) -> str:
		"""Map a package argument (``pkg`` or ``package:pkg``) to a scope name."""
		names = [scope.name for scope, _ in self.scopes()]
		for candidate in (name, f"{PACKAGE_PREFIX}{name}"):
			if candidate in names:
				return candidate
		if name.startswith(PACKAGE_PREFIX) and name[len(PACKAGE_PREFIX):] in names:
			return name[len(PACKAGE_PREFIX):]
		raise ConfigurationError(f"Package {name} not found")


class StaticScopeProvider(ScopeProvider):
	"""Scopes given as plain data: scope name -> {function name: source text}."""

	def __init__(
		self,
		scopes: Union[Mapping[str, Mapping[str, str]], Iterable[Tuple[str, Mapping[str, str]]]],
		generics: Optional[Mapping[str, Iterable[str]]] = None,
	):
		items = scopes.items() if isinstance(scopes, Mapping) else scopes
		self._scopes: List[Tuple[str, Dict[str, str]]] = [(name, dict(fns)) for name, fns in items]
		self._generics: Dict[str, Set[str]] = {k: set(v) for k, v in (generics or {}).items()}

	def scopes(self) -> List[ScopeEntry]:
		result: List[ScopeEntry] = []
		for position, (name, fns) in enumerate(self._scopes):
			generics = self._generics.get(name, set())
			bindings = [
				Binding(
					name=fname,
					scope=name,
					source=src,
					kind="generic" if fname in generics else "function",
				)
				for fname, src in sorted(fns.items())
			]
			result.append((Scope(name=name, position=position), bindings))
		return result

	def functions(self, scope: str) -> List[Tuple[str, Any]]:
		for name, fns in self._scopes:
			if name == scope:
				return sorted(fns.items())
		raise ConfigurationError(f"Package {scope} not found")


def printed_source(obj: Any) -> str:
	try:
		return inspect.getsource(obj)
	except (OSError, TypeError):
		# No source (C builtins): different objects must not print the same.
		module = getattr(obj, "__module__", None) or "?"
		qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", "?")
		return f"<{type(obj).__name__} {module}.{qualname} at {id(obj):#x}>"


def is_generic(obj: Any) -> bool:
	# functools.singledispatch functions and abstract methods are meant to be overridden.
	if callable(getattr(obj, "register", None)) and callable(getattr(obj, "dispatch", None)):
		return True
	return bool(getattr(obj, "__isabstractmethod__", False))


def _is_function(name: str, obj: Any) -> bool:
	return not name.startswith("_") and (inspect.isroutine(obj) or inspect.isclass(obj))


class ModuleScopeProvider(ScopeProvider):
	"""Scopes taken from imported Python modules, in lookup order.

	``builtins`` is appended when it is not listed.
	"""

	def __init__(self, module_names: Iterable[str], include_builtins: bool = True):
		self.module_names: List[str] = list(module_names)
		if include_builtins and "builtins" not in self.module_names:
			self.module_names.append("builtins")
		self._modules: Dict[str, Any] = {}

	def module(self, name: str) -> Any:
		if name not in self._modules:
			try:
				self._modules[name] = importlib.import_module(name)
			except ImportError as e:
				raise ConfigurationError(f"Package {name} not found: {e}") from e
		return self._modules[name]

	def scopes(self) -> List[ScopeEntry]:
		result: List[ScopeEntry] = []
		position = 0
		for name in self.module_names:
			try:
				fns = self.functions(name)
			except ConfigurationError as e:
				logger.warning("%s, continuing with other scopes", e)
				continue
			bindings = [
				Binding(
					name=fname,
					scope=name,
					source=printed_source(obj),
					kind="generic" if is_generic(obj) else "function",
				)
				for fname, obj in fns
			]
			result.append((Scope(name=name, position=position), bindings))
			position += 1
		return result

	def functions(self, scope: str) -> List[Tuple[str, Any]]:
		namespace = vars(self.module(scope))
		return sorted(
			((name, obj) for name, obj in namespace.items() if _is_function(name, obj)),
			key=lambda item: item[0],
		)

	def locate(self, name: str) -> Tuple[str, Any]:
		for scope in self.module_names:
			try:
				obj = vars(self.module(scope)).get(name)
			except ConfigurationError:
				continue
			if obj is not None and _is_function(name, obj):
				return scope, obj
		raise ConfigurationError(f"Function {name} not found in any scope")

	def resolve(self, name: str) -> str:
		if name.startswith(PACKAGE_PREFIX):
			name = name[len(PACKAGE_PREFIX):]
		# A module outside the scope chain can still be scanned; importing it verifies it exists.
		self.module(name)
		return name

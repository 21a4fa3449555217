from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict


DialectName = Literal["r", "python"]
BindingKind = Literal["function", "generic"]
SourceKind = Literal["file", "callable", "self", "text"]

ANY_SCOPE = "any"


class Scope(BaseModel):
	name: str
	position: int


class Binding(BaseModel):
	name: str
	scope: str
	source: str = ""
	kind: BindingKind = "function"


class AllowEntry(BaseModel):
	name: str
	scope: str = ANY_SCOPE

	@classmethod
	def parse(cls, text: str) -> "AllowEntry":
		"""Parse ``name:scope`` (scope defaults to ``any``)."""
		name, sep, scope = text.strip().partition(":")
		return cls(name=name.strip(), scope=scope.strip() if sep and scope.strip() else ANY_SCOPE)


class Duplicate(BaseModel):
	name: str
	scopes: List[str]


class Source(BaseModel):
	model_config = ConfigDict(arbitrary_types_allowed=True)

	label: str
	kind: SourceKind
	dialect: DialectName = "r"
	path: Optional[str] = None
	text: Optional[str] = None
	# Names the source may use without masking, e.g. siblings in its own scope.
	closure: List[str] = []
	target: Any = None


class Finding(BaseModel):
	line_number: int
	line: str
	masked_name: str


class ScanResult(BaseModel):
	# An empty masked_names means nothing is masked and no source was read.
	model_config = ConfigDict(frozen=True)

	problems: bool = False
	masked_names: List[str] = []
	sources_scanned: int = 0
	findings: Dict[str, List[Finding]] = {}

	def __bool__(self) -> bool:
		return self.problems


NO_PROBLEMS = ScanResult()

from __future__ import annotations

from typing import Dict, List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from maskcheck.config import ScanConfig
from maskcheck.driver import check_masking
from maskcheck.errors import MaskCheckError
from maskcheck.model import AllowEntry, DialectName, Duplicate, ScanResult
from maskcheck.resolver import find_duplicates
from maskcheck.scopes import StaticScopeProvider


app = FastAPI(title="Masking Checker")


class ScopeSpec(BaseModel):
	name: str
	functions: Dict[str, str] = {}
	generics: List[str] = []


class DuplicatesRequest(BaseModel):
	scopes: List[ScopeSpec]
	allowed: List[AllowEntry] = []


class CheckRequest(DuplicatesRequest):
	sources: Dict[str, str] = {}
	packages: List[str] = []
	dialect: DialectName = "r"


def _provider(scopes: List[ScopeSpec]) -> StaticScopeProvider:
	return StaticScopeProvider(
		[(s.name, s.functions) for s in scopes],
		generics={s.name: s.generics for s in scopes},
	)


@app.post("/duplicates", response_model=List[Duplicate])
def duplicates(req: DuplicatesRequest) -> List[Duplicate]:
	try:
		return find_duplicates(_provider(req.scopes).scopes(), req.allowed)
	except MaskCheckError as e:
		raise HTTPException(status_code=400, detail=str(e))


@app.post("/check", response_model=ScanResult)
def check(req: CheckRequest) -> ScanResult:
	provider = _provider(req.scopes)
	config = ScanConfig(allowed=req.allowed, default_dialect=req.dialect)
	try:
		return check_masking(
			provider,
			texts=req.sources,
			packages=req.packages,
			extra_scripts=[],
			config=config,
		)
	except MaskCheckError as e:
		raise HTTPException(status_code=400, detail=str(e))


def create_app() -> FastAPI:
	return app

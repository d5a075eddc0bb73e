from __future__ import annotations

from typing import Iterator

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from flowscope.config import load_settings
from flowscope.errors import (
	AnalysisCancelled,
	EmptyResult,
	FlowscopeError,
	HostError,
	InvalidReference,
	RateLimited,
	RepositoryNotFound,
)
from flowscope.fallback import FallbackProvider
from flowscope.fetch import ContentFetcher
from flowscope.model import AnalysisResult
from flowscope.pipeline import FlowAnalyzer


app = FastAPI(title="Flowscope Analyzer")


class AnalyzeRequest(BaseModel):
	repo_url: str
	allow_fallback: bool = True


def get_analyzer() -> Iterator[FlowAnalyzer]:
	settings = load_settings()
	fallback = FallbackProvider() if settings.fallback_enabled else None
	with ContentFetcher(settings) as fetcher:
		yield FlowAnalyzer(fetcher, fallback=fallback)


def error_response(error: FlowscopeError) -> HTTPException:
	if isinstance(error, InvalidReference):
		return HTTPException(status_code=400, detail=str(error))
	if isinstance(error, RepositoryNotFound):
		return HTTPException(status_code=404, detail=str(error))
	if isinstance(error, RateLimited):
		return HTTPException(
			status_code=429,
			detail={"message": str(error), "reset_time": error.reset_time.isoformat()},
		)
	if isinstance(error, EmptyResult):
		return HTTPException(status_code=422, detail=str(error))
	if isinstance(error, AnalysisCancelled):
		return HTTPException(status_code=503, detail=str(error))
	if isinstance(error, HostError):
		return HTTPException(status_code=502, detail=str(error))
	return HTTPException(status_code=500, detail=str(error))


@app.post("/analyze", response_model=AnalysisResult)
def analyze(req: AnalyzeRequest, analyzer: FlowAnalyzer = Depends(get_analyzer)) -> AnalysisResult:
	if not req.allow_fallback:
		analyzer.fallback = None
	try:
		return analyzer.analyze(req.repo_url)
	except FlowscopeError as e:
		raise error_response(e) from e


def create_app() -> FastAPI:
	return app

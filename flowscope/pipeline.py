"""End-to-end repository flow analysis.

Scans directories depth-first one request at a time, so node creation order
(and therefore id disambiguation) follows the host's listing order.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from .classify import ClassificationStrategy, RegexClassificationStrategy, is_candidate
from .config import Settings, load_settings
from .errors import AnalysisCancelled, EmptyResult, HostError, RateLimited, RepositoryNotFound
from .fallback import FallbackProvider
from .fetch import ContentFetcher
from .graph import GraphBuilder, analyze_file
from .journeys import synthesize_journeys
from .log import get_logger
from .model import AnalysisResult, RemoteFile, RepositoryReference
from .repo_ref import DEFAULT_BRANCH, FALLBACK_BRANCH, parse_repository_url

logger = get_logger(__name__)


SCAN_DIRECTORIES = {"src", "app", "pages", "components", "routes", "screens", "views", "layouts"}
SKIP_DIRECTORIES = {
	"node_modules",
	".git",
	".next",
	".nuxt",
	"dist",
	"build",
	"out",
	"coverage",
	"vendor",
	"__pycache__",
}


@dataclass
class ScanState:
	builder: GraphBuilder
	candidates: int = 0
	total_files: int = 0
	analyzed_files: int = 0


class FlowAnalyzer:
	"""Runs the scan, classification, graph and journey stages for one URL at a time."""

	def __init__(
		self,
		fetcher: ContentFetcher,
		strategy: Optional[ClassificationStrategy] = None,
		fallback: Optional[FallbackProvider] = None,
		cancel_event: Optional[threading.Event] = None,
	):
		self.fetcher = fetcher
		self.strategy = strategy or RegexClassificationStrategy()
		self.fallback = fallback
		self.cancel_event = cancel_event
		if cancel_event is not None and fetcher.cancel_event is None:
			fetcher.cancel_event = cancel_event

	def analyze(self, url: str) -> AnalysisResult:
		"""Analyze ``url``, substituting the fallback dataset on host failures.

		Raises:
			InvalidReference: ``url`` is not a repository URL
			EmptyResult: nothing analyzable was found
			RepositoryNotFound, RateLimited, HostError: host failures when no
				fallback provider is configured
		"""
		ref = parse_repository_url(url)
		logger.info(f"Analyzing repository {ref.owner}/{ref.name}@{ref.branch}")
		try:
			self.fetcher.probe(ref)
			return self._run(url, ref)
		except (RepositoryNotFound, RateLimited, HostError) as e:
			if self.fallback is None:
				raise
			logger.warning(f"GitHub unavailable for {ref.owner}/{ref.name} ({e}); returning demo analysis")
			return self.fallback.provide(url, ref.name, e)

	def _run(self, url: str, ref: RepositoryReference) -> AnalysisResult:
		state = ScanState(builder=GraphBuilder())

		try:
			root = self.fetcher.list_directory(ref, "")
		except RepositoryNotFound:
			if ref.branch != DEFAULT_BRANCH:
				raise
			logger.warning(f"No tree on {DEFAULT_BRANCH}; retrying {ref.owner}/{ref.name} on {FALLBACK_BRANCH}")
			ref = ref.model_copy(update={"branch": FALLBACK_BRANCH})
			root = self.fetcher.list_directory(ref, "")

		self._scan_entries(ref, root, state)
		if state.candidates == 0:
			raise EmptyResult(ref.name)

		nodes = state.builder.resolve()
		routes = state.builder.routes()
		journeys = synthesize_journeys(nodes)
		logger.info(
			f"Found {len(nodes)} nodes, {len(routes)} routes in {state.analyzed_files}/{state.total_files} files"
		)
		return AnalysisResult(
			repo_url=url,
			repo_name=ref.name,
			nodes=nodes,
			routes=routes,
			journeys=journeys,
			total_files_seen=state.total_files,
			files_successfully_analyzed=state.analyzed_files,
			timestamp=datetime.now(timezone.utc),
		)

	def _scan_directory(self, ref: RepositoryReference, path: str, state: ScanState) -> None:
		self._scan_entries(ref, self.fetcher.list_directory(ref, path), state)

	def _scan_entries(self, ref: RepositoryReference, entries: Iterable[RemoteFile], state: ScanState) -> None:
		for entry in entries:
			if self.cancel_event is not None and self.cancel_event.is_set():
				raise AnalysisCancelled()

			if entry.kind == "directory":
				if entry.name in SKIP_DIRECTORIES:
					logger.debug(f"Skipping {entry.path}")
				elif entry.name in SCAN_DIRECTORIES:
					self._scan_directory(ref, entry.path, state)
				continue

			state.total_files += 1
			if not is_candidate(entry.path) or not entry.content_location:
				continue
			state.candidates += 1

			text = self.fetcher.read_file(entry.content_location)
			analysis = analyze_file(entry.path, text, self.strategy)
			state.builder.add_file(analysis)
			if text:
				state.analyzed_files += 1
			logger.debug(f"{entry.path}: {len(analysis.nodes)} nodes, {len(analysis.references)} references")


def analyze_repository(
	url: str,
	settings: Optional[Settings] = None,
	cancel_event: Optional[threading.Event] = None,
) -> AnalysisResult:
	"""Analyze ``url`` with a fresh client configured from ``settings``."""
	settings = settings or load_settings()
	fallback = FallbackProvider() if settings.fallback_enabled else None
	with ContentFetcher(settings, cancel_event=cancel_event) as fetcher:
		return FlowAnalyzer(fetcher, fallback=fallback, cancel_event=cancel_event).analyze(url)

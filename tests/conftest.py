from __future__ import annotations

import json
from typing import Dict, List, Optional, Set

import httpx
import pytest

from flowscope.config import Settings
from flowscope.fallback import FallbackProvider
from flowscope.fetch import ContentFetcher
from flowscope.pipeline import FlowAnalyzer


RAW_HOST = "https://raw.githubusercontent.com"


class FakeGitHub:
	"""In-memory stand-in for the GitHub contents API and raw host."""

	def __init__(self, owner: str = "acme", repo: str = "shop", branches: Optional[Set[str]] = None):
		self.owner = owner
		self.repo = repo
		self.branches = branches or {"main"}
		self.files: Dict[str, str] = {}
		self.probe_status = 200
		self.probe_headers: Dict[str, str] = {}
		self.repo_text: Optional[str] = None
		self.failing_raw: Set[str] = set()
		self.requests: List[httpx.Request] = []

	def add(self, path: str, content: str) -> None:
		self.files[path] = content

	def _children(self, directory: str) -> List[dict]:
		prefix = f"{directory}/" if directory else ""
		seen: List[str] = []
		entries: List[dict] = []
		for path in self.files:
			if not path.startswith(prefix):
				continue
			rest = path[len(prefix):]
			name = rest.split("/", 1)[0]
			if name in seen:
				continue
			seen.append(name)
			child = prefix + name
			if "/" in rest:
				entries.append({"name": name, "path": child, "type": "dir", "download_url": None})
			else:
				entries.append({"name": name, "path": child, "type": "file", "download_url": None})
		return entries

	def handler(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		url = str(request.url)
		repo_path = f"/repos/{self.owner}/{self.repo}"

		if url.startswith(RAW_HOST):
			path = request.url.path.split("/", 4)[-1]
			if path in self.failing_raw or path not in self.files:
				return httpx.Response(500)
			return httpx.Response(200, text=self.files[path])

		if request.url.path == repo_path:
			if self.repo_text is not None:
				return httpx.Response(self.probe_status, headers=self.probe_headers, text=self.repo_text)
			return httpx.Response(self.probe_status, headers=self.probe_headers, json={"name": self.repo})

		contents = f"{repo_path}/contents"
		if request.url.path.startswith(contents):
			branch = request.url.params.get("ref")
			if branch not in self.branches:
				return httpx.Response(404, json={"message": "No commit found for the ref"})
			directory = request.url.path[len(contents):].strip("/")
			entries = self._children(directory)
			for entry in entries:
				if entry["type"] == "file":
					entry["download_url"] = f"{RAW_HOST}/{self.owner}/{self.repo}/{branch}/{entry['path']}"
			return httpx.Response(200, content=json.dumps(entries).encode(), headers={"Content-Type": "application/json"})

		return httpx.Response(404)

	@property
	def url(self) -> str:
		return f"https://github.com/{self.owner}/{self.repo}"


@pytest.fixture
def github() -> FakeGitHub:
	return FakeGitHub()


@pytest.fixture
def sleeps() -> List[float]:
	return []


@pytest.fixture
def make_fetcher(sleeps):
	def _make(handler, **settings) -> ContentFetcher:
		client = httpx.Client(transport=httpx.MockTransport(handler))
		return ContentFetcher(Settings(**settings), client=client, sleep=sleeps.append)

	return _make


@pytest.fixture
def make_analyzer(make_fetcher):
	def _make(github: FakeGitHub, fallback: bool = False) -> FlowAnalyzer:
		return FlowAnalyzer(make_fetcher(github.handler), fallback=FallbackProvider() if fallback else None)

	return _make

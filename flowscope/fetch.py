"""GitHub content client: directory listings and raw file bodies.

Listing failures propagate to the caller; raw file failures degrade to an
empty body so one unreadable file never aborts a run.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx

from .config import Settings
from .errors import AnalysisCancelled, FlowscopeError, HostError, RateLimited, RepositoryNotFound
from .log import get_logger
from .model import RemoteFile, RepositoryReference

logger = get_logger(__name__)


def parse_reset_time(value: Optional[str]) -> datetime:
	"""Convert an ``X-RateLimit-Reset`` epoch value, defaulting to now."""
	if value:
		try:
			return datetime.fromtimestamp(int(value), tz=timezone.utc)
		except (TypeError, ValueError, OverflowError, OSError):
			logger.debug(f"Unparseable rate limit reset header: {value!r}")
	return datetime.now(timezone.utc)


def _is_rate_limited(response: httpx.Response) -> bool:
	if response.status_code == 429:
		return True
	return response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"


def _json_body(response: httpx.Response) -> Any:
	try:
		return response.json()
	except ValueError:
		raise HostError(response.status_code, "invalid JSON body")


class ContentFetcher:
	"""Client for the GitHub contents API and raw file downloads."""

	def __init__(
		self,
		settings: Optional[Settings] = None,
		client: Optional[httpx.Client] = None,
		sleep: Callable[[float], None] = time.sleep,
		cancel_event: Optional[threading.Event] = None,
	):
		self.settings = settings or Settings()
		self.sleep = sleep
		self.cancel_event = cancel_event
		self.headers = {
			"Accept": self.settings.accept_header,
			"User-Agent": self.settings.user_agent,
		}
		if self.settings.token:
			self.headers["Authorization"] = f"Bearer {self.settings.token}"
		self._owns_client = client is None
		self.client = client or httpx.Client(timeout=self.settings.timeout, follow_redirects=True)

	def close(self) -> None:
		if self._owns_client:
			self.client.close()

	def __enter__(self) -> "ContentFetcher":
		return self

	def __exit__(self, *exc_info: Any) -> None:
		self.close()

	def _repo_url(self, ref: RepositoryReference) -> str:
		return f"{self.settings.api_base_url.rstrip('/')}/repos/{ref.owner}/{ref.name}"

	def _request(self, url: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
		"""GET with bounded retries.

		Rate limits and missing resources fail immediately; host errors and
		transport failures are retried ``max_retries`` more times, waiting
		``retry_base_delay * attempt`` between tries.
		"""
		attempts = self.settings.max_retries + 1
		last_error: Optional[HostError] = None

		for attempt in range(attempts):
			if self.cancel_event is not None and self.cancel_event.is_set():
				raise AnalysisCancelled()
			try:
				response = self.client.get(url, params=params, headers=self.headers)
				if _is_rate_limited(response):
					raise RateLimited(parse_reset_time(response.headers.get("X-RateLimit-Reset")))
				if response.status_code == 404:
					raise RepositoryNotFound()
				if not response.is_success:
					raise HostError(response.status_code)
				return response
			except httpx.HTTPError as e:
				last_error = HostError(None, str(e) or type(e).__name__)
			except HostError as e:
				last_error = e

			if attempt < attempts - 1:
				delay = self.settings.retry_base_delay * (attempt + 1)
				logger.warning(f"{last_error}; retrying {url} in {delay:.1f}s ({attempt + 1}/{attempts - 1})")
				self.sleep(delay)

		raise last_error or HostError(None, "no request attempted")

	def probe(self, ref: RepositoryReference) -> Dict[str, Any]:
		"""Check that the repository is reachable and return its metadata."""
		response = self._request(self._repo_url(ref))
		data = _json_body(response)
		return data if isinstance(data, dict) else {}

	def list_directory(self, ref: RepositoryReference, path: str = "") -> List[RemoteFile]:
		"""List one directory level of ``ref`` at ``path``."""
		url = f"{self._repo_url(ref)}/contents/{path.strip('/')}"
		response = self._request(url, params={"ref": ref.branch})
		data = _json_body(response)
		if not isinstance(data, list):
			return []

		files: List[RemoteFile] = []
		for item in data:
			if not isinstance(item, dict) or "path" not in item:
				continue
			is_dir = item.get("type") == "dir"
			files.append(
				RemoteFile(
					name=item.get("name") or item["path"].rsplit("/", 1)[-1],
					path=item["path"],
					kind="directory" if is_dir else "file",
					content_location=None if is_dir else item.get("download_url"),
				)
			)
		logger.debug(f"Listed {len(files)} entries under /{path}")
		return files

	def read_file(self, handle: str) -> str:
		"""Fetch a raw file body; any failure yields an empty string."""
		try:
			return self._request(handle).text
		except AnalysisCancelled:
			raise
		except FlowscopeError as e:
			logger.warning(f"Could not read {handle}: {e}")
			return ""

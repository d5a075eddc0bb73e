"""Failure taxonomy for repository analysis."""

from __future__ import annotations

from datetime import datetime
from typing import Optional


class FlowscopeError(Exception):
	"""Base class for every failure surfaced by the analyzer."""


class ConfigError(FlowscopeError):
	"""Raised when settings cannot be loaded from the environment."""


class InvalidReference(FlowscopeError):
	"""The supplied text is not a repository URL. Never retried."""

	def __init__(self, url: str):
		self.url = url
		super().__init__(
			f"Invalid GitHub URL: {url!r}. Please provide a URL like https://github.com/owner/repo"
		)


class RepositoryNotFound(FlowscopeError):
	def __init__(self, message: str = "Repository not found. Please check the URL and ensure the repository is public."):
		super().__init__(message)


class RateLimited(FlowscopeError):
	"""The host refused the request until ``reset_time``."""

	def __init__(self, reset_time: datetime):
		self.reset_time = reset_time
		super().__init__(
			f"GitHub API rate limit exceeded. Resets at {reset_time.strftime('%H:%M:%S %Z').strip()}"
		)


class HostError(FlowscopeError):
	"""Any other non-success answer. ``status`` is None for transport failures."""

	def __init__(self, status: Optional[int], detail: str = ""):
		self.status = status
		if status is None:
			message = f"GitHub API unreachable: {detail}" if detail else "GitHub API unreachable"
		else:
			message = f"GitHub API error: {status}: {detail}" if detail else f"GitHub API error: {status}"
		super().__init__(message)


class EmptyResult(FlowscopeError):
	def __init__(self, repo_name: str):
		self.repo_name = repo_name
		super().__init__(
			f"No page or component files found in {repo_name}. Try a repository with a src/, app/ or pages/ directory."
		)


class AnalysisCancelled(FlowscopeError):
	def __init__(self):
		super().__init__("Analysis cancelled before completion")

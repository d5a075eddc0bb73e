from __future__ import annotations

import re

from .errors import InvalidReference
from .model import RepositoryReference


DEFAULT_BRANCH = "main"
FALLBACK_BRANCH = "master"

_REPO_URL = re.compile(
	r"^(?:https?://)?(?:www\.)?github\.com/([^/\s]+)/([^/\s]+)(?:/tree/([^/\s]+))?(?:/.*)?$",
	re.IGNORECASE,
)


def parse_repository_url(url: str) -> RepositoryReference:
	"""Turn ``github.com/owner/name[/tree/branch]`` into a reference.

	Raises InvalidReference when the text is not a repository URL.
	"""
	clean_url = (url or "").strip().rstrip("/")
	match = _REPO_URL.match(clean_url)
	if not match:
		raise InvalidReference(url)

	owner, name, branch = match.group(1), match.group(2), match.group(3)
	if name.endswith(".git"):
		name = name[: -len(".git")]
	if not name:
		raise InvalidReference(url)

	return RepositoryReference(url=clean_url, owner=owner, name=name, branch=branch or DEFAULT_BRANCH)

"""Heuristic detection of navigable units in script/markup source text.

Nothing here parses the source. Declarations are found with a structural
regular expression and classified by keyword rules over the file path, the
declaration name and a few content signatures.
"""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from .model import NodeKind


CANDIDATE_EXTENSIONS = {".js", ".jsx", ".ts", ".tsx", ".mjs"}

EXCLUDED_PATTERNS: Sequence[re.Pattern] = (
	re.compile(r"\.(?:test|spec|stories|story)\.[cm]?[jt]sx?$", re.IGNORECASE),
	re.compile(r"(?:^|/)(?:__tests__|__mocks__|tests?|e2e|cypress)/", re.IGNORECASE),
	re.compile(r"\.config\.[cm]?[jt]s$", re.IGNORECASE),
	re.compile(r"(?:^|/)(?:setupTests|jest\.setup|vite-env)\.[jt]sx?$"),
	re.compile(r"\.d\.ts$"),
)

PAGE_SEGMENTS = {"pages", "routes", "app", "screens", "views"}

_DECLARATION = re.compile(
	r"export\s+(?:default\s+)?"
	r"(?:(?:async\s+)?function\s+(\w+)\s*(?:<[^>]*>)?\s*\([^)]*\)"
	r"|(?:const|let)\s+(\w+)\s*(?::\s*[^=]+)?=\s*(?:async\s*)?(?:\([^)]*\)|\w+)\s*(?::\s*[^=]+)?=>)"
	r"\s*(?::\s*[^{]+)?\s*\{[\s\S]*?return\s*\(?\s*<[\s\S]*?>"
)

_ROUTER_HOOK = re.compile(r"\buse(?:Navigate|Router|Location|Params|History|SearchParams)\s*\(")
_PAGE_TITLE = re.compile(r"document\.title|<title>|<Helmet|<Head>|\buseTitle\s*\(|\bexport\s+const\s+metadata\b")


@dataclass(frozen=True)
class Declaration:
	"""A markup-returning export found in a file, with its position among them."""

	name: str
	index: int


def is_candidate(path: str) -> bool:
	_, ext = os.path.splitext(path)
	if ext.lower() not in CANDIDATE_EXTENSIONS:
		return False
	return not any(pattern.search(path) for pattern in EXCLUDED_PATTERNS)


def path_segments(path: str) -> List[str]:
	return [part.lower() for part in path.split("/")[:-1] if part]


class ClassificationStrategy(ABC):
	"""Contract for finding and classifying navigable declarations."""

	@abstractmethod
	def find_declarations(self, text: str) -> List[Declaration]:
		"""Return declarations in source order."""

	@abstractmethod
	def classify(self, name: str, path: str, text: str) -> NodeKind:
		"""Return the node kind of declaration ``name`` found in ``path``."""


class RegexClassificationStrategy(ClassificationStrategy):
	"""Best-effort keyword classifier over a structural regex."""

	def find_declarations(self, text: str) -> List[Declaration]:
		declarations: List[Declaration] = []
		for match in _DECLARATION.finditer(text):
			name = match.group(1) or match.group(2)
			if name:
				declarations.append(Declaration(name=name, index=len(declarations)))
		return declarations

	def classify(self, name: str, path: str, text: str) -> NodeKind:
		# Ordered from most specific role to the generic fallbacks.
		lowered = name.lower()
		if "layout" in lowered or "wrapper" in lowered:
			return "layout"
		if "modal" in lowered or "dialog" in lowered:
			return "modal"
		if "redirect" in lowered:
			return "redirect"
		if self._looks_like_page(lowered, path, text):
			return "page"
		return "component"

	def _looks_like_page(self, lowered_name: str, path: str, text: str) -> bool:
		if PAGE_SEGMENTS.intersection(path_segments(path)):
			return True
		if any(word in lowered_name for word in ("page", "screen", "view")):
			return True
		return bool(_ROUTER_HOOK.search(text) and _PAGE_TITLE.search(text))

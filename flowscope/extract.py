"""Regex feature extraction from a single file's text.

Produces route paths, auth/parameter flags, user actions, entry points, a
complexity score and raw navigation references. Nothing is executed or
parsed; every signal is a textual pattern.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .model import Complexity, ConnectionKind


PRIMARY_ROUTE_ROOTS = ("pages", "routes")
ROUTE_ROOTS = ("pages", "routes", "app", "screens", "views")

_SCRIPT_EXTENSION = re.compile(r"\.[cm]?[jt]sx?$", re.IGNORECASE)
_NAME_SUFFIX = re.compile(r"(?:page|screen|view)$", re.IGNORECASE)
_BRACKET_GROUP = re.compile(r"\[\[?(?:\.\.\.)?([^\[\]]+)\]?\]")
_ROUTE_PARAM = re.compile(r":(\w+)")

_AUTH = re.compile(r"useAuth|isAuthenticated|requireAuth|PrivateRoute|ProtectedRoute|useSession|withAuth")
_PARAMS = re.compile(r"useParams|useSearchParams|useLocalSearchParams|props\.match\.params|router\.query")
_PROTECTED = re.compile(r"requireAuth|ProtectedRoute|PrivateRoute|authGuard|canActivate|withAuth")
_FORM = re.compile(r"<form|useForm|Formik|react-hook-form")
_API = re.compile(r"fetch\(|axios\.|api\.|useQuery|useMutation|useSWR")

USER_ACTIONS: Sequence[Tuple[str, re.Pattern]] = (
	("Click actions", re.compile(r"<button|onClick")),
	("Form submission", re.compile(r"<form|onSubmit")),
	("Data entry", re.compile(r"<input|<textarea|<select|onChange", re.IGNORECASE)),
	("Search/Filter", re.compile(r"search|filter", re.IGNORECASE)),
	("Authentication", re.compile(r"login|signin|sign in|authenticate", re.IGNORECASE)),
	("Shopping", re.compile(r"cart|checkout|purchase|buy", re.IGNORECASE)),
	("File upload", re.compile(r"upload|type=[\"']file[\"']|FileReader", re.IGNORECASE)),
	("Social sharing", re.compile(r"share|social", re.IGNORECASE)),
)
DEFAULT_USER_ACTION = "View content"

ENTRY_POINTS: Sequence[Tuple[str, re.Pattern]] = (
	("Authentication flow", re.compile(r"login|signin", re.IGNORECASE)),
	("User area", re.compile(r"dashboard|profile", re.IGNORECASE)),
	("Product links", re.compile(r"product|item|detail", re.IGNORECASE)),
	("Search results", re.compile(r"search|results", re.IGNORECASE)),
)
ROOT_ENTRY_POINTS = ("Direct URL", "Search engines")
DEFAULT_ENTRY_POINT = "Navigation"

# Complexity weights. Bucket thresholds: <=3 low, <=8 medium, else high.
COMPLEXITY_HOOKS = (
	"useState",
	"useEffect",
	"useContext",
	"useReducer",
	"useMemo",
	"useCallback",
	"useRef",
	"useLayoutEffect",
)
_TERNARY = re.compile(r"\s\?\s[^;\n]*?\s:\s")
_COLLECTION_TRANSFORM = re.compile(r"\.(?:map|filter|reduce|forEach|flatMap|find|some|every|sort)\s*\(")
_INLINE_HANDLER = re.compile(r"\bon[A-Z]\w*\s*=\s*\{")
_NETWORK_CALL = re.compile(r"\bfetch\s*\(|\baxios(?:\.\w+)?\s*\(|\buse(?:Query|Mutation|SWR)\s*\(")
LOW_THRESHOLD = 3
MEDIUM_THRESHOLD = 8

_QUOTED = r"[\"'`]([^\"'`$]+)[\"'`]"
_NAV_CALL = r"(?:navigate|router\.(?:push|replace)|history\.(?:push|replace))\s*\(\s*" + _QUOTED
_LINK = re.compile(r"<Link\b[^>]*?\b(?:to|href)=\{?" + _QUOTED + r"\}?[^>]*>([^<]*)<")
_PROGRAMMATIC = re.compile(r"(?<![\w.])" + _NAV_CALL)
_CONDITIONAL = re.compile(r"\bif\s*\([^)]*\)\s*\{?\s*(?:return\s+)?(?P<call>" + _NAV_CALL + r")")
_REDIRECT = re.compile(r"<Navigate\b[^>]*?\bto=\{?" + _QUOTED + r"|(?<![\w.])redirect\s*\(\s*" + _QUOTED)


@dataclass(frozen=True)
class RawReference:
	"""An unresolved outgoing link target found in a file."""

	target: str
	kind: ConnectionKind
	trigger: str
	condition: Optional[str] = None
	position: int = 0


def strip_name_suffix(name: str) -> str:
	return _NAME_SUFFIX.sub("", name)


def _route_root(directories: List[str]) -> Optional[int]:
	# Innermost pages/routes directory first, then app/screens/views.
	lowered = [p.lower() for p in directories]
	for candidates in (PRIMARY_ROUTE_ROOTS, ROUTE_ROOTS):
		found = [i for i, p in enumerate(lowered) if p in candidates]
		if found:
			return found[-1]
	return None


def _route_segment(segment: str) -> str:
	"""Lowercase the static text of ``segment`` and turn ``[x]`` groups into ``:x``."""
	pieces: List[str] = []
	last = 0
	for match in _BRACKET_GROUP.finditer(segment):
		pieces.append(segment[last:match.start()].lower())
		pieces.append(f":{match.group(1)}")
		last = match.end()
	pieces.append(segment[last:].lower())
	return "".join(pieces)


def _route_from_directory(file_path: str) -> Optional[str]:
	parts = [p for p in file_path.split("/") if p]
	root = _route_root(parts[:-1])
	if root is None:
		return None

	segments = parts[root + 1:]
	if segments:
		segments[-1] = _SCRIPT_EXTENSION.sub("", segments[-1])
	if segments and segments[-1].lower() in ("index", "page"):
		segments = segments[:-1]

	route_parts: List[str] = []
	for segment in segments:
		if segment.startswith("(") and segment.endswith(")"):
			# Route groups do not appear in the URL.
			continue
		route_parts.append(_route_segment(segment))
	return "/" + "/".join(route_parts)


def derive_route(file_path: str, name: str) -> Tuple[str, bool]:
	"""Return ``(route_path, is_default)`` for a declaration.

	``is_default`` marks the bare ``/`` produced when a name-derived route
	has nothing left after suffix stripping.
	"""
	route = _route_from_directory(file_path)
	if route is not None:
		return route, False

	lowered = name.lower()
	if lowered in ("home", "homepage"):
		return "/", False
	stripped = strip_name_suffix(lowered)
	return f"/{stripped}", not stripped


def derive_route_path(file_path: str, name: str) -> str:
	return derive_route(file_path, name)[0]


def route_params(route_path: str) -> List[str]:
	return _ROUTE_PARAM.findall(route_path)


def detect_flags(text: str, route_path: str = "") -> Tuple[bool, bool, bool]:
	"""Return ``(has_auth, has_parameters, is_protected)``."""
	has_auth = bool(_AUTH.search(text))
	has_parameters = bool(_PARAMS.search(text)) or ":" in route_path
	is_protected = bool(_PROTECTED.search(text))
	return has_auth, has_parameters, is_protected


def extract_user_actions(text: str) -> List[str]:
	actions = [label for label, pattern in USER_ACTIONS if pattern.search(text)]
	return actions or [DEFAULT_USER_ACTION]


def extract_entry_points(text: str, route_path: str) -> List[str]:
	entry_points: List[str] = []
	if route_path == "/":
		entry_points.extend(ROOT_ENTRY_POINTS)
	entry_points.extend(label for label, pattern in ENTRY_POINTS if pattern.search(text))
	return entry_points or [DEFAULT_ENTRY_POINT]


def complexity_score(text: str) -> int:
	score = 0
	for hook in COMPLEXITY_HOOKS:
		score += len(re.findall(r"\b" + hook + r"\s*(?:<[^>()]*>)?\s*\(", text))
	score += len(_TERNARY.findall(text))
	score += len(_COLLECTION_TRANSFORM.findall(text))
	score += len(_INLINE_HANDLER.findall(text))
	score += 2 * len(_NETWORK_CALL.findall(text))

	line_count = len(text.splitlines())
	if line_count > 100:
		score += 2
	if line_count > 200:
		score += 1
	return score


def complexity_bucket(score: int) -> Complexity:
	if score <= LOW_THRESHOLD:
		return "low"
	if score <= MEDIUM_THRESHOLD:
		return "medium"
	return "high"


def describe_page(name: str, text: str) -> str:
	description = f"{strip_name_suffix(name) or name} page"
	if _FORM.search(text):
		description += " with form functionality"
	if _AUTH.search(text):
		description += " requiring authentication"
	if _API.search(text):
		description += " with data integration"
	return description


def extract_navigation_references(text: str) -> List[RawReference]:
	"""Collect raw outgoing link targets, ordered by their position in ``text``."""
	references: List[RawReference] = []

	for match in _LINK.finditer(text):
		label = match.group(2).strip() or "Link"
		references.append(RawReference(match.group(1), "navigation", f"{label} click", position=match.start()))

	conditional_calls = set()
	for match in _CONDITIONAL.finditer(text):
		conditional_calls.add(match.start("call"))
		references.append(
			RawReference(
				match.group(2),
				"conditional",
				"Conditional redirect",
				condition="Based on state/props",
				position=match.start("call"),
			)
		)

	for match in _PROGRAMMATIC.finditer(text):
		if match.start() in conditional_calls:
			continue
		references.append(RawReference(match.group(1), "navigation", "Programmatic navigation", position=match.start()))

	for match in _REDIRECT.finditer(text):
		target = match.group(1) or match.group(2)
		references.append(RawReference(target, "redirect", "Automatic redirect", position=match.start()))

	references.sort(key=lambda ref: ref.position)
	return references

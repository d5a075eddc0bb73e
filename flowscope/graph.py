from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .classify import ClassificationStrategy
from .extract import (
    RawReference,
    complexity_bucket,
    complexity_score,
    derive_route,
    describe_page,
    detect_flags,
    extract_entry_points,
    extract_navigation_references,
    extract_user_actions,
    route_params,
    strip_name_suffix,
)
from .log import get_logger
from .model import Connection, FlowNode, NodeMetadata, RouteEntry

logger = get_logger(__name__)


@dataclass
class FileAnalysis:
    """Everything pass one learned from a single file."""
    path: str
    nodes: List[FlowNode] = field(default_factory=list)
    references: List[RawReference] = field(default_factory=list)
    default_routes: List[str] = field(default_factory=list)  # ids whose route is the bare fallback


def analyze_file(path: str, text: str, strategy: ClassificationStrategy) -> FileAnalysis:
    """Classify every declaration in ``text`` and extract the file's references."""
    analysis = FileAnalysis(path=path)
    if not text:
        return analysis

    score = complexity_score(text)
    user_actions = extract_user_actions(text)

    for declaration in strategy.find_declarations(text):
        name = declaration.name
        route_path, is_default = derive_route(path, name)
        has_auth, has_parameters, is_protected = detect_flags(text, route_path)
        title = strip_name_suffix(name) or name
        node = FlowNode(
            id=f"{name.lower()}-{declaration.index}",
            display_name=title,
            route_path=route_path,
            source_path=path,
            kind=strategy.classify(name, path, text),
            metadata=NodeMetadata(
                title=title,
                description=describe_page(name, text),
                has_auth=has_auth,
                has_parameters=has_parameters,
                is_protected=is_protected,
                complexity=complexity_bucket(score),
                user_actions=list(user_actions),
                entry_points=extract_entry_points(text, route_path),
            ),
        )
        analysis.nodes.append(node)
        if is_default:
            analysis.default_routes.append(node.id)

    if analysis.nodes:
        analysis.references = extract_navigation_references(text)
    return analysis


def normalize_route(target: str) -> str:
    """Drop query, fragment and trailing slash from a link target."""
    target = re.split(r"[?#]", target.strip(), maxsplit=1)[0]
    if len(target) > 1:
        target = target.rstrip("/")
    return target or "/"


class GraphBuilder:
    """Accumulates per-file analyses and resolves them into a connected node set."""

    def __init__(self):
        self.files: Dict[str, FileAnalysis] = {}
        self.nodes: List[FlowNode] = []
        self._default_route_ids: set = set()
        self._ids: set = set()

    def add_file(self, analysis: FileAnalysis) -> None:
        """Pass one: register a file's nodes in scan order with unique ids."""
        self.files[analysis.path] = analysis
        for node in analysis.nodes:
            original_id = node.id
            if node.id in self._ids:
                # Same declaration name and index in another file.
                slug = re.sub(r"[^a-z0-9]+", "-", re.sub(r"\.[^./]+$", "", analysis.path.lower())).strip("-")
                node.id = f"{node.id}-{slug}"
                suffix = 2
                while node.id in self._ids:
                    node.id = f"{original_id}-{slug}-{suffix}"
                    suffix += 1
            if original_id in analysis.default_routes:
                self._default_route_ids.add(node.id)
            self._ids.add(node.id)
            self.nodes.append(node)

    def _route_index(self) -> Dict[str, str]:
        index: Dict[str, str] = {}
        for node in self.nodes:
            # First node in scan order owns a shared route.
            index.setdefault(node.route_path, node.id)
        return index

    def resolve(self) -> List[FlowNode]:
        """Pass two: turn cached raw references into connections between known nodes."""
        route_index = self._route_index()
        resolved = 0
        dropped = 0
        for node in self.nodes:
            analysis = self.files.get(node.source_path)
            if analysis is None:
                continue
            for reference in analysis.references:
                target_id = route_index.get(normalize_route(reference.target))
                if target_id is None:
                    dropped += 1
                    continue
                node.connections.append(
                    Connection(
                        target_node_id=target_id,
                        kind=reference.kind,
                        trigger_description=reference.trigger,
                        condition=reference.condition,
                    )
                )
                resolved += 1
        logger.debug(f"Resolved {resolved} connections, dropped {dropped} unmatched references")
        check_connections(self.nodes)
        return self.nodes

    def routes(self) -> List[RouteEntry]:
        entries: List[RouteEntry] = []
        for node in self.nodes:
            if node.kind != "page" or not node.route_path or node.id in self._default_route_ids:
                continue
            entries.append(
                RouteEntry(
                    path=node.route_path,
                    component_name=node.display_name,
                    source_path=node.source_path,
                    guards=["auth"] if node.metadata.is_protected else None,
                    params=route_params(node.route_path) or None,
                )
            )
        return entries


def check_connections(nodes: Iterable[FlowNode]) -> None:
    """Raise ValueError if any connection points outside ``nodes``."""
    nodes = list(nodes)
    ids = {node.id for node in nodes}
    for node in nodes:
        for connection in node.connections:
            if connection.target_node_id not in ids:
                raise ValueError(f"Connection from {node.id} targets unknown node {connection.target_node_id}")


def grid_layout(nodes: List[FlowNode], spacing: Tuple[int, int] = (320, 280), origin: int = 100) -> Dict[str, Dict[str, int]]:
    """Place nodes on a square-ish grid in their scan order."""
    if not nodes:
        return {}
    cols = math.ceil(math.sqrt(len(nodes)))
    positions: Dict[str, Dict[str, int]] = {}
    for index, node in enumerate(nodes):
        col = index % cols
        row = index // cols
        positions[node.id] = {"x": origin + col * spacing[0], "y": origin + row * spacing[1]}
    return positions

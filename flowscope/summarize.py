from __future__ import annotations

from typing import Dict, List

from .fallback import is_demo_result
from .model import AnalysisResult, FlowNode


def summarize_node(node: FlowNode, names: Dict[str, str]) -> str:
	parts: List[str] = []
	parts.append(f"{node.kind.capitalize()} {node.display_name} ({node.route_path}) at {node.source_path}")
	parts.append(f"  Complexity: {node.metadata.complexity}; actions: {', '.join(node.metadata.user_actions)}")
	flags = [
		flag
		for flag, on in (
			("auth", node.metadata.has_auth),
			("params", node.metadata.has_parameters),
			("protected", node.metadata.is_protected),
		)
		if on
	]
	if flags:
		parts.append(f"  Flags: {', '.join(flags)}")
	for conn in node.connections:
		target = names.get(conn.target_node_id, conn.target_node_id)
		condition = f" [{conn.condition}]" if conn.condition else ""
		parts.append(f"  -> {target} via {conn.trigger_description} ({conn.kind}){condition}")
	return "\n".join(parts)


def summarize_result(result: AnalysisResult) -> str:
	names = {node.id: node.display_name for node in result.nodes}
	kinds: Dict[str, int] = {}
	for node in result.nodes:
		kinds[node.kind] = kinds.get(node.kind, 0) + 1
	edge_count = sum(len(node.connections) for node in result.nodes)

	lines: List[str] = []
	header = (
		f"Repository {result.repo_name} ({result.repo_url}): {len(result.nodes)} nodes, "
		f"{edge_count} connections, {len(result.routes)} routes from "
		f"{result.files_successfully_analyzed}/{result.total_files_seen} files"
	)
	if is_demo_result(result):
		header += " [demo data]"
	lines.append(header)
	if kinds:
		lines.append("  Kinds: " + ", ".join(f"{kind}={count}" for kind, count in sorted(kinds.items())))
	for journey in result.journeys:
		path = " -> ".join(step.display_name for step in journey.steps)
		lines.append(f"  Journey {journey.name} ({journey.user_type}): {path}")
	lines.append("")
	lines.extend(summarize_node(node, names) for node in result.nodes)
	return "\n".join(lines)

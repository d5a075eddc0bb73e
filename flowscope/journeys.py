from __future__ import annotations

from typing import List, Optional, Sequence

from .model import FlowNode, UserJourney


def _first_match(nodes: Sequence[FlowNode], keyword: str, root: bool = False) -> Optional[FlowNode]:
	for node in nodes:
		if root and node.route_path == "/":
			return node
		if keyword in node.route_path.lower() or keyword in node.display_name.lower():
			return node
	return None


def synthesize_journeys(nodes: Sequence[FlowNode]) -> List[UserJourney]:
	"""Derive at most two illustrative journeys from home/login/dashboard nodes."""
	home = _first_match(nodes, "home", root=True)
	login = _first_match(nodes, "login")
	dashboard = _first_match(nodes, "dashboard")

	journeys: List[UserJourney] = []
	if home and login:
		end = dashboard or login
		steps = [home, login] + ([dashboard] if dashboard else [])
		journeys.append(
			UserJourney(
				id="guest-onboarding",
				name="New User Onboarding",
				description="First-time visitor discovers the app and signs in",
				steps=[step.model_copy(deep=True) for step in steps],
				start_node_id=home.id,
				end_node_id=end.id,
				user_type="guest",
			)
		)

	if dashboard:
		journeys.append(
			UserJourney(
				id="authenticated-user",
				name="Authenticated User Flow",
				description="Returning user accesses their account and performs tasks",
				steps=[dashboard.model_copy(deep=True)],
				start_node_id=dashboard.id,
				end_node_id=dashboard.id,
				user_type="authenticated",
			)
		)
	return journeys

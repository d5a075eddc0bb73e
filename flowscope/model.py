from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


NodeKind = Literal["page", "layout", "modal", "redirect", "component"]
ConnectionKind = Literal["navigation", "redirect", "modal", "conditional"]
Complexity = Literal["low", "medium", "high"]
UserType = Literal["guest", "authenticated", "admin"]


class RepositoryReference(BaseModel):
	model_config = ConfigDict(frozen=True)

	url: str
	owner: str
	name: str
	branch: str = "main"


class RemoteFile(BaseModel):
	name: str
	path: str
	kind: Literal["file", "directory"]
	content_location: Optional[str] = None


class Connection(BaseModel):
	target_node_id: str
	kind: ConnectionKind
	trigger_description: str
	condition: Optional[str] = None


class NodeMetadata(BaseModel):
	title: str
	description: str
	has_auth: bool = False
	has_parameters: bool = False
	is_protected: bool = False
	complexity: Complexity = "low"
	user_actions: List[str] = []
	entry_points: List[str] = []


class FlowNode(BaseModel):
	id: str
	display_name: str
	route_path: str
	source_path: str
	kind: NodeKind
	connections: List[Connection] = []
	metadata: NodeMetadata


class RouteEntry(BaseModel):
	path: str
	component_name: str
	source_path: str
	guards: Optional[List[str]] = None
	params: Optional[List[str]] = None


class UserJourney(BaseModel):
	id: str
	name: str
	description: str
	steps: List[FlowNode] = []
	start_node_id: str
	end_node_id: str
	user_type: UserType


class AnalysisResult(BaseModel):
	model_config = ConfigDict(frozen=True)

	repo_url: str
	repo_name: str
	nodes: List[FlowNode]
	routes: List[RouteEntry]
	journeys: List[UserJourney]
	total_files_seen: int
	files_successfully_analyzed: int
	timestamp: datetime

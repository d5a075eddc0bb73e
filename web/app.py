from __future__ import annotations

from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from api import error_response, get_analyzer
from flowscope.errors import FlowscopeError
from flowscope.fallback import is_demo_result
from flowscope.graph import grid_layout
from flowscope.model import AnalysisResult
from flowscope.pipeline import FlowAnalyzer

app = FastAPI(title="Flowscope Web Interface")


class FlowRequest(BaseModel):
    repo_url: str


def to_graph_payload(result: AnalysisResult) -> Dict[str, Any]:
    """Flatten a result into the nodes/edges shape the diagram front end draws."""
    positions = grid_layout(result.nodes)

    nodes: List[Dict[str, Any]] = []
    edges: List[Dict[str, Any]] = []
    for node in result.nodes:
        nodes.append({
            "id": node.id,
            "type": node.kind,
            "name": node.display_name,
            "path": node.route_path,
            "file": node.source_path,
            "position": positions[node.id],
            "complexity": node.metadata.complexity,
            "description": node.metadata.description,
            "protected": node.metadata.is_protected,
        })
        for conn in node.connections:
            edges.append({
                "source": node.id,
                "target": conn.target_node_id,
                "type": conn.kind,
                "trigger": conn.trigger_description,
                "condition": conn.condition,
            })

    journeys = [
        {
            "id": journey.id,
            "name": journey.name,
            "user_type": journey.user_type,
            "steps": [step.id for step in journey.steps],
            "start": journey.start_node_id,
            "end": journey.end_node_id,
        }
        for journey in result.journeys
    ]

    return {
        "repo": {"url": result.repo_url, "name": result.repo_name},
        "nodes": nodes,
        "edges": edges,
        "journeys": journeys,
        "is_demo": is_demo_result(result),
        "stats": {
            "total_files": result.total_files_seen,
            "analyzed_files": result.files_successfully_analyzed,
            "pages": len([n for n in result.nodes if n.kind == "page"]),
            "routes": len(result.routes),
            "connections": len(edges),
        },
        "timestamp": result.timestamp.isoformat(),
    }


@app.post("/flow")
def get_flow(req: FlowRequest, analyzer: FlowAnalyzer = Depends(get_analyzer)) -> dict:
    """Return graph data for visualization."""
    try:
        result = analyzer.analyze(req.repo_url)
    except FlowscopeError as e:
        raise error_response(e) from e
    return to_graph_payload(result)


def create_app() -> FastAPI:
    return app

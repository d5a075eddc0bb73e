"""Flowscope: navigation-flow analysis of remote front-end repositories.

Modules:
- repo_ref.py: GitHub URL parsing into repository references.
- fetch.py: Directory listings and raw file bodies from GitHub.
- classify.py: Candidate filtering and page/layout/modal/redirect classification.
- extract.py: Route, flag, action, complexity and navigation extraction.
- graph.py: Node construction and connection resolution.
- journeys.py: Illustrative user journeys over the finished graph.
- fallback.py: Demo dataset used when GitHub is unavailable.
- pipeline.py: The analyze() entry point tying the stages together.
- model.py: Data structures for nodes, connections, routes and results.
- summarize.py: Plain-text summaries of a result.
- config.py, errors.py, log.py: Settings, failure taxonomy and logging helpers.
"""

__all__ = [
	"repo_ref",
	"fetch",
	"classify",
	"extract",
	"graph",
	"journeys",
	"fallback",
	"pipeline",
	"model",
	"summarize",
	"config",
	"errors",
	"log",
]

import threading
from datetime import datetime, timezone
from textwrap import dedent

import pytest

from flowscope.errors import AnalysisCancelled, EmptyResult, HostError, InvalidReference, RateLimited, RepositoryNotFound
from flowscope.fallback import DEMO_ANALYSIS, is_demo_result


HOME = dedent(
	"""
	import { Link } from 'react-router-dom'

	export function HomePage() {
	  return (
		<div>
		  <Link to="/about">About</Link>
		</div>
	  )
	}
	"""
)

ABOUT = dedent(
	"""
	export function AboutPage() {
	  return (
		<div>About</div>
	  )
	}
	"""
)


def all_ids(result):
	return {node.id for node in result.nodes}


def test_home_links_to_about(github, make_analyzer):
	github.add("src/pages/Home.tsx", HOME)
	github.add("src/pages/About.tsx", ABOUT)

	result = make_analyzer(github).analyze(github.url)

	assert [(n.id, n.kind, n.route_path) for n in result.nodes] == [
		("homepage-0", "page", "/home"),
		("aboutpage-0", "page", "/about"),
	]
	home = result.nodes[0]
	assert len(home.connections) == 1
	connection = home.connections[0]
	assert connection.target_node_id == "aboutpage-0"
	assert connection.kind == "navigation"
	assert connection.trigger_description == "About click"
	assert result.repo_name == "shop"
	assert result.total_files_seen == 2
	assert result.files_successfully_analyzed == 2
	assert [route.path for route in result.routes] == ["/home", "/about"]
	assert not is_demo_result(result)


def test_every_connection_targets_a_node(github, make_analyzer):
	github.add("src/pages/Home.tsx", HOME.replace("/about", "/missing"))
	github.add("src/pages/About.tsx", ABOUT)
	github.add("src/components/Nav.tsx", "export const Nav = () => {\n  return (\n    <Link to=\"/home\">Home</Link>\n  )\n}\n")

	result = make_analyzer(github).analyze(github.url)

	ids = all_ids(result)
	edges = [c for node in result.nodes for c in node.connections]
	assert [c.target_node_id for c in edges] == ["homepage-0"]
	assert all(c.target_node_id in ids for c in edges)


def test_node_modules_and_unlisted_directories_are_invisible(github, make_analyzer):
	github.add("src/pages/Home.tsx", HOME)
	github.add("src/node_modules/lib/Page.tsx", ABOUT)
	github.add("node_modules/react/index.js", "export default function React() {}")
	github.add("scripts/build/Page.tsx", ABOUT)
	github.add("package.json", "{}")

	result = make_analyzer(github).analyze(github.url)

	assert [node.source_path for node in result.nodes] == ["src/pages/Home.tsx"]
	assert result.total_files_seen == 2
	listed = [request.url.path for request in github.requests if "/contents" in request.url.path]
	assert not any("node_modules" in path for path in listed)


def test_missing_main_retries_master(github, make_analyzer):
	github.branches = {"master"}
	github.add("src/pages/About.tsx", ABOUT)

	result = make_analyzer(github).analyze(github.url)

	assert [node.id for node in result.nodes] == ["aboutpage-0"]
	refs = [request.url.params.get("ref") for request in github.requests if "/contents" in request.url.path]
	assert refs[:2] == ["main", "master"]


def test_unreadable_file_does_not_abort(github, make_analyzer):
	github.add("src/pages/Home.tsx", HOME)
	github.add("src/pages/About.tsx", ABOUT)
	github.failing_raw.add("src/pages/Home.tsx")

	result = make_analyzer(github).analyze(github.url)

	assert [node.id for node in result.nodes] == ["aboutpage-0"]
	assert result.total_files_seen == 2
	assert result.files_successfully_analyzed == 1


def test_no_candidates_is_empty_result(github, make_analyzer):
	github.add("README.md", "# shop")
	github.add("src/styles/site.css", "body {}")

	with pytest.raises(EmptyResult, match="No page or component files"):
		make_analyzer(github, fallback=True).analyze(github.url)


def test_invalid_url_never_falls_back(github, make_analyzer):
	with pytest.raises(InvalidReference):
		make_analyzer(github, fallback=True).analyze("https://example.com/nothing")
	assert github.requests == []


def test_missing_repository_returns_demo_data(github, make_analyzer):
	github.probe_status = 404

	result = make_analyzer(github, fallback=True).analyze(github.url)

	assert result.repo_url == github.url
	assert result.repo_name == "shop"
	assert [node.id for node in result.nodes] == [node.id for node in DEMO_ANALYSIS.nodes]
	assert result.routes == DEMO_ANALYSIS.routes
	description = result.nodes[0].metadata.description
	assert "demo" in description.lower()
	assert "Repository not found" in description


def test_missing_repository_without_fallback_raises(github, make_analyzer):
	github.probe_status = 404
	with pytest.raises(RepositoryNotFound):
		make_analyzer(github).analyze(github.url)


def test_non_json_repository_answer_returns_demo_data(github, make_analyzer):
	github.repo_text = "<html>proxy login</html>"

	result = make_analyzer(github, fallback=True).analyze(github.url)

	assert is_demo_result(result)
	assert result.repo_name == "shop"
	assert "invalid JSON body" in result.nodes[0].metadata.description

	with pytest.raises(HostError) as excinfo:
		make_analyzer(github).analyze(github.url)
	assert excinfo.value.status == 200


def test_repository_check_rate_limited(github, make_analyzer):
	github.probe_status = 403
	github.probe_headers = {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1893456000"}

	with pytest.raises(RateLimited) as excinfo:
		make_analyzer(github).analyze(github.url)
	assert excinfo.value.reset_time == datetime(2030, 1, 1, tzinfo=timezone.utc)

	result = make_analyzer(github, fallback=True).analyze(github.url)
	assert "rate limit" in result.nodes[0].metadata.description


def test_cancelled_run_stops_issuing_requests(github, make_fetcher):
	from flowscope.pipeline import FlowAnalyzer

	github.add("src/pages/Home.tsx", HOME)
	cancel = threading.Event()
	cancel.set()
	analyzer = FlowAnalyzer(make_fetcher(github.handler), cancel_event=cancel)

	with pytest.raises(AnalysisCancelled):
		analyzer.analyze(github.url)
	assert github.requests == []


def test_journeys_from_scanned_pages(github, make_analyzer):
	page = "export default function {name}() {{\n  return (\n    <div />\n  )\n}}\n"
	github.add("src/pages/index.tsx", page.format(name="Home"))
	github.add("src/pages/login.tsx", page.format(name="Login"))
	github.add("src/pages/dashboard.tsx", page.format(name="Dashboard"))

	result = make_analyzer(github).analyze(github.url)

	assert [(j.user_type, j.start_node_id, j.end_node_id) for j in result.journeys] == [
		("guest", "home-0", "dashboard-0"),
		("authenticated", "dashboard-0", "dashboard-0"),
	]

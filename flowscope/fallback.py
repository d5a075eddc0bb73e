"""Canned analysis returned when GitHub cannot be reached.

The substituted result announces itself in-band: the first node's
description starts with ``DEMO_MARKER`` followed by the original failure.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from .graph import check_connections
from .model import AnalysisResult, Connection, FlowNode, NodeMetadata, RouteEntry, UserJourney


DEMO_MARKER = "⚠️ Demo data"


def _connection(target: str, trigger: str, kind: str = "navigation", condition: Optional[str] = None) -> Connection:
	return Connection(target_node_id=target, kind=kind, trigger_description=trigger, condition=condition)


def _page(node_id: str, name: str, route: str, component: str, connections: List[Connection], **metadata) -> FlowNode:
	return FlowNode(
		id=node_id,
		display_name=name,
		route_path=route,
		source_path=f"src/pages/{component}.tsx",
		kind="page",
		connections=connections,
		metadata=NodeMetadata(**metadata),
	)


def _build_demo_analysis() -> AnalysisResult:
	nodes = [
		_page(
			"home", "Home", "/", "HomePage",
			[
				_connection("products", "Shop Now button"),
				_connection("login", "Login link"),
				_connection("signup", "Sign Up button"),
			],
			title="Home Page",
			description="Landing page with hero section and featured products",
			complexity="medium",
			user_actions=["Browse products", "Sign up", "Login"],
			entry_points=["Direct URL", "Search engines", "Social media"],
		),
		_page(
			"products", "Products", "/products", "ProductsPage",
			[
				_connection("product-detail", "Product card click"),
				_connection("cart", "Add to cart"),
				_connection("login", "Wishlist action", "conditional", "not authenticated"),
			],
			title="Product Catalog",
			description="Browse and filter products with search functionality",
			has_parameters=True,
			complexity="high",
			user_actions=["Filter products", "Search", "Add to cart", "View details"],
			entry_points=["Home page", "Search results", "Category links"],
		),
		_page(
			"product-detail", "Product Detail", "/products/:id", "ProductDetailPage",
			[
				_connection("cart", "Add to cart button"),
				_connection("checkout", "Buy now button"),
				_connection("products", "Back to products"),
			],
			title="Product Details",
			description="Detailed product view with images, specs, and reviews",
			has_parameters=True,
			complexity="medium",
			user_actions=["View images", "Read reviews", "Add to cart", "Share product"],
			entry_points=["Product list", "Search results", "Direct link"],
		),
		_page(
			"login", "Login", "/login", "LoginPage",
			[
				_connection("dashboard", "Successful login", "redirect", "valid credentials"),
				_connection("signup", "Create account link"),
			],
			title="User Login",
			description="Authentication form for existing users",
			has_auth=True,
			complexity="medium",
			user_actions=["Enter credentials", "Remember me", "Forgot password"],
			entry_points=["Header link", "Protected page redirect", "Checkout flow"],
		),
		_page(
			"signup", "Sign Up", "/signup", "SignUpPage",
			[
				_connection("dashboard", "Account created", "redirect", "valid form"),
				_connection("login", "Already have account link"),
			],
			title="Create Account",
			description="Registration form for new users",
			has_auth=True,
			complexity="high",
			user_actions=["Fill form", "Verify email", "Accept terms"],
			entry_points=["Home page CTA", "Login page", "Checkout flow"],
		),
		_page(
			"dashboard", "Dashboard", "/dashboard", "DashboardPage",
			[
				_connection("order-success", "Order history"),
				_connection("products", "Continue shopping"),
			],
			title="User Dashboard",
			description="Personalized user area with account overview",
			has_auth=True,
			is_protected=True,
			complexity="medium",
			user_actions=["View orders", "Update profile", "Manage preferences"],
			entry_points=["Login redirect", "Header link (authenticated)"],
		),
		_page(
			"cart", "Shopping Cart", "/cart", "CartPage",
			[
				_connection("checkout", "Proceed to checkout"),
				_connection("products", "Continue shopping"),
				_connection("login", "Checkout", "conditional", "not authenticated"),
			],
			title="Shopping Cart",
			description="Review items before checkout",
			complexity="medium",
			user_actions=["Update quantities", "Remove items", "Apply coupons"],
			entry_points=["Add to cart action", "Header cart icon"],
		),
		_page(
			"checkout", "Checkout", "/checkout", "CheckoutPage",
			[
				_connection("order-success", "Payment success", "redirect", "payment processed"),
				_connection("cart", "Back to cart"),
			],
			title="Checkout",
			description="Payment and shipping information form",
			has_auth=True,
			is_protected=True,
			complexity="high",
			user_actions=["Enter shipping", "Select payment", "Review order"],
			entry_points=["Cart page", "Buy now button"],
		),
		_page(
			"order-success", "Order Success", "/order/success", "OrderSuccessPage",
			[
				_connection("dashboard", "View order details"),
				_connection("products", "Continue shopping"),
			],
			title="Order Confirmation",
			description="Success page after completed purchase",
			has_auth=True,
			has_parameters=True,
			is_protected=True,
			complexity="low",
			user_actions=["View order details", "Download receipt", "Continue shopping"],
			entry_points=["Checkout completion"],
		),
	]
	check_connections(nodes)
	by_id: Dict[str, FlowNode] = {node.id: node for node in nodes}

	routes = [
		RouteEntry(
			path=node.route_path,
			component_name=node.source_path.rsplit("/", 1)[-1][: -len(".tsx")],
			source_path=node.source_path,
			guards=["auth"] if node.metadata.is_protected else None,
			params=["id"] if ":id" in node.route_path else None,
		)
		for node in nodes
	]

	def steps(*ids: str) -> List[FlowNode]:
		return [by_id[node_id].model_copy(deep=True) for node_id in ids]

	journeys = [
		UserJourney(
			id="guest-purchase",
			name="Guest Purchase Flow",
			description="New visitor discovers and purchases a product",
			steps=steps("home", "products", "product-detail", "cart", "checkout", "order-success"),
			start_node_id="home",
			end_node_id="order-success",
			user_type="guest",
		),
		UserJourney(
			id="returning-user",
			name="Returning User Journey",
			description="Authenticated user browses and makes repeat purchase",
			steps=steps("dashboard", "products", "cart", "checkout", "order-success"),
			start_node_id="dashboard",
			end_node_id="order-success",
			user_type="authenticated",
		),
	]

	return AnalysisResult(
		repo_url="https://github.com/demo/react-ecommerce",
		repo_name="react-ecommerce",
		nodes=nodes,
		routes=routes,
		journeys=journeys,
		total_files_seen=45,
		files_successfully_analyzed=12,
		timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
	)


DEMO_ANALYSIS = _build_demo_analysis()


class FallbackProvider:
	"""Hands out copies of a fixed dataset stamped with the failed request."""

	def __init__(self, dataset: AnalysisResult = DEMO_ANALYSIS):
		self.dataset = dataset

	def provide(self, repo_url: str, repo_name: str, error: Exception) -> AnalysisResult:
		nodes = [node.model_copy(deep=True) for node in self.dataset.nodes]
		if nodes:
			first = nodes[0]
			description = f"{DEMO_MARKER}: {error}. Showing demo analysis instead. {first.metadata.description}"
			nodes[0] = first.model_copy(update={"metadata": first.metadata.model_copy(update={"description": description})})

		return self.dataset.model_copy(
			update={
				"repo_url": repo_url,
				"repo_name": repo_name,
				"nodes": nodes,
				"timestamp": datetime.now(timezone.utc),
			},
			deep=True,
		)


def is_demo_result(result: AnalysisResult) -> bool:
	return bool(result.nodes) and result.nodes[0].metadata.description.startswith(DEMO_MARKER)

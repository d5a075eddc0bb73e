from textwrap import dedent

import pytest

from flowscope.classify import RegexClassificationStrategy, is_candidate


strategy = RegexClassificationStrategy()


@pytest.mark.parametrize(
	"path,expected",
	[
		("src/pages/Home.tsx", True),
		("src/components/Button.jsx", True),
		("src/App.js", True),
		("src/styles/app.css", False),
		("src/pages/Home.test.tsx", False),
		("src/components/Button.spec.jsx", False),
		("src/__tests__/Home.tsx", False),
		("vite.config.ts", False),
		("src/types/global.d.ts", False),
	],
)
def test_is_candidate(path, expected):
	assert is_candidate(path) is expected


def test_find_declarations_functions_and_arrows():
	text = dedent(
		"""
		import React from 'react'

		export default function HomePage() {
		  return (
			<div>Home</div>
		  )
		}

		export const Sidebar: React.FC<Props> = ({ items }) => {
		  const open = true
		  return (
			<aside />
		  )
		}

		export function formatPrice(value) {
		  return value.toFixed(2)
		}
		"""
	)
	names = [(d.name, d.index) for d in strategy.find_declarations(text)]
	assert names == [("HomePage", 0), ("Sidebar", 1)]


def test_find_declarations_none_without_markup():
	assert strategy.find_declarations("export const API_URL = '/api'\n") == []


@pytest.mark.parametrize(
	"name,path,expected",
	[
		("HomePage", "src/components/HomePage.tsx", "page"),
		("Anything", "src/pages/anything.tsx", "page"),
		("Settings", "src/screens/Settings.tsx", "page"),
		("Button", "src/components/Button.tsx", "component"),
		("MainLayout", "src/components/MainLayout.tsx", "layout"),
		("PageWrapper", "src/components/PageWrapper.tsx", "layout"),
		("ConfirmDialog", "src/components/ConfirmDialog.tsx", "modal"),
		("LoginRedirect", "src/components/LoginRedirect.tsx", "redirect"),
	],
)
def test_classify_keyword_rules(name, path, expected):
	assert strategy.classify(name, path, "") == expected


def test_classify_tie_break_prefers_structural_roles():
	# Matches both the page and the layout/modal/redirect rules.
	assert strategy.classify("PageLayout", "src/pages/PageLayout.tsx", "") == "layout"
	assert strategy.classify("ModalRedirect", "src/pages/x.tsx", "") == "modal"
	assert strategy.classify("RedirectPage", "src/pages/x.tsx", "") == "redirect"


def test_classify_page_by_router_hook_and_title():
	text = "const nav = useNavigate()\nuseEffect(() => { document.title = 'Orders' })"
	assert strategy.classify("Orders", "src/components/Orders.tsx", text) == "page"
	assert strategy.classify("Orders", "src/components/Orders.tsx", "useNavigate()") == "component"

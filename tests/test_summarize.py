from flowscope.errors import HostError
from flowscope.fallback import DEMO_ANALYSIS, FallbackProvider
from flowscope.summarize import summarize_result


def test_summary_of_demo_dataset():
	text = summarize_result(DEMO_ANALYSIS)
	assert text.startswith("Repository react-ecommerce")
	assert "9 nodes" in text
	assert "Journey Guest Purchase Flow (guest): Home -> Products" in text
	assert "-> Dashboard via Successful login (redirect) [valid credentials]" in text
	assert "[demo data]" not in text.splitlines()[0]


def test_summary_flags_fallback_results():
	result = FallbackProvider().provide("https://github.com/a/b", "b", HostError(503))
	assert summarize_result(result).splitlines()[0].endswith("[demo data]")

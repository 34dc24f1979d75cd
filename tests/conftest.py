"""Shared fixtures for sankeyview tests."""

import pytest

from sankeyview import BridgeTransport, LibrarySources, SankeyData

try:
    import playwright  # noqa: F401
    HAS_PLAYWRIGHT = True
except ImportError:
    HAS_PLAYWRIGHT = False


# Stand-in library sources so documents never depend on vendored files or the network.
STUB_LIBRARY = LibrarySources.inline("/* d3 stub */", "/* d3-sankey stub */")


BUDGET_PAYLOAD = {
    "nodes": [
        {"id": "salary", "label": "Salary", "hex": {"light": "#16a34a", "dark": "#4ade80"}},
        {"id": "bonus", "label": "Bonus"},
        {"id": "budget", "label": "Budget", "hex": {"light": "#2563eb", "dark": "#60a5fa"}},
        {"id": "rent", "label": "Rent", "hex": {"light": "#dc2626", "dark": "#f87171"}},
        {"id": "savings"},
    ],
    "links": [
        {"source": "salary", "target": "budget", "value": 4000},
        {"source": "bonus", "target": "budget", "value": 500, "hex": {"light": "#eab308", "dark": "#facc15"}},
        {"source": "budget", "target": "rent", "value": 1500},
        {"source": "budget", "target": "savings", "value": 3000},
    ],
}


@pytest.fixture
def budget_data():
    return SankeyData.from_dict(BUDGET_PAYLOAD)


@pytest.fixture
def stub_library():
    return STUB_LIBRARY


class FakeSurface:
    """Records what a view does to its surface."""

    def __init__(self, transport=BridgeTransport.WEBKIT):
        self.transport = transport
        self.loads = []
        self.handlers = {}

    def load_html(self, html):
        self.loads.append(html)

    def add_message_handler(self, name, receiver):
        self.handlers[name] = receiver

    def handler_for(self, name):
        return self.handlers.get(name)


@pytest.fixture
def fake_surface():
    return FakeSurface()


@pytest.fixture(scope="session")
def _playwright_instance():
    """Shared Playwright instance for the test session."""
    if not HAS_PLAYWRIGHT:
        pytest.skip("playwright not installed")

    from playwright.sync_api import sync_playwright
    with sync_playwright() as p:
        yield p


@pytest.fixture(scope="session")
def _browser(_playwright_instance):
    """Shared browser instance for the test session."""
    try:
        browser = _playwright_instance.chromium.launch(headless=True)
    except Exception as e:  # browser binaries not installed
        pytest.skip(f"chromium unavailable: {e}")
    yield browser
    browser.close()


@pytest.fixture
def page(_browser):
    """Create a Playwright page for testing."""
    page = _browser.new_page(viewport={"width": 800, "height": 500})
    yield page
    page.close()

"""
Fixtures for end-to-end tests against headless Chromium.

Pages are served from a routed origin so cookies and storage behave as on a
real site. Tests skip when Playwright's Chromium cannot be launched.
"""

import pytest
import pytest_asyncio

from domhand.browser.session import PageSession
from domhand.browser.types import async_playwright
from domhand.config import EngineSettings

ORIGIN = 'https://domhand.test'


@pytest_asyncio.fixture
async def browser():
    playwright = await async_playwright().start()
    try:
        chromium = await playwright.chromium.launch(headless=True)
    except Exception as e:
        await playwright.stop()
        pytest.skip(f'Chromium not available for e2e tests: {type(e).__name__}')
    try:
        yield chromium
    finally:
        await chromium.close()
        await playwright.stop()


@pytest.fixture
def served() -> dict[str, str]:
    return {}


@pytest_asyncio.fixture
async def page(browser, served):
    page = await browser.new_page()

    async def fulfill(route):
        path = route.request.url[len(ORIGIN):] or '/'
        await route.fulfill(status=200, content_type='text/html', body=served.get(path, '<html><body></body></html>'))

    await page.route(f'{ORIGIN}/**', fulfill)
    yield page
    await page.close()


@pytest.fixture
def session(page):
    return PageSession(page, EngineSettings(human_pacing=False, pacing_seed=5))


@pytest.fixture
def open_html(page, served):
    async def _open(html: str, path: str = '/') -> None:
        served[path] = html
        await page.goto(f'{ORIGIN}{path}')

    return _open

# centralize imports for browser typing

from playwright.async_api import ElementHandle, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

__all__ = [
	'ElementHandle',
	'Page',
	'PlaywrightError',
	'async_playwright',
]

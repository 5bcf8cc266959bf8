from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from domhand.browser.bridge import PlaywrightBridge
from domhand.browser.types import Page, async_playwright
from domhand.config import EngineSettings
from domhand.controller.service import Controller
from domhand.dom.service import DomService
from domhand.interaction.pacing import PacingEngine
from domhand.interaction.service import InteractionService
from domhand.interaction.targets import TargetResolver

logger = logging.getLogger(__name__)


class PageSession:
	"""
	One engine bound to one Playwright page.

	Wires the bridge, the DOM and interaction services and the command
	controller together; `handle()` is the single entry point for messages.
	"""

	def __init__(self, page: Page, settings: EngineSettings | None = None, exclude_actions: list[str] | None = None):
		self.page = page
		self.settings = settings or EngineSettings()
		self.bridge = PlaywrightBridge(page)
		self.pacing = PacingEngine(enabled=self.settings.human_pacing, run_seed=self.settings.pacing_seed)
		self.dom = DomService(self.bridge, self.settings)
		self.interaction = InteractionService(
			self.bridge,
			resolver=TargetResolver(self.bridge),
			pacing=self.pacing,
			settings=self.settings,
		)
		self.controller = Controller(self.bridge, self.dom, self.interaction, self.settings, exclude_actions)
		logger.debug(f'🔗 PageSession ready (pacing={"on" if self.pacing.enabled else "off"}, seed={self.pacing.run_seed})')

	def __repr__(self) -> str:
		return f'PageSession(url={self.page.url!r})'

	async def handle(self, message: dict[str, Any]) -> dict[str, Any]:
		return await self.controller.dispatch(message)

	@classmethod
	@asynccontextmanager
	async def launch(
		cls,
		url: str | None = None,
		headless: bool = True,
		settings: EngineSettings | None = None,
		**launch_kwargs: Any,
	) -> AsyncIterator[PageSession]:
		"""Start Chromium, open one page (optionally at `url`) and yield a session for it.

		The browser is closed when the block exits.
		"""
		async with async_playwright() as playwright:
			browser = await playwright.chromium.launch(headless=headless, **launch_kwargs)
			try:
				page = await browser.new_page()
				if url:
					await page.goto(url)
				logger.info(f'🌎 Launched Chromium (headless={headless}){f" at {url}" if url else ""}')
				yield cls(page, settings)
			finally:
				await browser.close()
				logger.debug('🛑 Chromium closed')

"""
The seam between the Python core and a live page.

`PageBridge` is the whole surface the services use; `PlaywrightBridge`
implements it with one in-page script (or one Playwright call) per method.
Element references are opaque to the services.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import uuid
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, AsyncIterator, Protocol

from domhand.browser import scripts
from domhand.browser.types import ElementHandle, Page, PlaywrightError

logger = logging.getLogger(__name__)


class MutationFeed:
	"""Change notifications for one subscription.

	`notify()` may fire any number of times between two `next()` calls; they
	coalesce into a single wake-up.
	"""

	def __init__(self) -> None:
		self._event = asyncio.Event()
		self.notifications = 0
		self.closed = False

	def notify(self) -> None:
		if self.closed:
			return
		self.notifications += 1
		self._event.set()

	async def next(self) -> None:
		await self._event.wait()
		self._event.clear()

	def close(self) -> None:
		self.closed = True


class PageBridge(Protocol):
	async def document_token(self) -> str: ...

	async def page_info(self) -> dict[str, Any]: ...

	async def probe_slice(self, selector: str, offset: int, count: int) -> dict[str, Any]:
		"""Facts for matches `offset` to `offset + count` of `selector`, as `{total, facts}`."""
		...

	async def query_all(self, selector: str, root: Any | None = None) -> list[Any]: ...

	async def query_one(self, selector: str) -> Any | None: ...

	async def query_xpath(self, expression: str) -> Any | None: ...

	async def probe(self, element: Any) -> dict[str, Any]: ...

	async def probe_many(self, elements: list[Any]) -> list[dict[str, Any]]: ...

	async def capture_tree(self, max_depth: int) -> dict[str, Any] | None: ...

	async def ensure_stylesheet(self, style_id: str, css: str) -> bool: ...

	async def set_attribute(self, element: Any, name: str, value: str) -> None: ...

	async def remove_attribute(self, element: Any, name: str) -> None: ...

	async def scroll_into_view(self, element: Any, behavior: str) -> None: ...

	async def dispatch(self, element: Any, event_type: str, event_init: dict[str, Any] | None = None) -> None: ...

	async def focus(self, element: Any) -> None: ...

	async def clear_value(self, element: Any) -> None: ...

	async def clear_text(self, element: Any) -> None: ...

	async def append_value(self, element: Any, char: str) -> None: ...

	async def insert_text(self, element: Any, char: str) -> None: ...

	async def select_option(self, element: Any, wanted: str) -> bool: ...

	async def scroll_by(self, x: float, y: float, behavior: str) -> None: ...

	async def scroll_position(self) -> dict[str, float]: ...

	async def evaluate(self, expression: str) -> Any: ...

	async def read_storage(self, area: str) -> dict[str, str]: ...

	async def read_cookie(self) -> str: ...

	def watch_mutations(self) -> AbstractAsyncContextManager[MutationFeed]: ...


class PlaywrightBridge:
	"""PageBridge over a Playwright `Page`.

	Several bridges may share a page: each one exposes its mutation callback
	under its own name.
	"""

	def __init__(self, page: Page):
		self.page = page
		self.binding_name = f'{scripts.MUTATION_BINDING_PREFIX}{secrets.token_hex(4)}'
		self._feeds: dict[str, MutationFeed] = {}
		self._binding_ready = False

	async def document_token(self) -> str:
		return await self.page.evaluate(scripts.DOCUMENT_TOKEN)

	async def page_info(self) -> dict[str, Any]:
		return await self.page.evaluate(scripts.PAGE_INFO)

	async def probe_slice(self, selector: str, offset: int, count: int) -> dict[str, Any]:
		return await self.page.evaluate(scripts.PROBE_SLICE, [selector, offset, count])

	async def query_all(self, selector: str, root: ElementHandle | None = None) -> list[ElementHandle]:
		scope = root if root is not None else self.page
		return await scope.query_selector_all(selector)

	async def query_one(self, selector: str) -> ElementHandle | None:
		return await self.page.query_selector(selector)

	async def query_xpath(self, expression: str) -> ElementHandle | None:
		return await self.page.query_selector(f'xpath={expression}')

	async def probe(self, element: ElementHandle) -> dict[str, Any]:
		return await element.evaluate(scripts.PROBE_ELEMENT)

	async def probe_many(self, elements: list[ElementHandle]) -> list[dict[str, Any]]:
		if not elements:
			return []
		return await self.page.evaluate(scripts.PROBE_ELEMENTS, elements)

	async def capture_tree(self, max_depth: int) -> dict[str, Any] | None:
		return await self.page.evaluate(scripts.CAPTURE_TREE, max_depth)

	async def ensure_stylesheet(self, style_id: str, css: str) -> bool:
		return await self.page.evaluate(scripts.ENSURE_STYLESHEET, [style_id, css])

	async def set_attribute(self, element: ElementHandle, name: str, value: str) -> None:
		await element.evaluate(scripts.SET_ATTRIBUTE, [name, value])

	async def remove_attribute(self, element: ElementHandle, name: str) -> None:
		await element.evaluate(scripts.REMOVE_ATTRIBUTE, name)

	async def scroll_into_view(self, element: ElementHandle, behavior: str) -> None:
		await element.evaluate(scripts.SCROLL_INTO_VIEW, behavior)

	async def dispatch(self, element: ElementHandle, event_type: str, event_init: dict[str, Any] | None = None) -> None:
		await element.dispatch_event(event_type, event_init or {})

	async def focus(self, element: ElementHandle) -> None:
		await element.focus()

	async def clear_value(self, element: ElementHandle) -> None:
		await element.evaluate(scripts.CLEAR_VALUE)

	async def clear_text(self, element: ElementHandle) -> None:
		await element.evaluate(scripts.CLEAR_TEXT)

	async def append_value(self, element: ElementHandle, char: str) -> None:
		await element.evaluate(scripts.APPEND_VALUE, char)

	async def insert_text(self, element: ElementHandle, char: str) -> None:
		await element.evaluate(scripts.INSERT_AT_CARET, char)

	async def select_option(self, element: ElementHandle, wanted: str) -> bool:
		return await element.evaluate(scripts.SELECT_OPTION, wanted)

	async def scroll_by(self, x: float, y: float, behavior: str) -> None:
		await self.page.evaluate(scripts.SCROLL_BY, [x, y, behavior])

	async def scroll_position(self) -> dict[str, float]:
		return await self.page.evaluate(scripts.SCROLL_POSITION)

	async def evaluate(self, expression: str) -> Any:
		return await self.page.evaluate(scripts.EVALUATE_EXPRESSION, expression)

	async def read_storage(self, area: str) -> dict[str, str]:
		return await self.page.evaluate(scripts.READ_STORAGE, area)

	async def read_cookie(self) -> str:
		return await self.page.evaluate(scripts.READ_COOKIE)

	def _on_mutation(self, source: Any, token: str) -> None:
		feed = self._feeds.get(token)
		if feed is not None:
			feed.notify()

	async def _ensure_binding(self) -> None:
		if self._binding_ready:
			return
		# bindings survive navigation, so once per bridge is enough
		await self.page.expose_binding(self.binding_name, self._on_mutation)
		self._binding_ready = True

	@asynccontextmanager
	async def watch_mutations(self) -> AsyncIterator[MutationFeed]:
		await self._ensure_binding()
		token = uuid.uuid4().hex
		feed = MutationFeed()
		self._feeds[token] = feed
		try:
			await self.page.evaluate(scripts.OBSERVE_MUTATIONS, [self.binding_name, token])
			yield feed
		finally:
			self._feeds.pop(token, None)
			feed.close()
			try:
				await self.page.evaluate(scripts.DISCONNECT_MUTATIONS, token)
			except PlaywrightError as e:
				# the observer went away with its document
				logger.debug(f'Mutation observer {token[:8]} already gone: {type(e).__name__}: {e}')

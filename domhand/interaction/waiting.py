import asyncio
import contextlib
import logging

from domhand.browser.bridge import MutationFeed, PageBridge
from domhand.exceptions import WaitTimeout
from domhand.timing import Deadline

logger = logging.getLogger(__name__)

# a navigation replaces the observed document, so the feed goes quiet; poll as a backstop
RECHECK_INTERVAL_S = 0.5


async def _until_present(bridge: PageBridge, selector: str, feed: MutationFeed) -> None:
	while await bridge.query_one(selector) is None:
		with contextlib.suppress(asyncio.TimeoutError):
			await asyncio.wait_for(feed.next(), timeout=RECHECK_INTERVAL_S)


async def wait_for_selector(bridge: PageBridge, selector: str, timeout_ms: int) -> int:
	"""Wait until `selector` matches an element. Returns the milliseconds waited.

	Raises WaitTimeout once `timeout_ms` passes without a match. The mutation
	subscription is released on both paths.
	"""
	deadline = Deadline(timeout_ms)
	if await bridge.query_one(selector) is not None:
		return 0

	async with bridge.watch_mutations() as feed:
		try:
			# checks once more before the first wake-up: the node may have landed while subscribing
			await asyncio.wait_for(_until_present(bridge, selector, feed), timeout=deadline.remaining())
		except asyncio.TimeoutError:
			logger.debug(f'⏳ "{selector}" absent after {feed.notifications} mutation notifications')
			raise WaitTimeout(f'Timed out after {timeout_ms}ms waiting for "{selector}"', timeout_ms) from None

	elapsed = deadline.elapsed_ms()
	logger.debug(f'⏳ "{selector}" appeared after {elapsed}ms')
	return elapsed

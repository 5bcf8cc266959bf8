import logging
from typing import Any, Callable

from domhand.browser.bridge import PageBridge
from domhand.config import EngineSettings
from domhand.dom.accessibility import build_accessibility_tree, count_nodes
from domhand.dom.classification import MARK_CANDIDATE_SELECTOR, is_mark_candidate, is_visible
from domhand.dom.descriptor import describe
from domhand.dom.marks import SetOfMarkLabeler
from domhand.dom.views import (
	AccessibilityNode,
	DocumentState,
	DomSnapshot,
	ElementDescriptor,
	ElementFacts,
	MarkRegistry,
	RawNode,
)
from domhand.utils import time_execution_async

# facts are pulled from the page in slices of at most this many elements
PROBE_CHUNK = 100
# smallest slice requested while a filter may drop elements
MIN_FILTERED_CHUNK = 25


class DomService:
	"""
	Read side of the engine: snapshots, element search, accessibility tree,
	and Set-of-Mark labelling.

	Owns the per-document state. The state is rebuilt whenever the page
	reports a new document token, which drops the mark registry of the
	previous document.
	"""

	logger: logging.Logger

	def __init__(self, bridge: PageBridge, settings: EngineSettings | None = None, logger: logging.Logger | None = None):
		self.bridge = bridge
		self.settings = settings or EngineSettings()
		self.logger = logger or logging.getLogger(__name__)
		self.labeler = SetOfMarkLabeler(bridge)
		self._document: DocumentState | None = None

	@property
	def registry(self) -> MarkRegistry | None:
		return self._document.registry if self._document else None

	async def document_state(self) -> DocumentState:
		token = await self.bridge.document_token()
		if self._document is None or self._document.token != token:
			if self._document is not None:
				self.logger.debug(f'Document replaced ({self._document.token} -> {token}), discarding marks')
				if self._document.registry is not None:
					self._document.registry.invalidate()
			self._document = DocumentState(token=token)
		return self._document

	async def _scan(
		self,
		selector: str,
		limit: int,
		keep: Callable[[ElementFacts], bool] | None = None,
	) -> tuple[int, list[ElementFacts]]:
		"""Probe matches of `selector` in document order until `limit` of them pass `keep`.

		Returns the total number of matches alongside the kept facts. Only the
		slices needed to reach `limit` ever leave the page.
		"""
		kept: list[ElementFacts] = []
		offset = 0
		while True:
			wanted = limit - len(kept)
			if wanted <= 0:
				count = 0
			elif keep is None:
				count = min(PROBE_CHUNK, wanted)
			else:
				count = min(PROBE_CHUNK, max(wanted, MIN_FILTERED_CHUNK))
			chunk = await self.bridge.probe_slice(selector, offset, count)
			total = chunk['total']
			for raw in chunk['facts']:
				facts = ElementFacts.model_validate(raw)
				if keep is None or keep(facts):
					kept.append(facts)
					if len(kept) >= limit:
						break
			offset += len(chunk['facts'])
			if len(kept) >= limit or offset >= total or not chunk['facts']:
				return total, kept

	@time_execution_async('--get_dom_snapshot')
	async def get_snapshot(self, max_elements: int | None = None, include_hidden: bool = False) -> DomSnapshot:
		limit = self.settings.max_elements if max_elements is None else max_elements
		info = await self.bridge.page_info()
		total, relevant = await self._scan('*', limit, None if include_hidden else is_visible)

		self.logger.debug(f'📸 Snapshot captured {len(relevant)}/{total} elements')
		return DomSnapshot(
			url=info.get('url', ''),
			title=info.get('title', ''),
			element_count=total,
			captured=len(relevant),
			elements=[describe(facts) for facts in relevant],
		)

	@time_execution_async('--find_elements')
	async def find_elements(self, selector: str | None = None, limit: int | None = None) -> list[ElementDescriptor]:
		"""Descriptors for every match of `selector`, or for the visible mark candidates when no selector is given."""
		limit = self.settings.find_limit if limit is None else limit
		if selector:
			_, facts = await self._scan(selector, limit)
		else:
			_, facts = await self._scan(MARK_CANDIDATE_SELECTOR, limit, lambda f: is_mark_candidate(f) and is_visible(f))
		return [describe(f) for f in facts]

	@time_execution_async('--get_accessibility_tree')
	async def get_accessibility_tree(self, max_depth: int | None = None) -> tuple[dict[str, Any], AccessibilityNode | None]:
		depth = self.settings.max_depth if max_depth is None else max_depth
		info = await self.bridge.page_info()
		raw = await self.bridge.capture_tree(depth)
		if raw is None:
			return info, None
		tree = build_accessibility_tree(RawNode.model_validate(raw), depth)
		self.logger.debug(f'🌳 Accessibility tree has {count_nodes(tree)} nodes (maxDepth={depth})')
		return info, tree

	async def apply_marks(self, root: Any | None = None) -> MarkRegistry:
		state = await self.document_state()
		return await self.labeler.apply(state, root)

	async def clear_marks(self, root: Any | None = None) -> int:
		state = await self.document_state()
		cleared = await self.labeler.clear(root)
		if state.registry is not None:
			state.registry.invalidate()
		self.logger.info(f'🧹 Cleared {cleared} Set-of-Mark labels')
		return cleared

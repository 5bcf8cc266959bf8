from __future__ import annotations

import logging
from typing import Any

from domhand.browser import scripts
from domhand.browser.bridge import PageBridge
from domhand.dom.classification import MARK_ATTR, MARK_CANDIDATE_SELECTOR, MARK_STYLE_ID, is_mark_candidate, is_visible
from domhand.dom.descriptor import describe
from domhand.dom.views import DocumentState, ElementFacts, MarkRegistry

logger = logging.getLogger(__name__)


class SetOfMarkLabeler:
	"""Numbers the visible interactive elements of a subtree, "1".."N" in document order.

	Marks live in the `data-domhand-mark` attribute; the overlay badge and
	outline come from one stylesheet keyed off that attribute, injected once
	per document.
	"""

	def __init__(self, bridge: PageBridge):
		self.bridge = bridge

	async def ensure_styles(self, state: DocumentState) -> None:
		if state.styles_injected:
			return
		injected = await self.bridge.ensure_stylesheet(MARK_STYLE_ID, scripts.MARK_STYLESHEET)
		if injected:
			logger.debug('Injected mark overlay stylesheet')
		state.styles_injected = True

	async def clear(self, root: Any | None = None) -> int:
		marked = await self.bridge.query_all(f'[{MARK_ATTR}]', root)
		for element in marked:
			await self.bridge.remove_attribute(element, MARK_ATTR)
		return len(marked)

	async def collect_candidates(self, root: Any | None = None) -> list[tuple[Any, ElementFacts]]:
		elements = await self.bridge.query_all(MARK_CANDIDATE_SELECTOR, root)
		probed = await self.bridge.probe_many(elements)
		candidates = []
		for element, raw in zip(elements, probed):
			facts = ElementFacts.model_validate(raw)
			if is_mark_candidate(facts) and is_visible(facts):
				candidates.append((element, facts))
		return candidates

	async def apply(self, state: DocumentState, root: Any | None = None) -> MarkRegistry:
		removed = await self.clear(root)
		await self.ensure_styles(state)

		registry = MarkRegistry(document_token=state.token)
		for index, (element, facts) in enumerate(await self.collect_candidates(root), start=1):
			mark = str(index)
			await self.bridge.set_attribute(element, MARK_ATTR, mark)
			registry.elements[mark] = element
			registry.descriptors[mark] = describe(facts.with_mark(mark))

		if state.registry is not None:
			state.registry.invalidate()
		state.registry = registry
		logger.info(f'🏷️ Applied {len(registry)} Set-of-Mark labels (cleared {removed})')
		return registry

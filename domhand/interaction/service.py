import logging
from typing import Any

from pydantic import ValidationError

from domhand.browser.bridge import PageBridge
from domhand.config import EngineSettings
from domhand.dom.classification import TOGGLE_INPUT_TYPES, is_toggle
from domhand.dom.descriptor import describe
from domhand.dom.views import ElementDescriptor, ElementFacts
from domhand.interaction import pacing as delays
from domhand.interaction.pacing import PacingEngine
from domhand.interaction.targets import TargetDescriptor, TargetResolver
from domhand.interaction.views import FieldResult, FormField, InteractionOptions, ScrollOptions
from domhand.utils import time_execution_async, truncate

TRUTHY_VALUES = frozenset({'true', '1'})

_BUBBLES = {'bubbles': True}


def _mouse_init(x: float, y: float, button: int = 0) -> dict[str, Any]:
	return {'bubbles': True, 'cancelable': True, 'clientX': x, 'clientY': y, 'button': button}


def _key_init(char: str) -> dict[str, Any]:
	return {'key': char, 'bubbles': True, 'cancelable': True}


def value_as_text(value: Any) -> str:
	if value is None:
		return ''
	if isinstance(value, bool):
		return 'true' if value else 'false'
	return str(value)


def wants_checked(value: Any) -> bool:
	if isinstance(value, bool):
		return value
	return isinstance(value, (str, int)) and str(value).strip().lower() in TRUTHY_VALUES


def field_target(entry: Any) -> Any:
	if isinstance(entry, FormField):
		return entry.target
	if isinstance(entry, dict):
		return entry.get('target')
	return None


def field_error(e: Exception) -> str:
	if isinstance(e, ValidationError):
		return 'Invalid form field: ' + '; '.join(error['msg'] for error in e.errors())
	return str(e)


def edit_mode(facts: ElementFacts) -> str | None:
	"""'value' for form text controls, 'caret' for editable regions, None when typing only fires events."""
	if facts.tag.upper() in ('INPUT', 'TEXTAREA'):
		return 'value'
	if facts.is_content_editable:
		return 'caret'
	return None


class InteractionService:
	"""
	Synthesizes user input against resolved targets.

	Each operation is a fixed sequence of DOM events separated by paced
	delays. Events are dispatched one at a time, in order, so page listeners
	observe the same intermediate states a real pointer or keyboard produces.
	"""

	def __init__(
		self,
		bridge: PageBridge,
		resolver: TargetResolver | None = None,
		pacing: PacingEngine | None = None,
		settings: EngineSettings | None = None,
		logger: logging.Logger | None = None,
	):
		settings = settings or EngineSettings()
		self.bridge = bridge
		self.resolver = resolver or TargetResolver(bridge)
		self.pacing = pacing or PacingEngine(enabled=settings.human_pacing, run_seed=settings.pacing_seed)
		self.logger = logger or logging.getLogger(__name__)

	async def _describe(self, element: Any) -> ElementDescriptor:
		return describe(ElementFacts.model_validate(await self.bridge.probe(element)))

	@time_execution_async('--click')
	async def click(self, target: TargetDescriptor | dict[str, Any], options: InteractionOptions | None = None) -> ElementDescriptor:
		options = options or InteractionOptions()
		target = TargetDescriptor.parse(target)
		element = await self.resolver.resolve(target)
		bridge = self.bridge

		await bridge.scroll_into_view(element, 'smooth')
		await self.pacing.pause(delays.CLICK_SETTLE)

		# geometry is read after scrolling so the pointer lands where the element now is
		facts = ElementFacts.model_validate(await bridge.probe(element))
		cx, cy = facts.rect.center
		x, y = cx + self.pacing.jitter(), cy + self.pacing.jitter()

		await bridge.dispatch(element, 'mousemove', _mouse_init(x, y))
		await self.pacing.pause(delays.POINTER_MOVE)
		await bridge.dispatch(element, 'mouseenter', _mouse_init(x, y))

		await bridge.dispatch(element, 'mousedown', _mouse_init(x, y))
		await self.pacing.pause(delays.PRESS_HOLD)
		await bridge.dispatch(element, 'mouseup', _mouse_init(x, y))
		await bridge.dispatch(element, 'click', _mouse_init(x, y))

		if options.right_click:
			await bridge.dispatch(element, 'contextmenu', _mouse_init(x, y, button=2))

		self.logger.info(f'🖱️ Clicked {target}{" (with context menu)" if options.right_click else ""}')
		return await self._describe(element)

	@time_execution_async('--type_text')
	async def type_text(
		self, target: TargetDescriptor | dict[str, Any], text: str, options: InteractionOptions | None = None
	) -> ElementDescriptor:
		options = options or InteractionOptions()
		target = TargetDescriptor.parse(target)
		element = await self.resolver.resolve(target)
		bridge = self.bridge

		await bridge.scroll_into_view(element, 'smooth')
		await self.pacing.pause(delays.TYPE_SETTLE)
		await bridge.focus(element)
		await self.pacing.pause(delays.FOCUS_SETTLE)

		mode = edit_mode(ElementFacts.model_validate(await bridge.probe(element)))
		if mode is None:
			self.logger.debug(f'{target} is not editable, dispatching key events only')

		if options.clear_first:
			if mode == 'caret':
				await bridge.clear_text(element)
			else:
				await bridge.clear_value(element)
			await bridge.dispatch(element, 'input', _BUBBLES)

		for char in text:
			await bridge.dispatch(element, 'keydown', _key_init(char))
			await bridge.dispatch(element, 'keypress', _key_init(char))
			if mode == 'value':
				await bridge.append_value(element, char)
			elif mode == 'caret':
				await bridge.insert_text(element, char)
			await bridge.dispatch(element, 'keyup', _key_init(char))
			await bridge.dispatch(element, 'input', _BUBBLES)
			if options.human_delay:
				await self.pacing.pause(delays.KEYSTROKE)

		await bridge.dispatch(element, 'change', _BUBBLES)

		self.logger.info(f'⌨️ Typed "{truncate(text)}" into {target}')
		return await self._describe(element)

	@time_execution_async('--scroll')
	async def scroll(self, options: ScrollOptions | None = None) -> dict[str, float]:
		options = options or ScrollOptions()
		if options.selector:
			element = await self.bridge.query_one(options.selector)
			if element is None:
				self.logger.warning(f'Scroll target "{options.selector}" not found, position unchanged')
			else:
				await self.bridge.scroll_into_view(element, options.behavior)
		else:
			await self.bridge.scroll_by(options.x, options.y, options.behavior)

		await self.pacing.pause(delays.SCROLL_SETTLE)
		position = await self.bridge.scroll_position()
		self.logger.debug(f'🔍 Scrolled to ({position["x"]}, {position["y"]})')
		return {'scrollX': position['x'], 'scrollY': position['y']}

	async def _fill_field(self, field: FormField) -> None:
		target = TargetDescriptor.parse(field.target)
		element = await self.resolver.resolve(target)
		facts = ElementFacts.model_validate(await self.bridge.probe(element))
		kind = (field.kind or '').strip().lower()

		if kind == 'select':
			wanted = value_as_text(field.value)
			await self.bridge.focus(element)
			if await self.bridge.select_option(element, wanted):
				await self.bridge.dispatch(element, 'change', _BUBBLES)
			else:
				self.logger.debug(f'No option matching "{wanted}" in {target}, selection unchanged')
		elif kind in TOGGLE_INPUT_TYPES or is_toggle(facts):
			desired = wants_checked(field.value)
			if bool(facts.checked) != desired:
				await self.click(target)
		else:
			await self.type_text(target, value_as_text(field.value), InteractionOptions(clear_first=True))

	@time_execution_async('--fill_form')
	async def fill_form(self, fields: list[Any]) -> list[FieldResult]:
		"""Fill fields in order. A failing field is reported in its own result and never stops the batch.

		Entries may be `FormField`s or raw dicts; an entry that is not a field object fails on its own.
		"""
		results: list[FieldResult] = []
		for entry in fields:
			target = field_target(entry)
			try:
				field = entry if isinstance(entry, FormField) else FormField.model_validate(entry)
				await self._fill_field(field)
			except Exception as e:
				self.logger.warning(f'⚠️ Form field {target!r} failed: {type(e).__name__}: {e}')
				results.append(FieldResult(target=target, ok=False, error=field_error(e)))
			else:
				results.append(FieldResult(target=target, ok=True))

		failed = sum(1 for result in results if not result.ok)
		self.logger.info(f'📝 Filled form: {len(results) - failed}/{len(results)} fields ok')
		return results

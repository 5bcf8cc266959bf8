import logging
from typing import Any
from urllib.parse import unquote

from pydantic import ValidationError

from domhand import __version__
from domhand.browser.bridge import PageBridge
from domhand.config import EngineSettings
from domhand.controller.registry import Registry
from domhand.controller.views import (
	ClickElementParams,
	EvaluateScriptParams,
	FillFormParams,
	FindElementsParams,
	GetAccessibilityTreeParams,
	GetDomSnapshotParams,
	GetStorageParams,
	NoParams,
	ScrollParams,
	SetLogLevelParams,
	TypeInElementParams,
	WaitForSelectorParams,
)
from domhand.dom.service import DomService
from domhand.exceptions import DomHandError, WaitTimeout
from domhand.interaction.service import InteractionService
from domhand.interaction.waiting import wait_for_selector
from domhand.logging_config import set_log_level

logger = logging.getLogger(__name__)


def parse_cookies(raw: str) -> dict[str, str]:
	"""`document.cookie` -> name/value pairs, URL-decoding values that decode cleanly."""
	data: dict[str, str] = {}
	for part in raw.split(';'):
		name, _, value = part.strip().partition('=')
		if not name:
			continue
		try:
			data[name] = unquote(value, errors='strict')
		except UnicodeDecodeError:
			data[name] = value
	return data


def _validation_summary(error: ValidationError) -> str:
	parts = []
	for detail in error.errors():
		location = '.'.join(str(p) for p in detail['loc']) or 'params'
		parts.append(f'{location}: {detail["msg"]}')
	return '; '.join(parts)


def failure(error: str, error_type: str, **extra: Any) -> dict[str, Any]:
	return {'ok': False, 'error': error, 'errorType': error_type, **extra}


class Controller:
	"""
	Maps `{type, ...params}` messages to engine operations.

	`dispatch` never raises: every outcome is a dict with `ok` set, and
	failures carry `error` and `errorType`.
	"""

	def __init__(
		self,
		bridge: PageBridge,
		dom: DomService,
		interaction: InteractionService,
		settings: EngineSettings | None = None,
		exclude_actions: list[str] | None = None,
	):
		self.bridge = bridge
		self.dom = dom
		self.interaction = interaction
		self.settings = settings or EngineSettings()
		self.registry = Registry(exclude_actions)

		# Read-side commands
		@self.registry.action('GET_DOM_SNAPSHOT', param_model=GetDomSnapshotParams)
		async def get_dom_snapshot(params: GetDomSnapshotParams):
			snapshot = await self.dom.get_snapshot(
				max_elements=params.options.max_elements,
				include_hidden=params.options.include_hidden,
			)
			return snapshot.to_payload()

		@self.registry.action('GET_ACCESSIBILITY_TREE', param_model=GetAccessibilityTreeParams)
		async def get_accessibility_tree(params: GetAccessibilityTreeParams):
			info, tree = await self.dom.get_accessibility_tree(params.max_depth)
			return {
				'url': info.get('url', ''),
				'title': info.get('title', ''),
				'tree': tree.to_payload() if tree is not None else None,
			}

		@self.registry.action('APPLY_SET_OF_MARKS')
		async def apply_set_of_marks(_: NoParams):
			registry = await self.dom.apply_marks()
			return registry.to_payload()

		@self.registry.action('CLEAR_SET_OF_MARKS')
		async def clear_set_of_marks(_: NoParams):
			return {'cleared': await self.dom.clear_marks()}

		@self.registry.action('FIND_ELEMENTS', param_model=FindElementsParams)
		async def find_elements(params: FindElementsParams):
			elements = await self.dom.find_elements(params.selector, params.limit)
			return {'elements': [element.to_payload() for element in elements]}

		# Interaction commands
		@self.registry.action('CLICK_ELEMENT', param_model=ClickElementParams)
		async def click_element(params: ClickElementParams):
			element = await self.interaction.click(params.target, params.options)
			return {'element': element.to_payload()}

		@self.registry.action('TYPE_IN_ELEMENT', param_model=TypeInElementParams)
		async def type_in_element(params: TypeInElementParams):
			element = await self.interaction.type_text(params.target, params.text, params.options)
			return {'element': element.to_payload()}

		@self.registry.action('SCROLL', param_model=ScrollParams)
		async def scroll(params: ScrollParams):
			return {'position': await self.interaction.scroll(params.options)}

		@self.registry.action('FILL_FORM', param_model=FillFormParams)
		async def fill_form(params: FillFormParams):
			results = await self.interaction.fill_form(params.fields)
			return {'results': [result.to_payload() for result in results]}

		@self.registry.action('WAIT_FOR_SELECTOR', param_model=WaitForSelectorParams)
		async def wait_for(params: WaitForSelectorParams):
			timeout = self.settings.wait_timeout_ms if params.timeout is None else params.timeout
			elapsed = await wait_for_selector(self.bridge, params.selector, timeout)
			return {'timedOut': False, 'elapsedMs': elapsed}

		# Page utilities
		@self.registry.action('PING')
		async def ping(_: NoParams):
			info = await self.bridge.page_info()
			return {'url': info.get('url', ''), 'title': info.get('title', ''), 'version': __version__}

		@self.registry.action('GET_PAGE_INFO')
		async def get_page_info(_: NoParams):
			return await self.bridge.page_info()

		@self.registry.action('EVALUATE_SCRIPT', param_model=EvaluateScriptParams)
		async def evaluate_script(params: EvaluateScriptParams):
			return {'result': await self.bridge.evaluate(params.expression)}

		@self.registry.action('GET_STORAGE', param_model=GetStorageParams)
		async def get_storage(params: GetStorageParams):
			return {'data': await self.bridge.read_storage(params.area)}

		@self.registry.action('GET_COOKIES')
		async def get_cookies(_: NoParams):
			return {'data': parse_cookies(await self.bridge.read_cookie())}

		@self.registry.action('SET_LOG_LEVEL', param_model=SetLogLevelParams)
		async def set_level(params: SetLogLevelParams):
			try:
				numeric = set_log_level(params.level)
			except ValueError as e:
				raise DomHandError(str(e)) from e
			return {'level': logging.getLevelName(numeric).lower()}

	async def dispatch(self, message: Any) -> dict[str, Any]:
		command_type = message.get('type') if isinstance(message, dict) else None
		action = self.registry.get(command_type)
		if action is None:
			logger.warning(f'❓ Unknown message type: {command_type}')
			return failure(f'Unknown message type: {command_type}', 'UnknownCommand')

		try:
			params = action.param_model.model_validate({k: v for k, v in message.items() if k != 'type'})
		except ValidationError as e:
			logger.warning(f'⚠️ {command_type} rejected: {_validation_summary(e)}')
			return failure(f'Invalid params for {command_type}: {_validation_summary(e)}', 'InvalidParams')

		logger.debug(f'▶️ {command_type}')
		try:
			result = await action.function(params)
		except WaitTimeout as e:
			logger.info(f'⌛ {command_type} timed out after {e.timeout_ms}ms')
			return failure(e.message, e.error_type, timedOut=True)
		except DomHandError as e:
			logger.warning(f'❌ {command_type} failed ({e.error_type}): {e.message}')
			return failure(e.message, e.error_type)
		except Exception as e:
			logger.error(f'💥 {command_type} raised {type(e).__name__}: {e}')
			return failure(f'{type(e).__name__}: {e}', 'HandlerError')

		return {'ok': True, **result}

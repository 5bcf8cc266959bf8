from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from domhand.browser.bridge import PageBridge
from domhand.dom.classification import MARK_ATTR
from domhand.exceptions import InvalidTarget, TargetNotFound

logger = logging.getLogger(__name__)

# preference order when more than one key is set
TARGET_KINDS = ('mark', 'selector', 'xpath')


class TargetDescriptor(BaseModel):
	"""Which live element a command acts on: exactly one of mark, selector, xpath."""

	model_config = ConfigDict(extra='ignore')

	mark: str | None = None
	selector: str | None = None
	xpath: str | None = None

	@field_validator('mark', mode='before')
	@classmethod
	def _coerce_mark(cls, value: Any) -> Any:
		if isinstance(value, bool):
			raise ValueError('mark must be a string or an integer')
		if isinstance(value, int):
			return str(value)
		return value

	@property
	def kind(self) -> str | None:
		for name in TARGET_KINDS:
			if getattr(self, name):
				return name
		return None

	@classmethod
	def parse(cls, raw: Any) -> TargetDescriptor:
		if isinstance(raw, TargetDescriptor):
			target = raw
		elif isinstance(raw, dict):
			try:
				target = cls.model_validate(raw)
			except ValidationError as e:
				first = e.errors()[0]
				raise InvalidTarget(f'Malformed target {raw!r}: {first["msg"]}') from e
		elif raw is None:
			raise InvalidTarget('target is required')
		else:
			raise InvalidTarget(f'target must be an object, got {type(raw).__name__}')

		if target.kind is None:
			raise InvalidTarget('target must have mark, selector, or xpath')
		return target

	def to_payload(self) -> dict[str, Any]:
		return self.model_dump(exclude_none=True)

	def __str__(self) -> str:
		kind = self.kind
		return f'{kind}={getattr(self, kind)!r}' if kind else 'empty target'


def _css_string(value: str) -> str:
	return value.replace('\\', '\\\\').replace('"', '\\"')


def mark_selector(mark: str) -> str:
	return f'[{MARK_ATTR}="{_css_string(mark)}"]'


class TargetResolver:
	def __init__(self, bridge: PageBridge):
		self.bridge = bridge

	async def resolve(self, target: TargetDescriptor | dict[str, Any] | None) -> Any:
		"""Live element for a target descriptor.

		Raises InvalidTarget for a descriptor with no usable key and
		TargetNotFound when the chosen lookup matches nothing.
		"""
		target = TargetDescriptor.parse(target)
		kind = target.kind

		if kind == 'mark':
			element = await self.bridge.query_one(mark_selector(target.mark))  # type: ignore[arg-type]
			if element is None:
				raise TargetNotFound(f'No element with mark {target.mark}')
		elif kind == 'selector':
			element = await self.bridge.query_one(target.selector)  # type: ignore[arg-type]
			if element is None:
				raise TargetNotFound(f'No element matching "{target.selector}"')
		else:
			element = await self.bridge.query_xpath(target.xpath)  # type: ignore[arg-type]
			if element is None:
				raise TargetNotFound(f'No element at XPath "{target.xpath}"')

		logger.debug(f'🎯 Resolved {target}')
		return element

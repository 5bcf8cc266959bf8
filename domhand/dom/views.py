from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domhand.dom.classification import MARK_ATTR


class Rect(BaseModel):
	"""Bounding client rect, rounded to whole CSS pixels."""

	x: int = 0
	y: int = 0
	w: int = 0
	h: int = 0

	@property
	def center(self) -> tuple[float, float]:
		return self.x + self.w / 2, self.y + self.h / 2


class ElementFacts(BaseModel):
	"""Raw facts read from one element in a single probe of the page.

	Everything the Python side decides about an element (visibility, role,
	label, mark eligibility) is derived from these fields only.
	"""

	model_config = ConfigDict(extra='ignore')

	tag: str
	id: str | None = None
	class_name: str = ''
	attributes: dict[str, str] = Field(default_factory=dict)
	labelledby_text: str | None = None
	label_text: str | None = None
	text: str | None = None
	value: str | None = None
	checked: bool | None = None
	input_type: str | None = None
	href: str | None = None
	is_content_editable: bool = False
	rect: Rect = Field(default_factory=Rect)
	display: str = 'block'
	visibility: str = 'visible'
	opacity: str = '1'

	def attr(self, name: str) -> str | None:
		return self.attributes.get(name)

	@property
	def mark(self) -> str | None:
		return self.attributes.get(MARK_ATTR) or None

	def with_mark(self, mark: str | None) -> ElementFacts:
		attributes = dict(self.attributes)
		if mark is None:
			attributes.pop(MARK_ATTR, None)
		else:
			attributes[MARK_ATTR] = mark
		return self.model_copy(update={'attributes': attributes})


class RawNode(ElementFacts):
	children: list[RawNode] = Field(default_factory=list)


class ElementDescriptor(BaseModel):
	"""Immutable snapshot of an element's semantically relevant attributes."""

	model_config = ConfigDict(frozen=True)

	tag: str
	id: str | None = None
	classes: tuple[str, ...] = ()
	role: str | None = None
	label: str | None = None
	mark: str | None = None
	value: str | None = None
	checked: bool | None = None
	href: str | None = None
	visible: bool = False
	rect: Rect = Field(default_factory=Rect)

	def to_payload(self) -> dict[str, Any]:
		return self.model_dump(mode='json')


class AccessibilityNode(BaseModel):
	role: str
	name: str | None = None
	tag: str
	mark: str | None = None
	children: list[AccessibilityNode] = Field(default_factory=list)

	def to_payload(self) -> dict[str, Any]:
		return self.model_dump(mode='json')


class DomSnapshot(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	url: str = ''
	title: str = ''
	element_count: int = Field(0, serialization_alias='elementCount')
	captured: int = 0
	elements: list[ElementDescriptor] = Field(default_factory=list)

	def to_payload(self) -> dict[str, Any]:
		return self.model_dump(mode='json', by_alias=True)


@dataclass
class MarkRegistry:
	"""Mark string -> live element reference for one labelling pass in one document."""

	document_token: str
	elements: dict[str, Any] = field(default_factory=dict)
	descriptors: dict[str, ElementDescriptor] = field(default_factory=dict)
	valid: bool = True

	def __len__(self) -> int:
		return len(self.elements) if self.valid else 0

	def __contains__(self, mark: object) -> bool:
		return self.valid and str(mark) in self.elements

	def get(self, mark: str | int) -> Any | None:
		if not self.valid:
			return None
		return self.elements.get(str(mark))

	def invalidate(self) -> None:
		self.valid = False

	def to_payload(self) -> dict[str, Any]:
		if not self.valid:
			return {'count': 0, 'marks': {}}
		return {
			'count': len(self.elements),
			'marks': {mark: descriptor.to_payload() for mark, descriptor in self.descriptors.items()},
		}


@dataclass
class DocumentState:
	"""State that lives exactly as long as one loaded document."""

	token: str
	registry: MarkRegistry | None = None
	styles_injected: bool = False

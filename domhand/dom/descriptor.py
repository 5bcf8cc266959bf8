from __future__ import annotations

from domhand.dom.classification import IMPLICIT_ROLES, is_toggle, is_visible
from domhand.dom.views import ElementDescriptor, ElementFacts

LABEL_MAX_LENGTH = 80


def _clean(value: str | None) -> str | None:
	if value is None:
		return None
	value = value.strip()
	return value or None


def resolve_label(facts: ElementFacts) -> str | None:
	"""Accessible label by priority: aria-label, aria-labelledby, title, placeholder,
	associated <label>, own text (truncated). Empty values fall through."""
	if label := facts.attr('aria-label'):
		return label
	if labelledby := facts.attr('aria-labelledby'):
		return _clean(facts.labelledby_text) or labelledby
	for name in ('title', 'placeholder'):
		if value := facts.attr(name):
			return value
	if label_text := _clean(facts.label_text):
		return label_text
	if text := _clean(facts.text):
		return text[:LABEL_MAX_LENGTH]
	return None


def resolve_role(facts: ElementFacts) -> str | None:
	return facts.attr('role') or IMPLICIT_ROLES.get(facts.tag.upper())


def split_classes(class_name: str) -> list[str]:
	return class_name.split() if class_name else []


def describe(facts: ElementFacts) -> ElementDescriptor:
	"""Pure and total: missing attributes become None, never an exception."""
	return ElementDescriptor(
		tag=facts.tag.upper(),
		id=facts.id or None,
		classes=split_classes(facts.class_name),
		role=resolve_role(facts),
		label=resolve_label(facts),
		mark=facts.mark,
		value=facts.value,
		checked=facts.checked if is_toggle(facts) else None,
		href=facts.href or None,
		visible=is_visible(facts),
		rect=facts.rect,
	)

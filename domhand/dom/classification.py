"""
Static visibility and classification rules.

The tables are frozen: every other component consults them and none may
mutate them. Tags are compared in upper case, the way `Element.tagName`
reports them for HTML documents.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from domhand.dom.views import ElementFacts

MARK_ATTR = 'data-domhand-mark'
MARK_STYLE_ID = '__domhand_mark_styles'

# Tags that are interactive or meaningful for automation
INTERACTIVE_TAGS = frozenset(
	{
		'A',
		'BUTTON',
		'INPUT',
		'SELECT',
		'TEXTAREA',
		'LABEL',
		'DETAILS',
		'SUMMARY',
		'VIDEO',
		'AUDIO',
	}
)

# Implicit ARIA roles carried by tags without an explicit role attribute
IMPLICIT_ROLES = MappingProxyType(
	{
		'A': 'link',
		'BUTTON': 'button',
		'INPUT': 'textbox',
		'SELECT': 'combobox',
		'TEXTAREA': 'textbox',
		'FORM': 'form',
		'NAV': 'navigation',
		'MAIN': 'main',
		'HEADER': 'banner',
		'FOOTER': 'contentinfo',
		'ASIDE': 'complementary',
		'SECTION': 'region',
		'ARTICLE': 'article',
		'H1': 'heading',
		'H2': 'heading',
		'H3': 'heading',
		'H4': 'heading',
		'H5': 'heading',
		'H6': 'heading',
		'UL': 'list',
		'OL': 'list',
		'LI': 'listitem',
		'TABLE': 'table',
		'TR': 'row',
		'TH': 'columnheader',
		'TD': 'cell',
	}
)

INTERACTIVE_ROLES = frozenset({'button', 'link', 'checkbox', 'radio', 'tab', 'menuitem'})

TOGGLE_INPUT_TYPES = frozenset({'checkbox', 'radio'})

MARK_CANDIDATE_SELECTOR = ','.join(
	[
		*sorted(tag.lower() for tag in INTERACTIVE_TAGS),
		*(f'[role="{role}"]' for role in sorted(INTERACTIVE_ROLES)),
		'[contenteditable="true"]',
		'[tabindex]',
	]
)


def is_visible(facts: ElementFacts) -> bool:
	"""Geometric and computed-style visibility of one element."""
	if facts.rect.w == 0 or facts.rect.h == 0:
		return False
	if facts.visibility == 'hidden' or facts.display == 'none':
		return False
	try:
		if float(facts.opacity) == 0:
			return False
	except (TypeError, ValueError):
		pass
	return True


def is_interactive_tag(tag: str) -> bool:
	return tag.upper() in INTERACTIVE_TAGS


def is_mark_candidate(facts: ElementFacts) -> bool:
	"""Same rule as MARK_CANDIDATE_SELECTOR, evaluated on probed facts."""
	if is_interactive_tag(facts.tag):
		return True
	if facts.attr('role') in INTERACTIVE_ROLES:
		return True
	if facts.attr('contenteditable') == 'true':
		return True
	return facts.attr('tabindex') is not None


def is_toggle(facts: ElementFacts) -> bool:
	return facts.tag.upper() == 'INPUT' and (facts.input_type or '').lower() in TOGGLE_INPUT_TYPES

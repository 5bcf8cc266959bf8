"""
Accessibility tree projection.

Builds a depth-bounded, pruned, role/name annotated view of a raw page tree
captured by the bridge. Pure: the same RawNode always yields the same tree.
"""

from __future__ import annotations

from domhand.dom.classification import IMPLICIT_ROLES, is_interactive_tag, is_visible
from domhand.dom.descriptor import resolve_label
from domhand.dom.views import AccessibilityNode, RawNode

DEFAULT_MAX_DEPTH = 8


def tree_role(node: RawNode) -> str:
	"""Explicit role, then implicit table, then the lowercase tag; never None."""
	return node.attr('role') or IMPLICIT_ROLES.get(node.tag.upper()) or node.tag.lower()


def _build(node: RawNode, depth: int, max_depth: int) -> AccessibilityNode | None:
	if depth > max_depth:
		return None
	if node.attr('aria-hidden') == 'true':
		return None
	if depth > 0 and not is_visible(node):
		return None

	name = resolve_label(node)
	children = [child for child in (_build(raw, depth + 1, max_depth) for raw in node.children) if child is not None]

	# the root survives pruning unconditionally
	if depth > 0 and not name and not children and not is_interactive_tag(node.tag):
		return None

	return AccessibilityNode(
		role=tree_role(node),
		name=name,
		tag=node.tag.upper(),
		mark=node.mark,
		children=children,
	)


def build_accessibility_tree(root: RawNode, max_depth: int = DEFAULT_MAX_DEPTH) -> AccessibilityNode | None:
	if max_depth < 0:
		raise ValueError('max_depth must be >= 0')
	return _build(root, 0, max_depth)


def count_nodes(node: AccessibilityNode | None) -> int:
	if node is None:
		return 0
	return 1 + sum(count_nodes(child) for child in node.children)

"""
In-page scripts evaluated through Playwright.

The scripts only read raw facts or apply one mutation/event each; every
decision is made on the Python side. `__MARK_ATTR__` and `__TEXT_LIMIT__`
are substituted at import time.
"""

from domhand.dom.classification import MARK_ATTR

# upper bound on text sent back per element, the Python side truncates further
TEXT_LIMIT = 256

PROBED_ATTRIBUTES = [
	'role',
	'aria-label',
	'aria-labelledby',
	'aria-hidden',
	'title',
	'placeholder',
	'contenteditable',
	'tabindex',
	'type',
	MARK_ATTR,
]

_PROBE_FN = """
function probe(el) {
	const rect = el.getBoundingClientRect();
	const style = window.getComputedStyle(el);
	const attributes = {};
	for (const name of __PROBED__) {
		const value = el.getAttribute(name);
		if (value !== null) attributes[name] = value;
	}
	let labelledbyText = null;
	const labelledby = el.getAttribute('aria-labelledby');
	if (labelledby) {
		labelledbyText = labelledby.split(/\\s+/)
			.map(id => document.getElementById(id))
			.filter(Boolean)
			.map(ref => (ref.textContent || '').trim())
			.join(' ');
	}
	const label = el.labels && el.labels.length ? el.labels[0].textContent : null;
	const value = ('value' in el && el.value !== undefined && el.value !== null && typeof el.value !== 'object') ? String(el.value) : null;
	const href = typeof el.href === 'string' ? el.href : null;
	return {
		tag: el.tagName,
		id: el.id || null,
		class_name: typeof el.className === 'string' ? el.className : (el.getAttribute('class') || ''),
		attributes,
		labelledby_text: labelledbyText,
		label_text: label,
		text: (el.textContent || '').trim().slice(0, __TEXT_LIMIT__),
		value,
		checked: typeof el.checked === 'boolean' ? el.checked : null,
		input_type: typeof el.type === 'string' ? el.type : null,
		href,
		is_content_editable: !!el.isContentEditable,
		rect: { x: Math.round(rect.x), y: Math.round(rect.y), w: Math.round(rect.width), h: Math.round(rect.height) },
		display: style.display,
		visibility: style.visibility,
		opacity: style.opacity,
	};
}
"""


def _with_probe(body: str) -> str:
	return body.replace('__PROBE_FN__', _PROBE_FN)


def _render(script: str) -> str:
	return (
		script.replace('__PROBED__', repr(PROBED_ATTRIBUTES).replace("'", '"'))
		.replace('__TEXT_LIMIT__', str(TEXT_LIMIT))
		.replace('__MARK_ATTR__', MARK_ATTR)
	)


PROBE_ELEMENT = _render(_with_probe('(el) => { __PROBE_FN__ return probe(el); }'))

PROBE_ELEMENTS = _render(_with_probe('(els) => { __PROBE_FN__ return els.map(probe); }'))

PROBE_SLICE = _render(
	_with_probe("""
([selector, offset, count]) => {
	__PROBE_FN__
	const matches = document.querySelectorAll(selector);
	const end = Math.min(matches.length, offset + count);
	const facts = [];
	for (let i = offset; i < end; i++) facts.push(probe(matches[i]));
	return { total: matches.length, facts };
}
""")
)

CAPTURE_TREE = _render(
	_with_probe("""
(maxDepth) => {
	__PROBE_FN__
	function walk(el, depth) {
		const node = probe(el);
		node.children = depth < maxDepth ? Array.from(el.children).map(child => walk(child, depth + 1)) : [];
		return node;
	}
	const root = document.body || document.documentElement;
	return root ? walk(root, 0) : null;
}
""")
)

# Single checked flag per document: set on first entry, gone after navigation
DOCUMENT_TOKEN = """
() => {
	if (!window.__domhandDocument) {
		window.__domhandDocument = Date.now().toString(36) + '-' + Math.random().toString(36).slice(2, 10);
	}
	return window.__domhandDocument;
}
"""

PAGE_INFO = """
() => ({
	url: location.href,
	title: document.title,
	readyState: document.readyState,
	viewport: { w: window.innerWidth, h: window.innerHeight },
	scroll: { x: window.scrollX, y: window.scrollY },
})
"""

ENSURE_STYLESHEET = """
([styleId, css]) => {
	if (document.getElementById(styleId)) return false;
	const style = document.createElement('style');
	style.id = styleId;
	style.textContent = css;
	(document.head || document.documentElement).appendChild(style);
	return true;
}
"""

MARK_STYLESHEET = _render("""
[__MARK_ATTR__]::before {
	content: attr(__MARK_ATTR__);
	position: absolute;
	top: -8px;
	left: -2px;
	z-index: 2147483647;
	background: #1a73e8;
	color: #fff;
	font: bold 10px/14px monospace;
	padding: 1px 4px;
	border-radius: 3px;
	pointer-events: none;
	white-space: nowrap;
}
[__MARK_ATTR__] {
	position: relative;
	outline: 2px solid #1a73e8 !important;
	outline-offset: 1px;
}
""")

SET_ATTRIBUTE = '(el, [name, value]) => el.setAttribute(name, value)'

REMOVE_ATTRIBUTE = '(el, name) => el.removeAttribute(name)'

SCROLL_INTO_VIEW = "(el, behavior) => el.scrollIntoView({ behavior, block: 'center' })"

CLEAR_VALUE = "(el) => { el.value = ''; }"

CLEAR_TEXT = "(el) => { el.textContent = ''; }"

APPEND_VALUE = '(el, ch) => { el.value += ch; }'

INSERT_AT_CARET = """
(el, ch) => {
	const sel = window.getSelection();
	if (sel && sel.rangeCount > 0 && el.contains(sel.getRangeAt(0).commonAncestorContainer)) {
		const range = sel.getRangeAt(0);
		range.deleteContents();
		range.insertNode(document.createTextNode(ch));
		range.collapse(false);
		sel.removeAllRanges();
		sel.addRange(range);
	} else {
		el.textContent += ch;
	}
}
"""

SELECT_OPTION = """
(el, wanted) => {
	const option = Array.from(el.options || []).find(o => o.value === wanted || o.text === wanted);
	if (!option) return false;
	option.selected = true;
	return true;
}
"""

SCROLL_BY = '([x, y, behavior]) => window.scrollBy({ left: x, top: y, behavior })'

SCROLL_POSITION = '() => ({ x: window.scrollX, y: window.scrollY })'

EVALUATE_EXPRESSION = '(expression) => (0, eval)(expression)'

READ_STORAGE = """
(area) => {
	const store = area === 'session' ? window.sessionStorage : window.localStorage;
	const data = {};
	for (let i = 0; i < store.length; i++) {
		const key = store.key(i);
		data[key] = store.getItem(key);
	}
	return data;
}
"""

READ_COOKIE = '() => document.cookie'

# each bridge exposes its own callback, named with this prefix
MUTATION_BINDING_PREFIX = '__domhandMutation_'

OBSERVE_MUTATIONS = """
([binding, token]) => {
	const registry = window.__domhandObservers || (window.__domhandObservers = {});
	const observer = new MutationObserver(() => window[binding](token));
	observer.observe(document.documentElement, { childList: true, subtree: true, attributes: true });
	registry[token] = observer;
}
"""

DISCONNECT_MUTATIONS = """
(token) => {
	const registry = window.__domhandObservers || {};
	if (registry[token]) {
		registry[token].disconnect();
		delete registry[token];
	}
}
"""

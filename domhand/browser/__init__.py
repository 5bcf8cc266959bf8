from typing import TYPE_CHECKING

# Type stubs for lazy imports
if TYPE_CHECKING:
	from .bridge import MutationFeed, PageBridge, PlaywrightBridge
	from .session import PageSession

# Lazy imports mapping; the session pulls in every service
_LAZY_IMPORTS = {
	'MutationFeed': ('.bridge', 'MutationFeed'),
	'PageBridge': ('.bridge', 'PageBridge'),
	'PlaywrightBridge': ('.bridge', 'PlaywrightBridge'),
	'PageSession': ('.session', 'PageSession'),
}


def __getattr__(name: str):
	"""Lazy import mechanism for browser components."""
	if name in _LAZY_IMPORTS:
		module_path, attr_name = _LAZY_IMPORTS[name]
		from importlib import import_module

		module = import_module(f'domhand.browser{module_path}')
		attr = getattr(module, attr_name)
		globals()[name] = attr
		return attr

	raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = ['MutationFeed', 'PageBridge', 'PlaywrightBridge', 'PageSession']

import os

__version__ = '0.1.0'

from domhand.logging_config import setup_logging

# Only set up logging if not embedded in a host that configures its own
if os.environ.get('DOMHAND_SETUP_LOGGING', 'true').lower() != 'false':
	logger = setup_logging()
else:
	import logging

	logger = logging.getLogger('domhand')


# --- Lightweight, lazy re-exports ---
# Playwright and the services are only imported when first used.

_LAZY_EXPORTS = {
	'PageSession': ('domhand.browser.session', 'PageSession'),
	'PageBridge': ('domhand.browser.bridge', 'PageBridge'),
	'PlaywrightBridge': ('domhand.browser.bridge', 'PlaywrightBridge'),
	'Controller': ('domhand.controller.service', 'Controller'),
	'DomService': ('domhand.dom.service', 'DomService'),
	'InteractionService': ('domhand.interaction.service', 'InteractionService'),
	'TargetDescriptor': ('domhand.interaction.targets', 'TargetDescriptor'),
	'TargetResolver': ('domhand.interaction.targets', 'TargetResolver'),
	'PacingEngine': ('domhand.interaction.pacing', 'PacingEngine'),
	'EngineSettings': ('domhand.config', 'EngineSettings'),
	'describe': ('domhand.dom.descriptor', 'describe'),
	'build_accessibility_tree': ('domhand.dom.accessibility', 'build_accessibility_tree'),
	'DomHandError': ('domhand.exceptions', 'DomHandError'),
	'InvalidTarget': ('domhand.exceptions', 'InvalidTarget'),
	'TargetNotFound': ('domhand.exceptions', 'TargetNotFound'),
	'WaitTimeout': ('domhand.exceptions', 'WaitTimeout'),
	'HandlerError': ('domhand.exceptions', 'HandlerError'),
}


def __getattr__(name: str):
	entry = _LAZY_EXPORTS.get(name)
	if not entry:
		raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
	module_path, attr_name = entry
	from importlib import import_module

	module = import_module(module_path)
	attr = getattr(module, attr_name)
	# Cache for future lookups
	globals()[name] = attr
	return attr


__all__ = ['__version__', 'setup_logging', *_LAZY_EXPORTS]

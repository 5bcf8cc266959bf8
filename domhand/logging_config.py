import locale
import logging
import sys

from domhand.config import CONFIG
from domhand.timing import now_utc_iso, process_start_utc_iso, uptime_seconds

LOG_LEVELS = {
	'debug': logging.DEBUG,
	'info': logging.INFO,
	'warning': logging.WARNING,
	'warn': logging.WARNING,
	'error': logging.ERROR,
	'result': 35,
}


def addLoggingLevel(levelName, levelNum, methodName=None):
	"""
	Comprehensively adds a new logging level to the `logging` module and the
	currently configured logging class.

	`levelName` becomes an attribute of the `logging` module with the value
	`levelNum`. `methodName` becomes a convenience method for both `logging`
	itself and the class returned by `logging.getLoggerClass()` (usually just
	`logging.Logger`). If `methodName` is not specified, `levelName.lower()` is
	used.

	Raises `AttributeError` if the level name or method name is already taken.

	Example
	-------
	>>> addLoggingLevel('TRACE', logging.DEBUG - 5)
	>>> logging.getLogger(__name__).setLevel('TRACE')
	>>> logging.getLogger(__name__).trace('that worked')
	"""
	if not methodName:
		methodName = levelName.lower()

	if hasattr(logging, levelName):
		raise AttributeError(f'{levelName} already defined in logging module')
	if hasattr(logging, methodName):
		raise AttributeError(f'{methodName} already defined in logging module')
	if hasattr(logging.getLoggerClass(), methodName):
		raise AttributeError(f'{methodName} already defined in logger class')

	def logForLevel(self, message, *args, **kwargs):
		if self.isEnabledFor(levelNum):
			self._log(levelNum, message, args, **kwargs)

	def logToRoot(message, *args, **kwargs):
		logging.log(levelNum, message, *args, **kwargs)

	logging.addLevelName(levelNum, levelName)
	setattr(logging, levelName, levelNum)
	setattr(logging.getLoggerClass(), methodName, logForLevel)
	setattr(logging, methodName, logToRoot)


class SafeStreamHandler(logging.StreamHandler):
	"""A logging handler that survives consoles that can't encode every character.

	Retries writes with 'replace' on UnicodeEncodeError; page text routinely
	contains characters a cp1252 console cannot print.
	"""

	def emit(self, record):  # type: ignore[override]
		try:
			msg = self.format(record)
			stream = self.stream
			try:
				stream.write(msg + self.terminator)
			except UnicodeEncodeError:
				enc = getattr(stream, 'encoding', None) or locale.getpreferredencoding(False) or 'utf-8'
				sanitized = msg.encode(enc, errors='replace').decode(enc, errors='replace')
				stream.write(sanitized + self.terminator)
			self.flush()
		except Exception:
			self.handleError(record)


class DomHandFormatter(logging.Formatter):
	def format(self, record):
		record.utc = now_utc_iso()
		record.uptime = f'{uptime_seconds():.3f}s'
		return super().format(record)


def _resolve_level(level: str | int) -> int:
	if isinstance(level, int):
		return level
	key = str(level).strip().lower()
	if key not in LOG_LEVELS:
		raise ValueError(f'Invalid log level: {level}')
	return LOG_LEVELS[key]


def setup_logging(stream=None, log_level=None, force_setup=False):
	"""Setup logging configuration for domhand.

	Args:
		stream: Output stream for logs (default: sys.stdout).
		log_level: Override log level (default: uses CONFIG.DOMHAND_LOGGING_LEVEL)
		force_setup: Force reconfiguration even if handlers already exist
	"""
	try:
		addLoggingLevel('RESULT', 35)
	except AttributeError:
		pass  # already registered

	log_type = (log_level or CONFIG.DOMHAND_LOGGING_LEVEL).lower()

	domhand_logger = logging.getLogger('domhand')
	if domhand_logger.handlers and not force_setup:
		return domhand_logger

	console = SafeStreamHandler(stream or sys.stdout)
	if log_type == 'result':
		console.setFormatter(DomHandFormatter('%(message)s'))
	else:
		console.setFormatter(DomHandFormatter('%(levelname)-8s [%(name)s] %(utc)s (+%(uptime)s) %(message)s'))

	domhand_logger.handlers = [console]
	domhand_logger.propagate = False
	domhand_logger.setLevel(LOG_LEVELS.get(log_type, logging.INFO))

	domhand_logger.debug(f'Logging initialized at {now_utc_iso()} (process_start={process_start_utc_iso()})')

	for logger_name in ('playwright', 'asyncio', 'websockets'):
		third_party = logging.getLogger(logger_name)
		third_party.setLevel(logging.ERROR)
		third_party.propagate = False

	return domhand_logger


def set_log_level(level: str | int) -> int:
	"""Change the level of the domhand logger (and its handlers) at runtime."""
	try:
		addLoggingLevel('RESULT', 35)
	except AttributeError:
		pass
	numeric = _resolve_level(level)
	domhand_logger = logging.getLogger('domhand')
	domhand_logger.setLevel(numeric)
	for handler in domhand_logger.handlers:
		handler.setLevel(numeric)
	return numeric

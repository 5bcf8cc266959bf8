class DomHandError(Exception):
	"""Base class for failures reported back to the controller as `{ok: false}`."""

	error_type = 'HandlerError'

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message

	def __str__(self) -> str:
		return self.message


class InvalidTarget(DomHandError):
	"""The target descriptor carries none of mark, selector or xpath."""

	error_type = 'InvalidTarget'


class TargetNotFound(DomHandError):
	"""The target descriptor is well-formed but matches nothing in the document."""

	error_type = 'TargetNotFound'


class WaitTimeout(DomHandError):
	"""A wait operation exceeded its bound."""

	error_type = 'Timeout'

	def __init__(self, message: str, timeout_ms: int):
		super().__init__(message)
		self.timeout_ms = timeout_ms


class HandlerError(DomHandError):
	"""Any other fault raised while executing a command."""

	error_type = 'HandlerError'

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from domhand.controller.views import NoParams

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class RegisteredAction:
	command_type: str
	function: Handler
	param_model: type[BaseModel]
	description: str = ''


class Registry:
	"""Command type -> handler, filled through the `action` decorator."""

	def __init__(self, exclude_actions: list[str] | None = None):
		self.actions: dict[str, RegisteredAction] = {}
		self.exclude_actions = set(exclude_actions or [])

	def action(self, command_type: str, param_model: type[BaseModel] = NoParams, description: str = ''):
		"""Register the decorated coroutine as the handler for `command_type`.

		The handler receives a validated `param_model` instance and returns
		the result fields of a successful response.
		"""

		def decorator(func: Handler) -> Handler:
			if command_type in self.exclude_actions:
				logger.debug(f'Skipping excluded command {command_type}')
				return func
			if command_type in self.actions:
				raise ValueError(f'Command {command_type} is already registered')
			self.actions[command_type] = RegisteredAction(
				command_type=command_type,
				function=func,
				param_model=param_model,
				description=description or (func.__doc__ or '').strip(),
			)
			return func

		return decorator

	def get(self, command_type: Any) -> RegisteredAction | None:
		if not isinstance(command_type, str):
			return None
		return self.actions.get(command_type)

	@property
	def command_types(self) -> list[str]:
		return sorted(self.actions)

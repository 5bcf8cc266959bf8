"""Environment-driven configuration for domhand.

Values are read lazily on every attribute access so tests (and long-lived
processes) can change the environment without re-importing the package.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
	raw = os.getenv(name)
	if raw is None or raw.strip() == '':
		return default
	return raw.strip().lower()[:1] in 'ty1'


def _env_int(name: str, default: int | None) -> int | None:
	raw = os.getenv(name)
	if raw is None or raw.strip() == '':
		return default
	return int(raw)


class Config:
	"""Lazy view over DOMHAND_* environment variables."""

	@property
	def DOMHAND_LOGGING_LEVEL(self) -> str:
		return os.getenv('DOMHAND_LOGGING_LEVEL', 'info').lower()

	@property
	def DOMHAND_SETUP_LOGGING(self) -> bool:
		return _env_bool('DOMHAND_SETUP_LOGGING', True)

	@property
	def DOMHAND_HUMAN_PACING(self) -> bool:
		return _env_bool('DOMHAND_HUMAN_PACING', True)

	@property
	def DOMHAND_PACING_SEED(self) -> int | None:
		return _env_int('DOMHAND_PACING_SEED', None)

	@property
	def DOMHAND_MAX_ELEMENTS(self) -> int:
		return _env_int('DOMHAND_MAX_ELEMENTS', 500)  # type: ignore[return-value]

	@property
	def DOMHAND_MAX_DEPTH(self) -> int:
		return _env_int('DOMHAND_MAX_DEPTH', 8)  # type: ignore[return-value]

	@property
	def DOMHAND_FIND_LIMIT(self) -> int:
		return _env_int('DOMHAND_FIND_LIMIT', 100)  # type: ignore[return-value]

	@property
	def DOMHAND_WAIT_TIMEOUT_MS(self) -> int:
		return _env_int('DOMHAND_WAIT_TIMEOUT_MS', 5000)  # type: ignore[return-value]


CONFIG = Config()


class EngineSettings(BaseModel):
	"""Per-session knobs. Defaults come from the environment at construction time."""

	human_pacing: bool = Field(
		default_factory=lambda: CONFIG.DOMHAND_HUMAN_PACING,
		description='When false every pacing delay collapses to a zero-length yield.',
	)
	pacing_seed: int | None = Field(
		default_factory=lambda: CONFIG.DOMHAND_PACING_SEED,
		description='Seed for the jitter RNG; unset means a fresh seed per session.',
	)
	max_elements: int = Field(default_factory=lambda: CONFIG.DOMHAND_MAX_ELEMENTS, ge=0)
	max_depth: int = Field(default_factory=lambda: CONFIG.DOMHAND_MAX_DEPTH, ge=0)
	find_limit: int = Field(default_factory=lambda: CONFIG.DOMHAND_FIND_LIMIT, ge=0)
	wait_timeout_ms: int = Field(default_factory=lambda: CONFIG.DOMHAND_WAIT_TIMEOUT_MS, ge=0)

"""
Human-like pacing for synthesized interactions.

Every delay is drawn uniformly from a bounded window, so a run is
reproducible when the engine is given a seed. With pacing disabled the
engine still yields to the event loop at each step but never sleeps.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DelayWindow:
	name: str
	low_ms: int
	high_ms: int

	def __post_init__(self):
		if self.low_ms < 0 or self.high_ms < self.low_ms:
			raise ValueError(f'Invalid delay window {self.name}: [{self.low_ms}, {self.high_ms}]')


CLICK_SETTLE = DelayWindow('click_settle', 50, 120)
POINTER_MOVE = DelayWindow('pointer_move', 10, 40)
PRESS_HOLD = DelayWindow('press_hold', 20, 60)
TYPE_SETTLE = DelayWindow('type_settle', 30, 80)
FOCUS_SETTLE = DelayWindow('focus_settle', 20, 50)
KEYSTROKE = DelayWindow('keystroke', 30, 100)
SCROLL_SETTLE = DelayWindow('scroll_settle', 150, 150)

# max pointer offset from the element center, in CSS pixels per axis
POINTER_JITTER_PX = 2.0


class PacingEngine:
	"""Seeded source of interaction delays and pointer jitter."""

	def __init__(self, enabled: bool = True, run_seed: int | None = None):
		self.enabled = enabled
		self._run_seed: int = int(run_seed) if run_seed is not None else int(time.time_ns() & 0xFFFFFFFF)
		self._rng = random.Random(self._run_seed)
		self.total_paused_ms = 0

	@property
	def run_seed(self) -> int:
		return self._run_seed

	def set_run_seed(self, seed: int | None) -> None:
		"""Reset the RNG; the same seed replays the same sequence of delays."""
		if seed is None:
			seed = int(time.time_ns() & 0xFFFFFFFF)
		self._run_seed = int(seed)
		self._rng.seed(self._run_seed)

	def delay_ms(self, window: DelayWindow) -> int:
		if window.low_ms == window.high_ms:
			return window.low_ms
		return self._rng.randint(window.low_ms, window.high_ms)

	def jitter(self) -> float:
		return self._rng.uniform(-POINTER_JITTER_PX, POINTER_JITTER_PX)

	async def pause(self, window: DelayWindow) -> int:
		"""Sleep for one draw from `window`. Returns the milliseconds slept."""
		ms = self.delay_ms(window) if self.enabled else 0
		self.total_paused_ms += ms
		await asyncio.sleep(ms / 1000.0)
		return ms

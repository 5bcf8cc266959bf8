"""
Clock helpers shared by logging and the wait operations.

- Monotonic time for durations and deadlines (immune to wall clock changes)
- UTC ISO timestamps and process uptime for log records
"""
from __future__ import annotations

import time
from datetime import datetime, timezone

_PROCESS_START_MONOTONIC = time.monotonic()
_PROCESS_START_WALL = time.time()


def uptime_seconds() -> float:
	"""Seconds since process start based on monotonic clock."""
	return time.monotonic() - _PROCESS_START_MONOTONIC


def now_utc_iso(ms: bool = True) -> str:
	"""ISO-8601 UTC timestamp string suitable for logs (e.g., 2025-08-25T12:34:56.789Z)."""
	dt = datetime.now(timezone.utc)
	if ms:
		return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')
	return dt.isoformat().replace('+00:00', 'Z')


def process_start_utc_iso() -> str:
	return datetime.fromtimestamp(_PROCESS_START_WALL, tz=timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class Deadline:
	"""A fixed point in monotonic time, created from a millisecond budget."""

	def __init__(self, timeout_ms: float):
		self.timeout_ms = max(0.0, float(timeout_ms))
		self.started = time.monotonic()
		self.expires = self.started + self.timeout_ms / 1000.0

	def remaining(self) -> float:
		"""Seconds left, never negative."""
		return max(0.0, self.expires - time.monotonic())

	def elapsed_ms(self) -> int:
		return int((time.monotonic() - self.started) * 1000)

"""
Shared fixtures: an in-memory page and the engine services wired over it.
"""

import os

import pytest

# keep test output quiet and never sleep between synthesized events
os.environ.setdefault('DOMHAND_LOGGING_LEVEL', 'warning')
os.environ.setdefault('DOMHAND_HUMAN_PACING', 'false')

from domhand.config import EngineSettings  # noqa: E402
from domhand.controller.service import Controller  # noqa: E402
from domhand.dom.service import DomService  # noqa: E402
from domhand.interaction.pacing import PacingEngine  # noqa: E402
from domhand.interaction.service import InteractionService  # noqa: E402
from fake_page import FakeBridge, form_page  # noqa: E402


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(human_pacing=False, pacing_seed=7)


@pytest.fixture
def bridge() -> FakeBridge:
    return FakeBridge(form_page())


@pytest.fixture
def dom(bridge, settings) -> DomService:
    return DomService(bridge, settings)


@pytest.fixture
def interaction(bridge, settings) -> InteractionService:
    return InteractionService(bridge, pacing=PacingEngine(enabled=False, run_seed=7), settings=settings)


@pytest.fixture
def controller(bridge, dom, interaction, settings) -> Controller:
    return Controller(bridge, dom, interaction, settings)

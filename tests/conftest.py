"""Shared fakes for account setup tests."""

import asyncio
from unittest.mock import MagicMock

import pytest

from account_setup.account_state import InMemoryAccountStateRepository
from account_setup.coordinator import DiscoveryCoordinator
from account_setup.machine import AccountAutoDiscoveryMachine
from account_setup.oauth import OAuthSubFlow
from account_setup.servers import DiscoveryOutcome
from account_setup.validation import DefaultValidator
from core.settings import reload_settings


class FakeProbe:
    """Probe returning queued outcomes; None declines. Optionally waits on a gate."""

    def __init__(self, *outcomes: DiscoveryOutcome | None) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    async def attempt(self, email_address: str) -> DiscoveryOutcome | None:
        self.calls.append(email_address)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if self.gate is not None:
            await self.gate.wait()
        return outcome


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Ensure clean settings cache for each test."""
    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def repository() -> InMemoryAccountStateRepository:
    return InMemoryAccountStateRepository()


@pytest.fixture
def oauth_flow() -> MagicMock:
    return MagicMock(spec=OAuthSubFlow)


@pytest.fixture
def make_machine(repository, oauth_flow):
    """Build a machine over fake probes: make_machine(fast_probe, generic_probe)."""

    def _make(*probes: FakeProbe) -> AccountAutoDiscoveryMachine:
        return AccountAutoDiscoveryMachine(
            validator=DefaultValidator(),
            coordinator=DiscoveryCoordinator(list(probes)),
            account_state_repository=repository,
            oauth_flow=oauth_flow,
        )

    return _make

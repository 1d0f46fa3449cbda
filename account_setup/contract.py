"""Collaborator protocols consumed by the account setup state machine.

Implementations are injected; the machine only relies on the methods below.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from account_setup.servers import AutoDiscoveryResult, DiscoveryOutcome
from account_setup.validation import ValidationOutcome

if TYPE_CHECKING:
    from account_setup.account_state import AccountState


@runtime_checkable
class Validator(Protocol):
    """Input validation rules. Each call returns success or failure-with-message."""

    def validate_email_address(self, email_address: str) -> ValidationOutcome:
        """Check the address format."""

    def validate_password(self, password: str) -> ValidationOutcome:
        """Check the password is acceptable."""

    def validate_configuration_approval(
        self, is_approved: bool | None, is_auto_discovery_trusted: bool | None
    ) -> ValidationOutcome:
        """Untrusted discovery results must be approved by the user."""


@runtime_checkable
class DiscoveryService(Protocol):
    """Generic autodiscovery client (autoconfig, ISPDB, ...)."""

    async def execute(self, email_address: str) -> AutoDiscoveryResult:
        """Discover server settings for the address."""


@runtime_checkable
class DiscoveryProbe(Protocol):
    """One discovery strategy. Never raises; None means "not mine, ask the next probe"."""

    async def attempt(self, email_address: str) -> DiscoveryOutcome | None:
        """Try to discover settings for the address."""


@runtime_checkable
class AccountStateRepository(Protocol):
    """Holds the account being set up, shared with later setup screens."""

    def set_state(self, state: "AccountState") -> None:
        """Replace the stored account state."""

    def clear(self) -> None:
        """Forget any stored account state."""


@runtime_checkable
class OAuthFlow(Protocol):
    """Nested OAuth authorization flow. Reports back through an OAuthResult event."""

    def init_state(self, hostname: str, email_address: str) -> None:
        """Prepare authorization against hostname for the given address."""

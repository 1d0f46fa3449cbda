"""Account state handed from the discovery step to the rest of account setup."""

from dataclasses import dataclass

from account_setup.servers import IncomingServerSettings, SmtpServerSettings
from account_setup.state import WizardState


@dataclass(frozen=True)
class AccountState:
    email_address: str
    password: str | None = None
    incoming_server_settings: IncomingServerSettings | None = None
    outgoing_server_settings: SmtpServerSettings | None = None
    is_trusted: bool | None = None
    authorization_state: str | None = None

    def __repr__(self) -> str:
        # keep secrets out of logs
        return (
            f"AccountState(email_address={self.email_address!r}, "
            f"incoming_server_settings={self.incoming_server_settings!r}, "
            f"is_trusted={self.is_trusted!r})"
        )


def to_account_state(state: WizardState) -> AccountState:
    discovered = state.discovered
    return AccountState(
        email_address=state.email_address.value,
        password=state.password.value or None,
        incoming_server_settings=discovered.incoming if discovered else None,
        outgoing_server_settings=discovered.outgoing if discovered else None,
        is_trusted=discovered.is_trusted if discovered else None,
        authorization_state=state.authorization_state,
    )


class InMemoryAccountStateRepository:
    """Process-local account state for one setup session."""

    def __init__(self) -> None:
        self._state: AccountState | None = None

    def get_state(self) -> AccountState | None:
        return self._state

    def set_state(self, state: AccountState) -> None:
        self._state = state

    def clear(self) -> None:
        self._state = None

"""Tests for account_setup.account_state."""

from account_setup.account_state import (
    AccountState,
    InMemoryAccountStateRepository,
    to_account_state,
)
from account_setup.servers import Found, ImapServerSettings
from account_setup.state import InputField, WizardState


def test_snapshot_from_wizard_state() -> None:
    """Account snapshot carries address, secrets and discovered servers."""
    found = Found(incoming=ImapServerSettings(hostname="imap.example.org"), is_trusted=False)
    state = WizardState(
        email_address=InputField("a@example.org"),
        password=InputField("secret"),
        discovered=found,
        authorization_state="tok",
    )
    snapshot = to_account_state(state)
    assert snapshot == AccountState(
        email_address="a@example.org",
        password="secret",
        incoming_server_settings=found.incoming,
        outgoing_server_settings=None,
        is_trusted=False,
        authorization_state="tok",
    )


def test_snapshot_without_discovery() -> None:
    """Snapshot without discovery has no server settings."""
    snapshot = to_account_state(WizardState(email_address=InputField("a@example.org")))
    assert snapshot.password is None
    assert snapshot.incoming_server_settings is None
    assert snapshot.is_trusted is None


def test_repr_hides_secrets() -> None:
    """Password and token never appear in repr."""
    text = repr(AccountState(email_address="a@b.org", password="hunter2", authorization_state="t0k"))
    assert "hunter2" not in text
    assert "t0k" not in text


def test_repository_set_and_clear_are_idempotent() -> None:
    """Repeated set and clear leave the repository consistent."""
    repo = InMemoryAccountStateRepository()
    state = AccountState(email_address="a@b.org")
    repo.set_state(state)
    repo.set_state(state)
    assert repo.get_state() is state
    repo.clear()
    repo.clear()
    assert repo.get_state() is None


def test_wizard_state_snapshot_is_detached() -> None:
    """Mutating a snapshot does not touch the live state."""
    state = WizardState()
    copy = state.snapshot()
    copy.is_loading = True
    assert state.is_loading is False

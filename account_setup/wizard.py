"""Terminal front end: feeds prompt answers into the state machine until it navigates away."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import questionary
from questionary import Choice

from account_setup.account_state import InMemoryAccountStateRepository
from account_setup.contract import DiscoveryService
from account_setup.coordinator import build_coordinator
from account_setup.events import (
    AutoDiscoveryUiResult,
    BackClicked,
    EditConfigurationClicked,
    EmailAddressChanged,
    NavigateBack,
    NavigateNext,
    NextClicked,
    OAuthResultReceived,
    PasswordChanged,
    ResultApprovalChanged,
    RetryClicked,
)
from account_setup.known_providers import KnownProvidersDiscovery
from account_setup.machine import AccountAutoDiscoveryMachine
from account_setup.oauth import OAuthFailure, OAuthSubFlow, OAuthSuccess
from account_setup.servers import (
    ImapServerSettings,
    Pop3ServerSettings,
    ProviderPlaceholderSettings,
)
from account_setup.state import ConfigStep, WizardState
from account_setup.ui import ERROR_MESSAGES, STYLE
from account_setup.validation import DefaultValidator
from core.logging_config import setup_logging
from core.settings import load_settings

logger = logging.getLogger(__name__)


@dataclass
class WizardResult:
    """Result of running the wizard."""

    success: bool
    result: AutoDiscoveryUiResult | None = None


def run_wizard(
    project_root: Path | None = None,
    service: DiscoveryService | None = None,
) -> WizardResult:
    """Run the account setup wizard in a fresh event loop."""
    root = project_root or Path.cwd()
    settings = load_settings(root / "config")
    setup_logging(root, settings)
    return asyncio.run(run_wizard_async(settings, service or KnownProvidersDiscovery()))


async def run_wizard_async(settings: dict[str, Any], service: DiscoveryService) -> WizardResult:
    oauth_flow = OAuthSubFlow()
    machine = AccountAutoDiscoveryMachine(
        validator=DefaultValidator(),
        coordinator=build_coordinator(service, settings),
        account_state_repository=InMemoryAccountStateRepository(),
        oauth_flow=oauth_flow,
    )

    while True:
        effects = machine.effects
        if effects:
            match effects[-1]:
                case NavigateNext(result=result):
                    return WizardResult(success=True, result=result)
                case NavigateBack():
                    return WizardResult(success=False)

        state = machine.state
        match state.step:
            case ConfigStep.EMAIL_ADDRESS:
                ok = await _address_step(machine, state)
            case ConfigStep.PASSWORD:
                ok = await _password_step(machine, state)
            case ConfigStep.OAUTH:
                ok = await _oauth_step(machine, oauth_flow)
            case ConfigStep.MANUAL_SETUP:
                ok = await _manual_step(machine)
        if not ok:
            return WizardResult(success=False)


async def _address_step(machine: AccountAutoDiscoveryMachine, state: WizardState) -> bool:
    """Returns False if the user cancelled."""
    if state.error is not None:
        print(f"\n{ERROR_MESSAGES[state.error]}\n")
        choice = await questionary.select(
            "What would you like to do?",
            choices=[
                Choice("Retry", "retry"),
                Choice("Enter server settings manually", "manual"),
                Choice("Change email address", "back"),
            ],
            style=STYLE,
        ).ask_async()
        if choice is None:
            return False
        if choice == "retry":
            machine.event(RetryClicked())
            await _wait(machine)
        elif choice == "manual":
            machine.event(NextClicked())
        else:
            machine.event(BackClicked())
        return True

    if state.email_address.error:
        print(f"  {state.email_address.error}\n")
    email = await questionary.text(
        "Email address:", default=state.email_address.value, style=STYLE
    ).ask_async()
    if email is None:
        return False
    email = email.strip()
    if not email:
        machine.event(BackClicked())
        return True
    if email != state.email_address.value:
        machine.event(EmailAddressChanged(email))
    machine.event(NextClicked())
    await _wait(machine)
    return True


async def _password_step(machine: AccountAutoDiscoveryMachine, state: WizardState) -> bool:
    _print_discovered(state)
    if state.is_trusted is False:
        approved = await questionary.confirm(
            "These settings come from an unverified source. Use them?",
            default=state.configuration_approved.value,
            style=STYLE,
        ).ask_async()
        if approved is None:
            return False
        machine.event(ResultApprovalChanged(approved))

    for field_error in (state.email_address.error, state.configuration_approved.error):
        if field_error:
            print(f"  {field_error}")
    if state.password.error:
        print(f"  {state.password.error}\n")

    choices = [Choice("Enter password", "password"), Choice("Back", "back")]
    if state.discovered is not None:
        choices.insert(1, Choice("Edit server settings manually", "edit"))
    choice = await questionary.select("Continue:", choices=choices, style=STYLE).ask_async()
    if choice is None:
        return False
    if choice == "back":
        machine.event(BackClicked())
        return True
    if choice == "edit":
        machine.event(EditConfigurationClicked())
        return True

    password = await questionary.password("Password:", style=STYLE).ask_async()
    if password is None:
        return False
    machine.event(PasswordChanged(password))
    machine.event(NextClicked())
    return True


async def _oauth_step(machine: AccountAutoDiscoveryMachine, oauth_flow: OAuthSubFlow) -> bool:
    print(f"\n{oauth_flow.hostname} requires signing in with your provider (OAuth 2.0).")
    token = await questionary.password(
        "Paste the authorization token (leave empty to go back):", style=STYLE
    ).ask_async()
    if token is None:
        return False
    if not token.strip():
        machine.event(OAuthResultReceived(OAuthFailure("no token entered")))
        machine.event(BackClicked())
        return True
    machine.event(OAuthResultReceived(OAuthSuccess(authorization_state=token.strip())))
    return True


async def _manual_step(machine: AccountAutoDiscoveryMachine) -> bool:
    print("\nNo settings were found for this address.")
    proceed = await questionary.confirm(
        "Continue with manual server setup?", default=True, style=STYLE
    ).ask_async()
    if proceed is None:
        return False
    machine.event(NextClicked() if proceed else BackClicked())
    return True


async def _wait(machine: AccountAutoDiscoveryMachine) -> None:
    print("Looking up server settings...")
    await machine.wait_for_discovery()


def _print_discovered(state: WizardState) -> None:
    if state.discovered is None:
        return
    match state.discovered.incoming:
        case ImapServerSettings(hostname=host, port=port):
            print(f"\n  Incoming: IMAP {host}:{port}")
        case Pop3ServerSettings(hostname=host, port=port):
            print(f"\n  Incoming: POP3 {host}:{port}")
        case ProviderPlaceholderSettings(mx_hostname=mx):
            print(f"\n  Your domain is hosted on {mx}. Settings will be configured automatically.")
    outgoing = state.discovered.outgoing
    if outgoing is not None:
        print(f"  Outgoing: SMTP {outgoing.hostname}:{outgoing.port}")
    print()

"""Account setup state machine: address entry, discovery, credentials, OAuth, manual setup.

Events are processed one at a time on the event loop thread. Discovery runs
as a task; its result is applied only if no newer discovery or address edit
happened in the meantime.
"""

import asyncio
import logging
from collections.abc import Callable

from account_setup.account_state import to_account_state
from account_setup.classifier import classify
from account_setup.contract import AccountStateRepository, OAuthFlow, Validator
from account_setup.coordinator import DiscoveryCoordinator
from account_setup.events import (
    AutoDiscoveryUiResult,
    BackClicked,
    EditConfigurationClicked,
    Effect,
    EmailAddressChanged,
    Event,
    NavigateBack,
    NavigateNext,
    NextClicked,
    OAuthResultReceived,
    PasswordChanged,
    ResultApprovalChanged,
    RetryClicked,
)
from account_setup.oauth import OAuthResult, OAuthSuccess
from account_setup.provider_probe import email_domain
from account_setup.servers import (
    DiscoveryOutcome,
    Found,
    NetworkFailure,
    NotFound,
    ProviderPlaceholderSettings,
    UnknownFailure,
    protocol_type_of,
)
from account_setup.state import ConfigStep, ErrorKind, InputField, WizardState
from account_setup.validation import ValidationFailure

logger = logging.getLogger(__name__)


class AccountAutoDiscoveryMachine:
    """Owns WizardState and turns UI events into state changes and effects."""

    def __init__(
        self,
        *,
        validator: Validator,
        coordinator: DiscoveryCoordinator,
        account_state_repository: AccountStateRepository,
        oauth_flow: OAuthFlow,
        on_effect: Callable[[Effect], None] | None = None,
        initial_state: WizardState | None = None,
    ) -> None:
        self._validator = validator
        self._coordinator = coordinator
        self._repository = account_state_repository
        self._oauth_flow = oauth_flow
        self._on_effect = on_effect
        self._state = initial_state or WizardState()
        self._effects: list[Effect] = []
        self._discovery_task: asyncio.Task[None] | None = None
        self._generation = 0

    @property
    def state(self) -> WizardState:
        return self._state.snapshot()

    @property
    def effects(self) -> list[Effect]:
        """Effects emitted so far, oldest first."""
        return list(self._effects)

    def init_state(self, state: WizardState) -> None:
        """Replace the whole state, e.g. when restoring a session."""
        self._generation += 1
        self._state = state.snapshot()

    def event(self, event: Event) -> None:
        """Process one event. Must be called from the running event loop."""
        match event:
            case EmailAddressChanged(email_address=email_address):
                self._change_email_address(email_address)
            case PasswordChanged(password=password):
                self._state.password = self._state.password.update_value(password)
            case ResultApprovalChanged(confirmed=confirmed):
                self._state.configuration_approved = (
                    self._state.configuration_approved.update_value(confirmed)
                )
            case OAuthResultReceived(result=result):
                self._on_oauth_result(result)
            case NextClicked():
                self._on_next()
            case BackClicked():
                self._on_back()
            case RetryClicked():
                self._on_retry()
            case EditConfigurationClicked():
                self._on_edit_configuration()

    async def wait_for_discovery(self) -> None:
        """Wait until no discovery is in flight, including ones started meanwhile."""
        while (task := self._discovery_task) is not None and not task.done():
            await task

    # --- event handlers ---

    def _change_email_address(self, email_address: str) -> None:
        self._repository.clear()
        # a pending discovery for the old address must not land on the new state
        self._generation += 1
        self._state = WizardState(
            email_address=InputField(email_address),
            is_next_button_visible=True,
        )

    def _on_next(self) -> None:
        match self._state.step:
            case ConfigStep.EMAIL_ADDRESS:
                if self._state.error is not None:
                    self._state.error = None
                    self._state.step = ConfigStep.PASSWORD
                else:
                    self._submit_email()
            case ConfigStep.PASSWORD:
                self._submit_password()
            case ConfigStep.OAUTH:
                pass
            case ConfigStep.MANUAL_SETUP:
                self._navigate_next(is_automatic_config=False)

    def _on_back(self) -> None:
        match self._state.step:
            case ConfigStep.EMAIL_ADDRESS:
                if self._state.error is not None:
                    self._state.error = None
                else:
                    self._emit(NavigateBack())
            case ConfigStep.OAUTH | ConfigStep.PASSWORD | ConfigStep.MANUAL_SETUP:
                self._state.step = ConfigStep.EMAIL_ADDRESS
                self._state.password = InputField("")
                self._state.is_next_button_visible = True

    def _on_retry(self) -> None:
        self._state.error = None
        self._load_auto_discovery()

    def _on_edit_configuration(self) -> None:
        if self._state.discovered is None:
            logger.debug("Edit configuration ignored: nothing discovered yet")
            return
        self._navigate_next(is_automatic_config=False)

    def _on_oauth_result(self, result: OAuthResult) -> None:
        if isinstance(result, OAuthSuccess):
            self._state.authorization_state = result.authorization_state
            self._navigate_next(is_automatic_config=True)
        else:
            self._state.authorization_state = None

    # --- validation ---

    def _submit_email(self) -> None:
        outcome = self._validator.validate_email_address(self._state.email_address.value)
        self._state.email_address = self._state.email_address.update_from_validation(outcome)
        if not isinstance(outcome, ValidationFailure):
            self._load_auto_discovery()

    def _submit_password(self) -> None:
        state = self._state
        email_outcome = self._validator.validate_email_address(state.email_address.value)
        password_outcome = self._validator.validate_password(state.password.value)
        approval_outcome = self._validator.validate_configuration_approval(
            state.configuration_approved.value, state.is_trusted
        )

        state.email_address = state.email_address.update_from_validation(email_outcome)
        state.password = state.password.update_from_validation(password_outcome)
        state.configuration_approved = state.configuration_approved.update_from_validation(
            approval_outcome
        )

        outcomes = (email_outcome, password_outcome, approval_outcome)
        if not any(isinstance(o, ValidationFailure) for o in outcomes):
            self._navigate_next(is_automatic_config=state.discovered is not None)

    # --- discovery ---

    def _load_auto_discovery(self) -> None:
        self._generation += 1
        generation = self._generation
        email_address = self._state.email_address.value
        self._state.is_loading = True
        logger.info("Starting discovery for domain %s", email_domain(email_address))
        self._discovery_task = asyncio.get_running_loop().create_task(
            self._run_discovery(generation, email_address)
        )

    async def _run_discovery(self, generation: int, email_address: str) -> None:
        try:
            outcome = await self._coordinator.discover(email_address)
        except Exception as e:
            logger.exception("Discovery failed: %s", e)
            outcome = UnknownFailure(detail=str(e))

        if generation != self._generation or email_address != self._state.email_address.value:
            logger.debug("Discarding superseded discovery result for %s", email_domain(email_address))
            return
        self._apply_outcome(outcome)

    def _apply_outcome(self, outcome: DiscoveryOutcome) -> None:
        match outcome:
            case Found():
                self._update_discovered(outcome)
            case NotFound():
                self._state.is_loading = False
                self._state.discovered = None
                self._state.step = ConfigStep.MANUAL_SETUP
            case NetworkFailure():
                self._update_error(ErrorKind.NETWORK)
            case UnknownFailure():
                self._update_error(ErrorKind.UNKNOWN)

    def _update_discovered(self, found: Found) -> None:
        incoming = found.incoming
        requires_oauth = classify(incoming).requires_oauth

        state = self._state
        state.is_loading = False
        state.error = None
        state.discovered = found
        state.step = ConfigStep.OAUTH if requires_oauth else ConfigStep.PASSWORD
        state.is_next_button_visible = not requires_oauth

        # start the sub-flow only after the state has settled
        if requires_oauth and not isinstance(incoming, ProviderPlaceholderSettings):
            self._oauth_flow.init_state(incoming.hostname, state.email_address.value)

    def _update_error(self, error: ErrorKind) -> None:
        # stale settings from an earlier attempt would contradict the error
        self._state.discovered = None
        self._state.is_loading = False
        self._state.error = error

    # --- effects ---

    def _navigate_next(self, is_automatic_config: bool) -> None:
        self._repository.set_state(to_account_state(self._state))
        discovered = self._state.discovered
        result = AutoDiscoveryUiResult(
            is_automatic_config=is_automatic_config,
            incoming_protocol_type=protocol_type_of(discovered.incoming if discovered else None),
        )
        logger.info(
            "Account setup continues (automatic=%s, protocol=%s)",
            result.is_automatic_config,
            result.incoming_protocol_type,
        )
        self._emit(NavigateNext(result))

    def _emit(self, effect: Effect) -> None:
        self._effects.append(effect)
        if self._on_effect is not None:
            self._on_effect(effect)

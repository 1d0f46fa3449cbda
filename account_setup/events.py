"""Events accepted by the state machine and effects it emits."""

from dataclasses import dataclass
from typing import TypeAlias

from account_setup.oauth import OAuthResult
from account_setup.servers import IncomingProtocolType


@dataclass(frozen=True)
class EmailAddressChanged:
    email_address: str


@dataclass(frozen=True)
class PasswordChanged:
    password: str


@dataclass(frozen=True)
class ResultApprovalChanged:
    confirmed: bool


@dataclass(frozen=True)
class OAuthResultReceived:
    result: OAuthResult


@dataclass(frozen=True)
class NextClicked:
    pass


@dataclass(frozen=True)
class BackClicked:
    pass


@dataclass(frozen=True)
class RetryClicked:
    pass


@dataclass(frozen=True)
class EditConfigurationClicked:
    pass


Event: TypeAlias = (
    EmailAddressChanged
    | PasswordChanged
    | ResultApprovalChanged
    | OAuthResultReceived
    | NextClicked
    | BackClicked
    | RetryClicked
    | EditConfigurationClicked
)


@dataclass(frozen=True)
class AutoDiscoveryUiResult:
    """What the next setup screen needs to know about this step's decision."""

    is_automatic_config: bool
    incoming_protocol_type: IncomingProtocolType | None


@dataclass(frozen=True)
class NavigateBack:
    pass


@dataclass(frozen=True)
class NavigateNext:
    result: AutoDiscoveryUiResult


Effect: TypeAlias = NavigateBack | NavigateNext

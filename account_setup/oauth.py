"""OAuth sub-flow results and a minimal sub-flow state holder."""

import logging
from dataclasses import dataclass
from typing import TypeAlias

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OAuthSuccess:
    authorization_state: str


@dataclass(frozen=True)
class OAuthFailure:
    reason: str = ""


OAuthResult: TypeAlias = OAuthSuccess | OAuthFailure


class OAuthSubFlow:
    """Remembers which server and account the authorization is for.

    The browser/token exchange lives elsewhere; whoever drives it reports
    back to the machine with an OAuthResultReceived event.
    """

    def __init__(self) -> None:
        self.hostname: str | None = None
        self.email_address: str | None = None

    @property
    def is_started(self) -> bool:
        return self.hostname is not None

    def init_state(self, hostname: str, email_address: str) -> None:
        logger.info("OAuth authorization required for %s", hostname)
        self.hostname = hostname
        self.email_address = email_address

"""Run discovery probes in priority order with short-circuit fallback."""

import logging
from collections.abc import Sequence
from typing import Any

from account_setup.contract import DiscoveryProbe, DiscoveryService
from account_setup.provider_probe import DEFAULT_DOH_URL, GenericDiscoveryProbe, MxProviderProbe
from account_setup.servers import DiscoveryOutcome, NotFound
from core.settings import get_setting

logger = logging.getLogger(__name__)


class DiscoveryCoordinator:
    """Asks each probe in turn; the first one that does not decline wins.

    Results are returned verbatim, never merged. When every probe declines
    the outcome is NotFound.
    """

    def __init__(self, probes: Sequence[DiscoveryProbe]) -> None:
        self._probes = list(probes)

    async def discover(self, email_address: str) -> DiscoveryOutcome:
        for probe in self._probes:
            outcome = await probe.attempt(email_address)
            if outcome is not None:
                logger.debug("%s resolved discovery: %r", type(probe).__name__, outcome)
                return outcome
            logger.debug("%s declined", type(probe).__name__)
        return NotFound()


def build_coordinator(service: DiscoveryService, settings: dict[str, Any]) -> DiscoveryCoordinator:
    """MX provider shortcut first, then the generic service. Reads settings["discovery"]."""
    return DiscoveryCoordinator(
        [
            MxProviderProbe(
                get_setting(settings, "discovery.provider_mx_hosts", []),
                doh_url=get_setting(settings, "discovery.doh_url", DEFAULT_DOH_URL),
                timeout=float(get_setting(settings, "discovery.mx_timeout", 10.0)),
            ),
            GenericDiscoveryProbe(
                service,
                timeout=float(get_setting(settings, "discovery.generic_timeout", 30.0)),
            ),
        ]
    )

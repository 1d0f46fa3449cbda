"""Discovery probes: MX-based provider shortcut and the generic autodiscovery probe."""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from account_setup.contract import DiscoveryService
from account_setup.servers import (
    DiscoveredSettings,
    DiscoveryNetworkError,
    DiscoveryOutcome,
    Found,
    NetworkFailure,
    NoUsableSettingsFound,
    NotFound,
    ProviderPlaceholderSettings,
    UnexpectedException,
    UnknownFailure,
)

logger = logging.getLogger(__name__)

DEFAULT_DOH_URL = "https://dns.google/resolve"
MX_RECORD_TYPE = 15


class DnsAnswer(BaseModel):
    """One record of a JSON DNS-over-HTTPS answer section."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    type: int
    data: str = ""


class DnsResponse(BaseModel):
    """JSON DNS-over-HTTPS response (Google / Cloudflare format)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: int = Field(0, alias="Status")
    answer: list[DnsAnswer] = Field(default_factory=list, alias="Answer")

    @field_validator("answer", mode="before")
    @classmethod
    def _drop_malformed_records(cls, value: Any) -> Any:
        """Skip records that do not parse instead of rejecting the whole answer."""
        if not isinstance(value, list):
            return value
        records: list[DnsAnswer] = []
        for item in value:
            try:
                records.append(DnsAnswer.model_validate(item))
            except ValidationError:
                continue
        return records


def email_domain(email_address: str) -> str:
    """Domain part of an address, lowercased. Empty when there is no '@'."""
    _, at, domain = email_address.rpartition("@")
    return domain.strip().lower() if at else ""


def mx_hostnames(response: DnsResponse) -> list[str]:
    """Exchange hostnames from MX answers; '10 mx.example.com.' -> 'mx.example.com'."""
    hosts: list[str] = []
    for answer in response.answer:
        if answer.type != MX_RECORD_TYPE:
            continue
        _, _, exchange = answer.data.strip().partition(" ")
        host = exchange.strip().rstrip(".")
        if host:
            hosts.append(host)
    return hosts


async def lookup_mx(
    domain: str,
    doh_url: str = DEFAULT_DOH_URL,
    timeout: float = 10.0,
) -> list[str]:
    """Resolve MX hostnames for domain over DNS-over-HTTPS.

    Raises on transport errors, non-2xx responses and malformed payloads.
    """
    async with httpx.AsyncClient(timeout=timeout) as client:
        resp = await client.get(
            doh_url,
            params={"name": domain, "type": "MX"},
            headers={"Accept": "application/dns-json"},
        )
        resp.raise_for_status()
        response = DnsResponse.model_validate(resp.json())
    if response.status != 0:
        return []
    return mx_hostnames(response)


class MxProviderProbe:
    """Recognizes domains hosted by a known provider from their MX records.

    A match yields trusted placeholder settings. Every failure is a decline
    (None) so the generic probe still runs.
    """

    def __init__(
        self,
        provider_hosts: Iterable[str],
        *,
        doh_url: str = DEFAULT_DOH_URL,
        timeout: float = 10.0,
    ) -> None:
        self._provider_hosts = frozenset(h.strip().rstrip(".").lower() for h in provider_hosts)
        self._doh_url = doh_url
        self._timeout = timeout

    async def attempt(self, email_address: str) -> DiscoveryOutcome | None:
        domain = email_domain(email_address)
        if not domain or not self._provider_hosts:
            return None
        try:
            hosts = await asyncio.wait_for(
                lookup_mx(domain, self._doh_url, self._timeout),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.debug("MX lookup for %s timed out", domain)
            return None
        except Exception as e:
            logger.debug("MX lookup for %s failed: %s", domain, e)
            return None

        matched = next((h for h in hosts if h.lower() in self._provider_hosts), None)
        if matched is None:
            logger.debug("MX hosts for %s not recognized: %s", domain, hosts)
            return None

        logger.info("Domain %s is served by known provider host %s", domain, matched)
        return Found(
            incoming=ProviderPlaceholderSettings(mx_hostname=matched),
            outgoing=None,
            is_trusted=True,
        )


class GenericDiscoveryProbe:
    """Delegates to an autodiscovery service and maps its results 1:1."""

    def __init__(self, service: DiscoveryService, *, timeout: float = 30.0) -> None:
        self._service = service
        self._timeout = timeout

    async def attempt(self, email_address: str) -> DiscoveryOutcome | None:
        try:
            result = await asyncio.wait_for(
                self._service.execute(email_address), timeout=self._timeout
            )
        except (asyncio.TimeoutError, httpx.TransportError) as e:
            detail = str(e) or "timeout"
            logger.warning("Autodiscovery network failure: %s", detail)
            return NetworkFailure(detail=detail)
        except Exception as e:
            logger.warning("Autodiscovery failed unexpectedly: %s", e)
            return UnknownFailure(detail=str(e))

        match result:
            case NoUsableSettingsFound():
                return NotFound()
            case DiscoveredSettings(incoming=incoming, outgoing=outgoing, is_trusted=trusted):
                return Found(incoming=incoming, outgoing=outgoing, is_trusted=trusted)
            case DiscoveryNetworkError(cause=cause):
                logger.warning("Autodiscovery network error: %s", cause)
                return NetworkFailure(detail=str(cause or ""))
            case UnexpectedException(cause=cause):
                logger.warning("Autodiscovery unexpected error: %s", cause)
                return UnknownFailure(detail=str(cause or ""))
            case _:
                logger.warning("Autodiscovery returned unknown result %r", result)
                return UnknownFailure(detail=f"unknown result {type(result).__name__}")

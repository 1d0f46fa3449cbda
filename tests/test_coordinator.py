"""Tests for account_setup.coordinator."""

import httpx
import pytest

from account_setup.coordinator import DiscoveryCoordinator, build_coordinator
from account_setup.known_providers import KnownProvidersDiscovery
from account_setup.servers import (
    Found,
    ImapServerSettings,
    NetworkFailure,
    NotFound,
    ProviderPlaceholderSettings,
)
from conftest import FakeProbe

FOUND = Found(incoming=ImapServerSettings(hostname="imap.example.org"), is_trusted=True)


@pytest.mark.asyncio
async def test_first_answer_short_circuits() -> None:
    """First non-declining answer stops the chain."""
    fast = FakeProbe(FOUND)
    generic = FakeProbe(NotFound())
    outcome = await DiscoveryCoordinator([fast, generic]).discover("a@example.org")
    assert outcome is FOUND
    assert generic.calls == []


@pytest.mark.asyncio
async def test_decline_falls_through_to_next_probe() -> None:
    """A decline hands the address to the next step."""
    fast = FakeProbe(None)
    generic = FakeProbe(NetworkFailure())
    outcome = await DiscoveryCoordinator([fast, generic]).discover("a@example.org")
    assert isinstance(outcome, NetworkFailure)
    assert fast.calls == generic.calls == ["a@example.org"]


@pytest.mark.asyncio
async def test_all_probes_declining_is_not_found() -> None:
    """Everything declining is NotFound."""
    outcome = await DiscoveryCoordinator([FakeProbe(None), FakeProbe(None)]).discover("a@b.org")
    assert outcome == NotFound()


@pytest.mark.asyncio
async def test_generic_result_is_returned_verbatim() -> None:
    """Generic outcome is returned unchanged."""
    outcome = await DiscoveryCoordinator([FakeProbe(None), FakeProbe(FOUND)]).discover("a@b.org")
    assert outcome is FOUND


SETTINGS = {
    "discovery": {
        "doh_url": "https://dns.google/resolve",
        "mx_timeout": 2,
        "generic_timeout": 5,
        "provider_mx_hosts": ["serv2.cyberv.co.za"],
    }
}


@pytest.mark.asyncio
async def test_built_coordinator_uses_mx_shortcut(httpx_mock) -> None:
    """Coordinator built from settings matches the provider MX hosts."""
    httpx_mock.add_response(
        url="https://dns.google/resolve?name=gmail.com&type=MX",
        json={"Status": 0, "Answer": [{"type": 15, "data": "10 serv2.cyberv.co.za."}]},
    )
    coordinator = build_coordinator(KnownProvidersDiscovery(), SETTINGS)
    outcome = await coordinator.discover("bob@gmail.com")
    assert isinstance(outcome, Found)
    assert isinstance(outcome.incoming, ProviderPlaceholderSettings)


@pytest.mark.asyncio
async def test_built_coordinator_falls_back_when_dns_fails(httpx_mock) -> None:
    """DNS failure falls back to the discovery service."""
    httpx_mock.add_exception(
        httpx.ConnectError("no route"),
        url="https://dns.google/resolve?name=gmail.com&type=MX",
    )
    coordinator = build_coordinator(KnownProvidersDiscovery(), SETTINGS)
    outcome = await coordinator.discover("bob@gmail.com")
    assert isinstance(outcome, Found)
    assert outcome.incoming.hostname == "imap.gmail.com"


@pytest.mark.asyncio
async def test_built_coordinator_honours_resolver_url(httpx_mock) -> None:
    """DoH endpoint comes from discovery.doh_url."""
    settings = {
        "discovery": {**SETTINGS["discovery"], "doh_url": "https://cloudflare-dns.com/dns-query"}
    }
    httpx_mock.add_response(
        url="https://cloudflare-dns.com/dns-query?name=example.co.za&type=MX",
        json={"Status": 0, "Answer": [{"type": 15, "data": "10 serv2.cyberv.co.za."}]},
    )
    outcome = await build_coordinator(KnownProvidersDiscovery(), settings).discover("bob@example.co.za")
    assert outcome == Found(
        incoming=ProviderPlaceholderSettings(mx_hostname="serv2.cyberv.co.za"),
        outgoing=None,
        is_trusted=True,
    )


@pytest.mark.asyncio
async def test_built_coordinator_without_settings_skips_mx_lookup(httpx_mock) -> None:
    """Missing discovery section means no provider hosts and no DNS request."""
    coordinator = build_coordinator(KnownProvidersDiscovery(), {})
    outcome = await coordinator.discover("bob@gmail.com")
    assert outcome.incoming.hostname == "imap.gmail.com"
    assert httpx_mock.get_requests() == []

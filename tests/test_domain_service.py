# /tests/test_domain_service.py

from datetime import timedelta

import httpx
import pytest
from unittest.mock import AsyncMock

from namer.db.database import utcnow
from namer.services import domain_service


def _use_transport(mocker, handler):
    """Routes every AsyncClient created by the domain service through `handler`."""
    real_client = httpx.AsyncClient
    mocker.patch.object(
        domain_service.httpx,
        "AsyncClient",
        side_effect=lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )


# --- Normalisation ---

@pytest.mark.parametrize("raw, expected", [
    ("https://www.Example.com/", "example.com"),
    ("  brewly.io ", "brewly.io"),
    ("http://shop.brewly.co", "shop.brewly.co"),
])
def test_format_domain(raw, expected):
    assert domain_service.format_domain(raw) == expected


@pytest.mark.parametrize("domain, message", [
    ("", "cannot be empty"),
    ("brewly", "must include TLD"),
    ("brew ly.com", "Invalid domain format"),
    ("-brewly.com", "Invalid domain format"),
])
def test_validate_domain_rejects(domain, message):
    with pytest.raises(ValueError, match=message):
        domain_service.validate_domain(domain)


def test_sanitize_business_name():
    assert domain_service.sanitize_business_name("Brew & Co.") == "brewco"
    with pytest.raises(ValueError):
        domain_service.sanitize_business_name("!!!")


# --- Remote lookup ---

@pytest.mark.asyncio
async def test_lookup_reads_domains_list(mocker):
    def handler(request):
        assert request.url.params["domain"] == "brewly"
        assert request.url.params["zone"] == "com"
        return httpx.Response(200, json={"domains": [{"domain": "brewly.com"}]})

    _use_transport(mocker, handler)

    result = await domain_service.lookup_domain_availability("brewly.com")

    assert result == {"domain": "brewly.com", "available": False, "status": "taken"}


@pytest.mark.asyncio
async def test_lookup_treats_404_as_available(mocker):
    _use_transport(mocker, lambda request: httpx.Response(404))

    result = await domain_service.lookup_domain_availability("brewly.io")

    assert result["available"] is True
    assert result["status"] == "available"


@pytest.mark.asyncio
async def test_lookup_falls_back_to_whois(mocker):
    def handler(request):
        if request.url.host == "api.domainsdb.info":
            return httpx.Response(200, json={"total": 0})
        return httpx.Response(200, json={"available": True})

    _use_transport(mocker, handler)

    result = await domain_service.lookup_domain_availability("brewly.net")

    assert result["available"] is True


@pytest.mark.asyncio
async def test_lookup_wraps_server_errors(mocker):
    _use_transport(mocker, lambda request: httpx.Response(503))

    with pytest.raises(domain_service.DomainLookupError):
        await domain_service.lookup_domain_availability("brewly.com")


# --- Cached checks ---

@pytest.mark.asyncio
async def test_check_domain_caches_successful_lookups(db_service, mocker):
    lookup = mocker.patch.object(
        domain_service,
        "lookup_domain_availability",
        AsyncMock(return_value={"domain": "brewly.com", "available": True, "status": "available"}),
    )

    first = await domain_service.check_domain(db_service, "Brewly.com")
    second = await domain_service.check_domain(db_service, "brewly.com")

    assert first["cached"] is False
    assert second["cached"] is True
    assert second["available"] is True
    lookup.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_domain_reports_errors_without_caching(db_service, mocker):
    mocker.patch.object(
        domain_service,
        "lookup_domain_availability",
        AsyncMock(side_effect=domain_service.DomainLookupError("Network error: boom")),
    )

    result = await domain_service.check_domain(db_service, "brewly.com")

    assert result["status"] == "error"
    assert result["available"] is None
    assert db_service.get_fresh_domain_cache("brewly.com") is None


@pytest.mark.asyncio
async def test_stale_domain_cache_is_refreshed(db_service, mocker):
    entry = db_service.store_domain_cache("brewly.com", False)
    entry.checked_at = utcnow() - timedelta(hours=30)
    db_service.session.commit()
    mocker.patch.object(
        domain_service,
        "lookup_domain_availability",
        AsyncMock(return_value={"domain": "brewly.com", "available": True, "status": "available"}),
    )

    result = await domain_service.check_domain(db_service, "brewly.com")

    assert result["cached"] is False
    assert result["available"] is True


@pytest.mark.asyncio
async def test_check_names_covers_every_tld_and_skips_unusable_names(db_service, mocker):
    async def fake_lookup(domain):
        return {"domain": domain, "available": domain.endswith(".io"), "status": "available"}

    mocker.patch.object(domain_service, "lookup_domain_availability", side_effect=fake_lookup)

    results = await domain_service.check_names(db_service, ["Brewly", "???"])

    assert set(results["Brewly"]) == {"brewly.com", "brewly.io", "brewly.co", "brewly.net"}
    assert results["Brewly"]["brewly.io"]["available"] is True
    assert results["???"] == {}

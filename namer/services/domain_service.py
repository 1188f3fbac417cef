# /namer/services/domain_service.py

"""
Domain availability checks for generated names.

Results are cached in DomainCache for 24 hours keyed by the exact domain.
A failed lookup is reported as status "error" instead of raising, so callers
can treat domain data as best-effort.
"""

import logging
import re
from typing import Dict, List

import httpx

from ..core import config
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

SUPPORTED_TLDS = ["com", "io", "co", "net"]
DOMAINSDB_URL = "https://api.domainsdb.info/v1/domains/search"
WHOIS_URL = "https://api.whoisjson.com/v1/whois"

_INVALID_CHARS = re.compile(r"[\s@!_]")
_DOMAIN_PATTERN = re.compile(
    r"^[a-z0-9]([a-z0-9\-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9\-]*[a-z0-9])?)*\.[a-z]{2,}$",
    re.IGNORECASE,
)


class DomainLookupError(Exception):
    pass


# --- Normalisation & validation ---

def format_domain(domain: str) -> str:
    domain = domain.strip().lower()
    domain = re.sub(r"^https?://", "", domain, flags=re.IGNORECASE)
    domain = re.sub(r"^www\.", "", domain, flags=re.IGNORECASE)
    return domain.rstrip("/")


def validate_domain(domain: str) -> None:
    if not domain:
        raise ValueError("Domain name cannot be empty")
    if "." not in domain:
        raise ValueError("Domain must include TLD")
    if _INVALID_CHARS.search(domain) or not _DOMAIN_PATTERN.match(domain):
        raise ValueError("Invalid domain format")


def sanitize_business_name(business_name: str) -> str:
    sanitized = re.sub(r"[^a-z0-9]", "", business_name.strip().lower())
    if not sanitized:
        raise ValueError("Business name produces empty domain")
    return sanitized


# --- Remote lookups ---

def _availability_result(domain: str, available: bool) -> Dict:
    return {"domain": domain, "available": available, "status": "available" if available else "taken"}


async def _check_via_whois(client: httpx.AsyncClient, domain: str) -> Dict:
    response = await client.get(WHOIS_URL, params={"domain": domain})
    if response.status_code >= 400:
        raise DomainLookupError("WHOIS API failed")
    data = response.json()
    if "available" not in data:
        raise DomainLookupError("Invalid response format from domain API")
    return _availability_result(domain, data["available"] is True)


async def lookup_domain_availability(domain: str) -> Dict:
    """Asks the registry APIs about one domain. Raises DomainLookupError on failure."""
    name, _, tld = domain.partition(".")
    try:
        async with httpx.AsyncClient(timeout=config.DOMAIN_CHECK_TIMEOUT_SECONDS) as client:
            response = await client.get(DOMAINSDB_URL, params={"domain": name, "zone": tld})
            if response.status_code == 408:
                raise DomainLookupError("Timeout checking domain availability")
            if response.status_code >= 400 and response.status_code != 404:
                raise DomainLookupError(f"Domain API request failed with status {response.status_code}")

            data = response.json() if response.status_code != 404 else {"domains": []}
            if "available" in data:
                return _availability_result(domain, bool(data["available"]))
            if "domains" in data:
                registered = {
                    (entry.get("domain") or "").lower()
                    for entry in data.get("domains") or []
                }
                return _availability_result(domain, domain not in registered)
            return await _check_via_whois(client, domain)
    except httpx.HTTPError as e:
        raise DomainLookupError(f"Network error: {e}") from e
    except ValueError as e:
        raise DomainLookupError(f"Invalid response from domain API: {e}") from e


# --- Public operations ---

async def check_domain(db: DatabaseService, domain: str) -> Dict:
    domain = format_domain(domain)
    validate_domain(domain)

    cached = db.get_fresh_domain_cache(domain)
    if cached is not None:
        return {
            "domain": domain,
            "available": cached.available,
            "status": "available" if cached.available else "taken",
            "cached": True,
            "checked_at": cached.checked_at.isoformat(),
        }

    try:
        result = await lookup_domain_availability(domain)
    except DomainLookupError as e:
        logger.warning("Domain check failed for %s: %s", domain, e)
        return {
            "domain": domain,
            "available": None,
            "status": "error",
            "error": str(e),
            "cached": False,
            "checked_at": None,
        }

    entry = db.store_domain_cache(domain, result["available"])
    return {**result, "cached": False, "checked_at": entry.checked_at.isoformat()}


async def check_business_name(db: DatabaseService, business_name: str) -> Dict[str, Dict]:
    """Checks `<name>.<tld>` for every supported TLD, keyed by full domain."""
    base = sanitize_business_name(business_name)
    results = {}
    for tld in SUPPORTED_TLDS:
        domain = f"{base}.{tld}"
        results[domain] = await check_domain(db, domain)
    return results


async def check_names(db: DatabaseService, names: List[str]) -> Dict[str, Dict]:
    """
    Domain results for a list of generated names, keyed by name. A name that
    cannot be turned into a domain maps to an empty dict.
    """
    results: Dict[str, Dict] = {}
    for name in names:
        try:
            results[name] = await check_business_name(db, name)
        except ValueError as e:
            logger.warning("Skipping domain check for '%s': %s", name, e)
            results[name] = {}
    return results


def clear_expired_cache(db: DatabaseService) -> int:
    return db.clear_expired_domain_cache()

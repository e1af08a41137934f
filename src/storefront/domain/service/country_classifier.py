"""Country Classifier: maps an ISO 3166-1 alpha-2 code to a shipping zone.

Pure lookup over static membership tables; unknown or malformed codes
resolve to ``UNSUPPORTED`` and never raise.
"""

from __future__ import annotations

from storefront.domain.model.shipping import ShippingZone

BALTIC_COUNTRIES = frozenset({"LT", "LV", "EE"})

INTERNATIONAL_COUNTRIES = frozenset({"PL", "FI"})

# Served by the international carrier.  GB, NO and CH are not EU members
# but ship on identical terms.
EU_COUNTRIES = frozenset({
    "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "FR", "DE", "GR",
    "HU", "IE", "IT", "LU", "MT", "NL", "PT", "RO", "SK", "SI",
    "ES", "SE", "GB", "NO", "CH",
})

NORTH_AMERICA_COUNTRIES = frozenset({"US", "CA"})

_ZONES: tuple[tuple[frozenset[str], ShippingZone], ...] = (
    (BALTIC_COUNTRIES, ShippingZone.BALTIC),
    (INTERNATIONAL_COUNTRIES, ShippingZone.INTERNATIONAL),
    (EU_COUNTRIES, ShippingZone.EU),
    (NORTH_AMERICA_COUNTRIES, ShippingZone.NORTH_AMERICA),
)


def normalize_country(country_code: str | None) -> str:
    return (country_code or "").strip().upper()


def classify(country_code: str | None) -> ShippingZone:
    code = normalize_country(country_code)
    for members, zone in _ZONES:
        if code in members:
            return zone
    return ShippingZone.UNSUPPORTED


def is_valid_country_code(country_code: str | None) -> bool:
    """Format check only: two ASCII letters."""
    code = normalize_country(country_code)
    return len(code) == 2 and code.isascii() and code.isalpha()

"""Tax rate table entries and jurisdiction extraction.

Jurisdiction keys are lower-cased and trimmed on both sides of the lookup,
so "Texas", " texas " and "TEXAS" all match the same entry.

B2B companies without explicit country/state fields fall back to parsing the
free-text company address: the last comma-separated token is the country and
the one before it the state. Known failure modes of that heuristic:

- "Austin, TX 78701, USA" yields state "tx 78701", which matches no entry.
- An address without commas is read as a bare country.
- A trailing postal code ("..., Texas, 78701") is read as the country.

Unmatched jurisdictions fall through to zero tax; they are never guessed.
"""

from dataclasses import dataclass

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String

from checkout.domain import checkout


def normalize_location(value) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    return trimmed.lower()


@dataclass(frozen=True)
class Jurisdiction:
    country: str | None = None
    state: str | None = None

    @property
    def country_key(self) -> str | None:
        return normalize_location(self.country)

    @property
    def state_key(self) -> str | None:
        return normalize_location(self.state)


def parse_free_text_address(address) -> Jurisdiction:
    """Best-effort split of "street, city, state, country"."""
    if not isinstance(address, str):
        return Jurisdiction()
    parts = [part.strip() for part in address.split(",") if part.strip()]
    if not parts:
        return Jurisdiction()
    country = parts[-1]
    state = parts[-2] if len(parts) > 1 else None
    return Jurisdiction(country=country, state=state)


def company_jurisdiction(company) -> Jurisdiction:
    """Explicit company country/state when either is set, else the parsed address."""
    if company is None:
        return Jurisdiction()
    if company.country or company.state:
        return Jurisdiction(country=company.country or None, state=company.state or None)
    return parse_free_text_address(company.address)


def billing_jurisdiction(billing) -> Jurisdiction:
    if billing is None:
        return Jurisdiction()
    return Jurisdiction(country=billing.country or None, state=billing.state or None)


@checkout.value_object
class TaxRateEntry:
    """One row of the tax rate table.

    ``country`` and ``state`` are display names; the keys are what lookups
    match on.
    """

    country_key: String(max_length=100)
    state_key: String(max_length=100)
    country: String(max_length=100)
    state: String(max_length=100)
    rate: Float(required=True, min_value=0.0, max_value=100.0)

    @invariant.post
    def needs_a_country_or_state(self):
        if self.country_key is None and self.state_key is None:
            raise ValidationError({"country_key": ["A tax rate needs a country or a state"]})

    @invariant.post
    def keys_must_be_normalized(self):
        for name in ("country_key", "state_key"):
            key = getattr(self, name)
            if key is not None and key != normalize_location(key):
                raise ValidationError({name: ["Lookup keys are stored trimmed and lower-case"]})

    @classmethod
    def create(cls, rate, country=None, state=None):
        """Build an entry from display names, deriving the lookup keys."""
        return cls(
            country_key=normalize_location(country),
            state_key=normalize_location(state),
            country=country.strip() if normalize_location(country) else None,
            state=state.strip() if normalize_location(state) else None,
            rate=rate,
        )

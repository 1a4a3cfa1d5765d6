"""Tax resolution: purchaser jurisdiction -> rate -> amount."""

import structlog
from protean.fields import Float, String

from checkout.customer.purchaser import Purchaser
from checkout.domain import checkout
from checkout.lookups.port import TaxRateLookup
from checkout.shared.money import percent_of
from checkout.tax.rates import Jurisdiction, TaxRateEntry, billing_jurisdiction, company_jurisdiction

logger = structlog.get_logger(__name__)


@checkout.value_object
class TaxAssessment:
    """Tax applied to a draft. Zero rate and amount, no jurisdiction, when untaxed."""

    rate: Float(default=0.0, min_value=0.0, max_value=100.0)
    amount: Float(default=0.0, min_value=0.0)
    country: String(max_length=100)
    state: String(max_length=100)

    @classmethod
    def untaxed(cls):
        return cls()


def purchaser_jurisdiction(purchaser: Purchaser) -> Jurisdiction:
    if purchaser.is_b2b:
        return company_jurisdiction(purchaser.company)
    if purchaser.is_c2b:
        return billing_jurisdiction(purchaser.billing_address)
    return Jurisdiction()


def display_name(name: str | None, key: str | None, requested: str | None) -> str | None:
    """Entry display name; the purchaser's own spelling when the entry only carries a key."""
    if name:
        return name
    if key is None:
        return None
    return requested.strip() if requested and requested.strip() else key


def find_matching_tax_rate(jurisdiction: Jurisdiction, tax_rates: TaxRateLookup) -> TaxRateEntry | None:
    """Exact country+state, then country-only, then state-only. First hit wins."""
    country_key = jurisdiction.country_key
    state_key = jurisdiction.state_key

    match = None
    if country_key and state_key:
        match = tax_rates.find_tax_rate(country_key, state_key)
    if match is None and country_key:
        match = tax_rates.find_tax_rate(country_key, None)
    if match is None and state_key:
        match = tax_rates.find_tax_rate(None, state_key)
    return match


def resolve_tax(purchaser: Purchaser, discounted_subtotal: float, tax_rates: TaxRateLookup) -> TaxAssessment:
    # Standard clients are never taxed through checkout.
    if not (purchaser.is_b2b or purchaser.is_c2b) or purchaser.tax_exempt:
        return TaxAssessment.untaxed()

    jurisdiction = purchaser_jurisdiction(purchaser)
    match = find_matching_tax_rate(jurisdiction, tax_rates)
    if match is None:
        logger.debug(
            "No tax rate for jurisdiction",
            purchaser_id=purchaser.id,
            country=jurisdiction.country_key,
            state=jurisdiction.state_key,
        )
        return TaxAssessment.untaxed()

    return TaxAssessment(
        rate=match.rate,
        amount=percent_of(discounted_subtotal, match.rate),
        country=display_name(match.country, match.country_key, jurisdiction.country),
        state=display_name(match.state, match.state_key, jurisdiction.state),
    )

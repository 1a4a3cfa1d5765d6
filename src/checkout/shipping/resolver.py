"""Shipping resolution: carrier quote if supplied, flat-rate table otherwise."""

from protean.fields import Float, String, ValueObject

from checkout.config import DEFAULT_FLAT_RATES
from checkout.domain import checkout
from checkout.shared.money import round_money
from checkout.shipping.rates import CarrierRate, ShippingMethod


@checkout.value_object
class ShippingQuote:
    method: String(required=True, max_length=255)
    cost: Float(default=0.0, min_value=0.0)
    rate: ValueObject(CarrierRate)


def resolve_shipping(method=None, carrier_rate: CarrierRate | None = None, flat_rates=None) -> ShippingQuote:
    """Price shipping for a draft.

    A carrier rate always wins over the method keyword. Costs never go
    below zero.
    """
    if carrier_rate is not None:
        return ShippingQuote(
            method=carrier_rate.label,
            cost=round_money(max(0.0, carrier_rate.price)),
            rate=carrier_rate,
        )

    rates = flat_rates if flat_rates is not None else DEFAULT_FLAT_RATES
    shipping_method = ShippingMethod.parse(method)
    cost = rates.get(shipping_method.value, 0.0)
    return ShippingQuote(method=shipping_method.value, cost=round_money(max(0.0, cost)))

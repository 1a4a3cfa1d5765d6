"""Shared BDD fixtures and step definitions for checkout pricing."""

import pytest
from pytest_bdd import given, parsers, then

from checkout.catalogue.inventory import Inventory
from checkout.catalogue.product import Product
from checkout.coupon.coupon import Coupon, DiscountType
from checkout.customer.purchaser import ClientType, Company, Purchaser
from checkout.errors import RejectionReport
from checkout.order.draft import OrderDraft
from checkout.shared.values import replace
from checkout.tax.rates import TaxRateEntry


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalog():
    """Products on sale in the scenario, by id."""
    return {}


@pytest.fixture()
def coupons():
    return []


@pytest.fixture()
def tax_rates():
    return []


@pytest.fixture()
def options():
    """Pricing options the client submits with the cart."""
    return {}


# ---------------------------------------------------------------------------
# Given steps: purchasers
# ---------------------------------------------------------------------------
@given("a standard client", target_fixture="purchaser")
def standard_client():
    return Purchaser(id="cust-1", client_type=ClientType.STANDARD.value)


@given(parsers.cfparse('a verified B2B client based at "{address}"'), target_fixture="purchaser")
def verified_b2b_client(address):
    return Purchaser(
        id="cust-b2b",
        client_type=ClientType.B2B.value,
        has_verification=True,
        company=Company(name="Acme", address=address),
    )


# ---------------------------------------------------------------------------
# Given steps: catalog, coupons and tax table
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{product_id}" priced at {price:f} with {quantity:d} in stock'))
def product_in_stock(catalog, product_id, price, quantity):
    catalog[product_id] = Product(
        id=product_id,
        name=f"Product {product_id}",
        price=price,
        inventory=Inventory(quantity=quantity),
    )


@given(parsers.cfparse('"{product_id}" is on sale for {sale_price:f}'))
def product_on_sale(catalog, product_id, sale_price):
    catalog[product_id] = replace(catalog[product_id], sale_price=sale_price)


@given(parsers.cfparse('"{product_id}" belongs to category "{category_id}"'))
def product_in_category(catalog, product_id, category_id):
    catalog[product_id] = replace(catalog[product_id], category_id=category_id)


@given(parsers.cfparse('a fixed coupon "{code}" worth {amount:f}'))
def fixed_coupon(coupons, code, amount):
    coupons.append(Coupon.create(code, DiscountType.FIXED, amount))


@given(parsers.cfparse('a {amount:d} percent coupon "{code}" for category "{category_id}"'))
def category_coupon(coupons, amount, code, category_id):
    coupons.append(Coupon.create(code, DiscountType.PERCENTAGE, amount, category_ids={category_id}))


@given(parsers.cfparse('a tax rate of {rate:d} percent for state "{state}" in "{country}"'))
def state_tax_rate(tax_rates, rate, state, country):
    tax_rates.append(TaxRateEntry.create(rate, country=country, state=state))


# ---------------------------------------------------------------------------
# Given steps: pricing options
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the client asks for "{method}" shipping'))
def shipping_method(options, method):
    options["shipping_method"] = method


@given(parsers.cfparse('the client picked the "{carrier}" "{service}" rate at {price:f}'))
def carrier_rate(options, carrier, service, price):
    options["shipping_rate"] = {
        "rate_id": "rate-1",
        "carrier_name": carrier,
        "service_name": service,
        "price": price,
        "currency": "usd",
    }


@given(parsers.cfparse('the client enters coupon "{code}"'))
def coupon_code(options, code):
    options["coupon_code"] = code


# ---------------------------------------------------------------------------
# Then steps: drafts
# ---------------------------------------------------------------------------
def _draft(outcome) -> OrderDraft:
    assert isinstance(outcome, OrderDraft), f"Expected a draft, got {outcome!r}"
    return outcome


def _line(outcome, product_id):
    return next(line for line in _draft(outcome).lines if line.product_id == product_id)


@then(parsers.cfparse("the draft subtotal is {amount:f}"))
def draft_subtotal_is(outcome, amount):
    assert _draft(outcome).subtotal == amount


@then(parsers.cfparse("the draft discount is {amount:f}"))
def draft_discount_is(outcome, amount):
    assert _draft(outcome).discount_amount == amount


@then(parsers.cfparse("the draft tax is {amount:f}"))
def draft_tax_is(outcome, amount):
    assert _draft(outcome).tax_amount == amount


@then(parsers.cfparse("the draft shipping cost is {amount:f}"))
def draft_shipping_cost_is(outcome, amount):
    assert _draft(outcome).shipping_cost == amount


@then(parsers.cfparse("the draft total is {amount:f}"))
def draft_total_is(outcome, amount):
    assert _draft(outcome).total == amount


@then(parsers.cfparse('the draft carries coupon "{code}"'))
def draft_carries_coupon(outcome, code):
    assert _draft(outcome).coupon.code == code


@then(parsers.cfparse('the draft is taxed for state "{state}" in "{country}"'))
def draft_taxed_for(outcome, state, country):
    tax = _draft(outcome).tax
    assert (tax.country, tax.state) == (country, state)


@then(parsers.cfparse('the draft ships with "{method}"'))
def draft_ships_with(outcome, method):
    assert _draft(outcome).shipping.method == method


@then(parsers.cfparse('the line for "{product_id}" is priced at {price:f}'))
def line_priced_at(outcome, product_id, price):
    assert _line(outcome, product_id).unit_price == price


@then(parsers.cfparse('the line for "{product_id}" is tagged "{tags}"'))
def line_tagged(outcome, product_id, tags):
    assert _line(outcome, product_id).tags == tags.split(", ")


# ---------------------------------------------------------------------------
# Then steps: rejections
# ---------------------------------------------------------------------------
def _report(outcome) -> RejectionReport:
    assert isinstance(outcome, RejectionReport), f"Expected a rejection, got {outcome!r}"
    return outcome


@then(parsers.cfparse('the checkout is rejected as "{kind}"'))
def checkout_rejected_as(outcome, kind):
    assert _report(outcome).kind.value == kind


@then(parsers.cfparse('the rejection codes are "{codes}"'))
def rejection_codes_are(outcome, codes):
    assert _report(outcome).codes == codes.split(", ")


@then(parsers.cfparse('"{product_id}" is reported short with {available:d} available of {requested:d} requested'))
def reported_short(outcome, product_id, available, requested):
    assert _report(outcome).as_dict()["violations"] == [
        {
            "code": "insufficient_stock",
            "product_id": product_id,
            "available_quantity": available,
            "requested_quantity": requested,
        }
    ]

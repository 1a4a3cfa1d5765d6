"""Checkout bounded context: cart pricing and fulfillment eligibility.

Everything checkout produces is a value object: drafts, quotes and
assessments are computed from read-only snapshots and never persisted here.
"""

from protean.domain import Domain

checkout = Domain(name="checkout")

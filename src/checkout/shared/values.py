"""Helpers for working with immutable value objects."""

from protean.utils.reflection import declared_fields


def replace(value_object, **changes):
    """Copy of ``value_object`` with ``changes`` applied.

    Value objects cannot be mutated; changing a field means building a new one.
    """
    values = {name: getattr(value_object, name) for name in declared_fields(type(value_object))}
    values.update(changes)
    return type(value_object)(**values)

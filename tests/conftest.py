import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Pins the environment so logging and settings resolve the same way on every machine.
    """
    os.environ["CHECKOUT_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def _checkout_domain():
    """Initialize the checkout domain once per session."""
    from checkout.domain import checkout

    checkout.init()
    return checkout


@pytest.fixture(autouse=True)
def run_around_tests(_checkout_domain):
    """Push domain context before each test, reset the lookup singleton after."""
    ctx = _checkout_domain.domain_context()
    ctx.push()

    yield

    from checkout.lookups import reset_lookups

    reset_lookups()
    ctx.pop()

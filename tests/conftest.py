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

    Sets the environment before any bounded context is imported, so logging is
    configured for it when the context modules load.
    """
    os.environ["ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Reset every adapter singleton after each test"""
    yield

    from modeling.cipher import reset_cipher
    from ordering.address import reset_address_validator
    from ordering.carrier import reset_carrier
    from ordering.inventory import reset_inventory
    from ordering.payment import reset_gateway
    from shared.bus import reset_event_bus

    reset_cipher()
    reset_address_validator()
    reset_carrier()
    reset_inventory()
    reset_gateway()
    reset_event_bus()

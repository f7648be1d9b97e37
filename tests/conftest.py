"""Shared pytest fixtures for beanwire tests."""

import pytest

from beanwire import Container, Lifetime


@pytest.fixture()
def container() -> Container:
    """Default container: singleton lifetime, eager instantiation."""
    return Container()


@pytest.fixture()
def transient_container() -> Container:
    """Container with transient lifetime as default."""
    return Container(default_lifetime=Lifetime.TRANSIENT)

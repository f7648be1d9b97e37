from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import Any

import pytest

from beanwire import BeanwireInvalidRegistrationError, Container, Lifetime


class Service:
    pass


class AbstractService(ABC):
    @abstractmethod
    def run(self) -> None: ...


def build_service(label: str) -> Service:  # noqa: ARG001
    return Service()


def test_add_factory_rejects_non_callables(container: Container) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="must be callable"):
        container.add_factory(42, name="answer")  # type: ignore[call-overload]


def test_add_factory_rejects_abstract_classes(container: Container) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="abstract class"):
        container.add_factory(AbstractService, name="service")


@pytest.mark.parametrize("name", ["", "   ", 42])
def test_add_factory_rejects_invalid_names(container: Container, name: Any) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="parameter 'name'"):
        container.add_factory(Service, name=name)


def test_add_factory_requires_a_name_when_it_cannot_be_inferred(container: Container) -> None:
    factory = functools.partial(build_service, "primary")

    with pytest.raises(BeanwireInvalidRegistrationError, match="parameter 'name'"):
        container.add_factory(factory)

    container.add_factory(factory, name="primary_service")
    assert container.get_bean_names() == ["primary_service"]


def test_add_factory_infers_name_from_the_factory(container: Container) -> None:
    container.add_factory(Service)

    @container.add_factory()
    def service_factory() -> Service:
        return Service()

    assert container.get_bean_names() == ["Service", "service_factory"]


def test_add_factory_rejects_invalid_lifetime(container: Container) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="parameter 'lifetime'"):
        container.add_factory(Service, lifetime="singleton")  # type: ignore[call-overload]


def test_add_factory_rejects_invalid_lazy_flag(container: Container) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="parameter 'lazy'"):
        container.add_factory(Service, lazy="yes")  # type: ignore[call-overload]


def test_add_factory_rejects_invalid_provides(container: Container) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="parameter 'provides'"):
        container.add_factory(Service, provides="service")  # type: ignore[call-overload]


def test_add_factory_accepts_explicit_provides(container: Container) -> None:
    container.add_factory(lambda: Service(), name="service", provides=Service)

    assert isinstance(container.get_or_create(Service), Service)


def test_explicit_dependencies_must_match_parameters(container: Container) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="unknown parameter 'missing'"):
        container.add_factory(build_service, dependencies={"missing": "label"})


def test_explicit_dependencies_must_be_names_or_classes(container: Container) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="bean name or a class"):
        container.add_factory(build_service, dependencies={"label": 42})  # type: ignore[dict-item]


def test_add_instance_requires_a_name(container: Container) -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="add_instance"):
        container.add_instance(Service(), name="")


def test_container_rejects_invalid_defaults() -> None:
    with pytest.raises(BeanwireInvalidRegistrationError, match="Container"):
        Container(default_lifetime="singleton")  # type: ignore[arg-type]

    with pytest.raises(BeanwireInvalidRegistrationError, match="Container"):
        Container(Lifetime.SINGLETON, lazy_init=None)  # type: ignore[arg-type]


def test_failed_registration_leaves_the_container_unchanged(container: Container) -> None:
    container.add_factory(Service, name="service")

    with pytest.raises(BeanwireInvalidRegistrationError):
        container.add_factory(
            Service,
            name="service",
            lifetime="bogus",  # type: ignore[arg-type]
        )

    assert len(container) == 1
    assert container.is_singleton("service") is True

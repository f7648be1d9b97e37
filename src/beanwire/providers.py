from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from inspect import Parameter
from typing import Any, TypeAlias, TypeVar, get_type_hints

from beanwire._internal.type_checks import is_bean_type

T = TypeVar("T")

BeanName: TypeAlias = str
"""The unique name a bean is registered under."""

BeanKey: TypeAlias = "BeanName | type[Any]"
"""A lookup key: either a bean name or a type the bean provides."""

FactoryProvider: TypeAlias = Callable[..., T]
"""A callable that produces a bean instance."""


class Lifetime(Enum):
    """Defines the lifetime of a bean in the container."""

    TRANSIENT = auto()
    """A new instance is created every time the bean is requested."""

    SINGLETON = auto()
    """A single instance is created and shared for the lifetime of the container."""


@dataclass(slots=True)
class ProviderDependency:
    """Represents a dependency required by a provider.

    ``provides`` is a runtime class when the parameter annotation resolves to
    one, otherwise the parameter name.
    """

    provides: BeanKey
    parameter: Parameter

    @property
    def is_required(self) -> bool:
        """Return true when the parameter has no default value."""
        return self.parameter.default is Parameter.empty


@dataclass(kw_only=True)
class ProviderSpec:
    """A specification of a bean provider registered in the container."""

    name: BeanName
    """The unique bean name."""
    provides: type[Any] | None = None
    """The type the factory produces, when known."""
    factory: FactoryProvider[Any]
    """The callable invoked to create the bean."""
    lifetime: Lifetime
    """The lifetime of the produced bean."""
    lazy: bool = False
    """Skip this bean during eager singleton instantiation."""
    dependencies: list[ProviderDependency] = field(default_factory=list)
    """Parameters injected into the factory on each call."""

    @property
    def is_singleton(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON

    def matches_type(self, dep_type: type[Any]) -> bool:
        """Check whether this provider produces instances of ``dep_type``."""
        return self.provides is not None and issubclass(self.provides, dep_type)


class ProvidersRegistrations:
    """Holds all provider specifications registered in the container.

    Iteration follows registration order. Re-registering a name replaces the
    previous spec but keeps the name's original position.
    """

    def __init__(self) -> None:
        self._registrations_by_name: dict[BeanName, ProviderSpec] = {}

    def add(self, spec: ProviderSpec) -> ProviderSpec | None:
        """Add a provider specification, returning the one it replaced."""
        previous = self._registrations_by_name.get(spec.name)
        self._registrations_by_name[spec.name] = spec
        return previous

    def find_by_name(self, name: BeanName) -> ProviderSpec | None:
        """Get a provider specification by bean name, if it exists."""
        return self._registrations_by_name.get(name)

    def find_by_type(self, dep_type: type[Any]) -> list[ProviderSpec]:
        """Get all provider specifications producing ``dep_type`` or a subclass."""
        return [
            spec for spec in self._registrations_by_name.values() if spec.matches_type(dep_type)
        ]

    def names(self) -> list[BeanName]:
        """Get all bean names in registration order."""
        return list(self._registrations_by_name)

    def values(self) -> list[ProviderSpec]:
        """Get all provider specifications in registration order."""
        return list(self._registrations_by_name.values())

    def __contains__(self, name: object) -> bool:
        return name in self._registrations_by_name

    def __iter__(self) -> Iterator[ProviderSpec]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self._registrations_by_name)


@dataclass(slots=True)
class ProviderDependenciesExtractor:
    """Extracts dependencies and return types from user-defined factories."""

    def extract_from_factory(
        self,
        factory: FactoryProvider[Any],
    ) -> list[ProviderDependency]:
        """Extract injectable parameters from a factory signature."""
        annotations = self._resolved_type_hints(factory)
        dependencies: list[ProviderDependency] = []

        for parameter in self._provider_parameters(factory):
            annotation = annotations.get(parameter.name, parameter.annotation)
            provides: BeanKey = annotation if is_bean_type(annotation) else parameter.name
            dependencies.append(ProviderDependency(provides=provides, parameter=parameter))

        return dependencies

    def extract_return_type(self, factory: FactoryProvider[Any]) -> type[Any] | None:
        """Extract the produced type from a factory's return annotation, if any."""
        if is_bean_type(factory):
            return factory
        return_annotation = self._resolved_type_hints(factory).get("return")
        if is_bean_type(return_annotation):
            return return_annotation
        return None

    def _provider_parameters(self, factory: FactoryProvider[Any]) -> tuple[Parameter, ...]:
        return tuple(
            parameter
            for parameter in inspect.signature(factory).parameters.values()
            if parameter.kind not in {Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD}
        )

    def _resolved_type_hints(self, factory: FactoryProvider[Any]) -> dict[str, Any]:
        target = factory.__init__ if inspect.isclass(factory) else factory
        try:
            return get_type_hints(target)
        except (AttributeError, NameError, TypeError):
            return {}

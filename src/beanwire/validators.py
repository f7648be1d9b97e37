from __future__ import annotations

import inspect
from typing import Any

from beanwire.exceptions import BeanwireInvalidRegistrationError
from beanwire.providers import Lifetime


class BeanRegistrationValidator:
    """Validates bean registrations before creating provider specs."""

    def validate_name(self, name: object, *, method_name: str) -> None:
        """Validate that a bean name is a non-empty string."""
        if not isinstance(name, str) or not name.strip():
            msg = f"{method_name}() parameter 'name' must be a non-empty string, got {name!r}."
            raise BeanwireInvalidRegistrationError(msg)

    def validate_factory(self, factory: object) -> None:
        """Validate that a factory provider is callable and not abstract."""
        if not callable(factory):
            msg = f"Factory provider must be callable, got {factory!r}."
            raise BeanwireInvalidRegistrationError(msg)

        if inspect.isclass(factory) and inspect.isabstract(factory):
            msg = f"Factory provider '{factory.__qualname__}' cannot be an abstract class."
            raise BeanwireInvalidRegistrationError(msg)

    def validate_lifetime(self, lifetime: Any, *, method_name: str) -> None:
        if not isinstance(lifetime, Lifetime):
            msg = (
                f"{method_name}() parameter 'lifetime' must be a Lifetime or "
                f"'from_container', got {lifetime!r}."
            )
            raise BeanwireInvalidRegistrationError(msg)

    def validate_lazy(self, lazy: Any, *, method_name: str) -> None:
        if not isinstance(lazy, bool):
            msg = (
                f"{method_name}() parameter 'lazy' must be a bool or 'from_container', "
                f"got {lazy!r}."
            )
            raise BeanwireInvalidRegistrationError(msg)

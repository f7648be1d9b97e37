"""Annotation-driven configuration classes.

A configuration class groups bean factory methods::

    @configuration()
    class AppConfig:
        @bean
        def database(self) -> Database:
            return Database()

        @bean(lifetime=Lifetime.TRANSIENT)
        def session(self) -> Session:
            return Session(self.database())

Registering the class with ``Container.add_configuration`` turns every ``@bean``
method into a provider. With ``proxy_bean_methods=True`` (the default) the
container shadows each bean method on the configuration instance with a
``BeanMethodProxy``, so sibling calls such as ``self.database()`` go through
``Container.get_or_create`` and observe the cached singleton. With
``proxy_bean_methods=False`` sibling calls are plain method calls and build a
new object every time.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, TypeVar, overload

from beanwire.exceptions import BeanwireInvalidRegistrationError
from beanwire.providers import BeanName, Lifetime

C = TypeVar("C", bound=type[Any])
BeanMethodF = TypeVar("BeanMethodF", bound=Callable[..., Any])

_BEAN_ATTRIBUTE = "__beanwire_bean__"
_CONFIGURATION_ATTRIBUTE = "__beanwire_configuration__"


@dataclass(frozen=True, slots=True)
class BeanOptions:
    """Registration options attached to a ``@bean`` method."""

    name: BeanName | Literal["infer"] = "infer"
    lifetime: Lifetime | Literal["from_container"] = "from_container"
    lazy: bool | Literal["from_container"] = "from_container"


@dataclass(frozen=True, slots=True)
class ConfigurationOptions:
    """Options attached to a ``@configuration`` class."""

    proxy_bean_methods: bool = True


@dataclass(frozen=True, slots=True)
class BeanMethod:
    """A ``@bean`` method discovered on a configuration class."""

    attribute_name: str
    function: Callable[..., Any]
    options: BeanOptions

    @property
    def bean_name(self) -> BeanName:
        if self.options.name == "infer":
            return self.attribute_name
        return self.options.name

    def bind(self, instance: object) -> Callable[..., Any]:
        """Bind the undecorated function to a configuration instance."""
        return self.function.__get__(instance, type(instance))


class BeanMethodProxy:
    """Route calls of a bean method through the container.

    Installed as an instance attribute, it shadows the class-level bean method
    so that ``self.<method>()`` returns ``get_or_create(<bean name>)``.
    """

    def __init__(self, bean_method: BeanMethod, get_or_create: Callable[[BeanName], Any]) -> None:
        functools.update_wrapper(self, bean_method.function)
        self._bean_name = bean_method.bean_name
        self._get_or_create = get_or_create

    def __call__(self) -> Any:
        return self._get_or_create(self._bean_name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bean_name={self._bean_name!r})"


@overload
def bean(
    method: BeanMethodF,
    *,
    name: BeanName | Literal["infer"] = "infer",
    lifetime: Lifetime | Literal["from_container"] = "from_container",
    lazy: bool | Literal["from_container"] = "from_container",
) -> BeanMethodF: ...


@overload
def bean(
    method: Literal["from_decorator"] = "from_decorator",
    *,
    name: BeanName | Literal["infer"] = "infer",
    lifetime: Lifetime | Literal["from_container"] = "from_container",
    lazy: bool | Literal["from_container"] = "from_container",
) -> Callable[[BeanMethodF], BeanMethodF]: ...


def bean(
    method: BeanMethodF | Literal["from_decorator"] = "from_decorator",
    *,
    name: BeanName | Literal["infer"] = "infer",
    lifetime: Lifetime | Literal["from_container"] = "from_container",
    lazy: bool | Literal["from_container"] = "from_container",
) -> BeanMethodF | Callable[[BeanMethodF], BeanMethodF]:
    """Mark a configuration class method as a bean factory.

    Works both as ``@bean`` and as ``@bean(...)``. The method itself is
    returned unchanged apart from the attached options, so calling it on a
    plain instance still runs its body.

    Args:
        method: The method to mark, or ``"from_decorator"`` to return a
            decorator.
        name: Bean name. ``"infer"`` uses the method name.
        lifetime: Bean lifetime, or ``"from_container"`` to inherit the
            container default.
        lazy: Skip eager instantiation, or ``"from_container"`` to inherit the
            container default.

    Returns:
        The marked method in direct form, or a decorator in decorator form.

    Raises:
        BeanwireInvalidRegistrationError: If the decorated object is not a
            plain function.

    """
    options = BeanOptions(name=name, lifetime=lifetime, lazy=lazy)

    def decorator(decorated_method: BeanMethodF) -> BeanMethodF:
        if not inspect.isfunction(decorated_method):
            msg = f"@bean can only decorate functions, got {decorated_method!r}."
            raise BeanwireInvalidRegistrationError(msg)
        setattr(decorated_method, _BEAN_ATTRIBUTE, options)
        return decorated_method

    if method == "from_decorator":
        return decorator
    return decorator(method)


@overload
def configuration(config_class: C, *, proxy_bean_methods: bool = True) -> C: ...


@overload
def configuration(
    config_class: Literal["from_decorator"] = "from_decorator",
    *,
    proxy_bean_methods: bool = True,
) -> Callable[[C], C]: ...


def configuration(
    config_class: C | Literal["from_decorator"] = "from_decorator",
    *,
    proxy_bean_methods: bool = True,
) -> C | Callable[[C], C]:
    """Mark a class as a configuration class.

    The marker is not inherited: a subclass that should be registered with
    different options must be decorated itself. Its ``@bean`` methods,
    including inherited ones, are discovered by ``collect_bean_methods``.

    Args:
        config_class: The class to mark, or ``"from_decorator"`` to return a
            decorator.
        proxy_bean_methods: Route sibling bean-method calls through the
            container so they observe cached singletons.

    Examples:
        .. code-block:: python

            @configuration(proxy_bean_methods=False)
            class LiteConfig:
                @bean
                def clock(self) -> Clock:
                    return Clock()

    """
    options = ConfigurationOptions(proxy_bean_methods=proxy_bean_methods)

    def decorator(decorated_class: C) -> C:
        if not inspect.isclass(decorated_class):
            msg = f"@configuration can only decorate classes, got {decorated_class!r}."
            raise BeanwireInvalidRegistrationError(msg)
        setattr(decorated_class, _CONFIGURATION_ATTRIBUTE, options)
        return decorated_class

    if config_class == "from_decorator":
        return decorator
    return decorator(config_class)


def get_configuration_options(config_class: type[Any]) -> ConfigurationOptions | None:
    """Return the options of a class decorated with ``@configuration`` itself."""
    return vars(config_class).get(_CONFIGURATION_ATTRIBUTE)


def get_bean_options(candidate: object) -> BeanOptions | None:
    return getattr(candidate, _BEAN_ATTRIBUTE, None) if inspect.isfunction(candidate) else None


def collect_bean_methods(config_class: type[Any]) -> list[BeanMethod]:
    """Collect ``@bean`` methods in definition order, base classes first.

    An override keeps the position of the method it replaces. Overriding a
    bean method without ``@bean`` removes the bean.
    """
    bean_methods: dict[str, BeanMethod] = {}
    for klass in reversed(config_class.__mro__):
        for attribute_name, value in vars(klass).items():
            options = get_bean_options(value)
            if options is not None:
                bean_methods[attribute_name] = BeanMethod(
                    attribute_name=attribute_name,
                    function=value,
                    options=options,
                )
            elif attribute_name in bean_methods:
                del bean_methods[attribute_name]
    return list(bean_methods.values())

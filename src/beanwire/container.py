from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import TYPE_CHECKING, Any, Literal, TypeVar, overload

if TYPE_CHECKING:
    from typing_extensions import Self

from beanwire._internal.type_checks import is_bean_type
from beanwire.configuration import (
    BeanMethodProxy,
    collect_bean_methods,
    get_configuration_options,
)
from beanwire.exceptions import (
    BeanwireAmbiguousBeanError,
    BeanwireBeanNotRegisteredError,
    BeanwireCircularDependencyError,
    BeanwireInvalidRegistrationError,
)
from beanwire.providers import (
    BeanKey,
    BeanName,
    FactoryProvider,
    Lifetime,
    ProviderDependenciesExtractor,
    ProviderDependency,
    ProviderSpec,
    ProvidersRegistrations,
)
from beanwire.validators import BeanRegistrationValidator

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


class Container:
    """Register named bean factories and hand out their instances.

    Beans are looked up by name or by the type they provide. Singletons are
    created at most once and cached until ``close``; transients are created on
    every lookup. Factories receive their dependencies as parameters, and
    factories that need a sibling bean while running should fetch it with
    ``get_or_create`` so they observe the same cached instance as every other
    caller.

    Resolution is synchronous. Requesting a bean while it is being created
    raises ``BeanwireCircularDependencyError``.
    """

    def __init__(
        self,
        default_lifetime: Lifetime = Lifetime.SINGLETON,
        *,
        lazy_init: bool = False,
    ) -> None:
        """Initialize a container and configure default registration behavior.

        Args:
            default_lifetime: Lifetime used by registrations that omit
                ``lifetime``.
            lazy_init: Default for the per-bean ``lazy`` flag. Lazy singletons
                are skipped by ``preinstantiate_singletons``.

        Examples:
            .. code-block:: python

                container = Container()

                prototype_container = Container(default_lifetime=Lifetime.TRANSIENT)

        """
        self._registration_validator = BeanRegistrationValidator()
        self._registration_validator.validate_lifetime(default_lifetime, method_name="Container")
        self._registration_validator.validate_lazy(lazy_init, method_name="Container")

        self._default_lifetime = default_lifetime
        self._lazy_init = lazy_init

        self._provider_dependencies_extractor = ProviderDependenciesExtractor()
        self._providers_registrations = ProvidersRegistrations()
        self._singletons: dict[BeanName, Any] = {}
        self._creation_stack: list[BeanName] = []

    # region Registration Methods
    @overload
    def add_factory(
        self,
        factory: F,
        *,
        name: BeanName | Literal["infer"] = "infer",
        provides: type[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
        lazy: bool | Literal["from_container"] = "from_container",
        dependencies: Mapping[str, BeanKey] | Literal["infer"] = "infer",
    ) -> F: ...

    @overload
    def add_factory(
        self,
        factory: Literal["from_decorator"] = "from_decorator",
        *,
        name: BeanName | Literal["infer"] = "infer",
        provides: type[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
        lazy: bool | Literal["from_container"] = "from_container",
        dependencies: Mapping[str, BeanKey] | Literal["infer"] = "infer",
    ) -> Callable[[F], F]: ...

    def add_factory(
        self,
        factory: F | Literal["from_decorator"] = "from_decorator",
        *,
        name: BeanName | Literal["infer"] = "infer",
        provides: type[Any] | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
        lazy: bool | Literal["from_container"] = "from_container",
        dependencies: Mapping[str, BeanKey] | Literal["infer"] = "infer",
    ) -> F | Callable[[F], F]:
        """Register a factory callable as a bean provider.

        Supports direct calls and decorator form. Re-registering a name
        overrides the previous registration and drops its cached singleton.

        Args:
            factory: Callable producing the bean, or ``"from_decorator"`` to
                return a decorator.
            name: Bean name. ``"infer"`` uses ``factory.__name__``.
            provides: Type produced by the factory. ``"infer"`` reads the
                return annotation (or uses the class itself for class
                factories). Beans with an unknown type can only be looked up
                by name.
            lifetime: Bean lifetime, or ``"from_container"`` to inherit the
                container default.
            lazy: Skip eager instantiation, or ``"from_container"`` to inherit
                the container default.
            dependencies: Explicit mapping from parameter name to bean key,
                overriding inferred keys, or ``"infer"``.

        Returns:
            The factory in direct mode or a decorator in decorator mode.

        Raises:
            BeanwireInvalidRegistrationError: If any argument is invalid.

        Examples:
            .. code-block:: python

                @container.add_factory(lifetime=Lifetime.TRANSIENT)
                def session(database: Database) -> Session:
                    return Session(database)

        """
        if factory == "from_decorator":

            def decorator(decorated_factory: F) -> F:
                self.add_factory(
                    decorated_factory,
                    name=name,
                    provides=provides,
                    lifetime=lifetime,
                    lazy=lazy,
                    dependencies=dependencies,
                )
                return decorated_factory

            return decorator

        self._add_spec(
            self._build_spec(
                factory=factory,
                name=name,
                provides=provides,
                lifetime=lifetime,
                lazy=lazy,
                dependencies=dependencies,
                method_name="add_factory",
            ),
        )
        return factory

    def add_instance(self, instance: object, *, name: BeanName) -> None:
        """Register a pre-built instance as a singleton bean.

        Args:
            instance: Value returned on every lookup.
            name: Bean name.

        Raises:
            BeanwireInvalidRegistrationError: If ``name`` is not a non-empty
                string.

        """
        self._registration_validator.validate_name(name, method_name="add_instance")
        self._add_spec(
            ProviderSpec(
                name=name,
                provides=type(instance),
                factory=lambda: instance,
                lifetime=Lifetime.SINGLETON,
            ),
        )
        self._singletons[name] = instance

    def add_configuration(self, config_class: type[T]) -> T:
        """Register every ``@bean`` method of a configuration class.

        The class is instantiated with no arguments. Bean methods are
        registered in definition order, base classes first. When the class was
        declared with ``proxy_bean_methods=True`` each bean method is shadowed
        on the instance by a ``BeanMethodProxy`` that calls
        ``get_or_create``.

        Args:
            config_class: A class decorated with ``@configuration``.

        Returns:
            The configuration instance the bean methods are bound to.

        Raises:
            BeanwireInvalidRegistrationError: If the class is not decorated with
                ``@configuration`` or a bean method has invalid options.

        """
        options = None
        if is_bean_type(config_class):
            options = get_configuration_options(config_class)
        if options is None:
            msg = (
                f"add_configuration() expects a class decorated with @configuration, "
                f"got {config_class!r}."
            )
            raise BeanwireInvalidRegistrationError(msg)

        config_instance = config_class()
        bean_methods = collect_bean_methods(config_class)
        specs = [
            self._build_spec(
                factory=bean_method.bind(config_instance),
                name=bean_method.bean_name,
                provides="infer",
                lifetime=bean_method.options.lifetime,
                lazy=bean_method.options.lazy,
                dependencies="infer",
                method_name="bean",
            )
            for bean_method in bean_methods
        ]

        for bean_method, spec in zip(bean_methods, specs, strict=True):
            if options.proxy_bean_methods:
                setattr(
                    config_instance,
                    bean_method.attribute_name,
                    BeanMethodProxy(bean_method, self.get_or_create),
                )
            self._add_spec(spec)

        logger.debug(
            "Registered configuration %s with %d bean method(s), proxy_bean_methods=%s",
            config_class.__qualname__,
            len(bean_methods),
            options.proxy_bean_methods,
        )
        return config_instance

    # endregion Registration Methods

    # region Resolution Methods
    @overload
    def get_or_create(self, key: type[T]) -> T: ...

    @overload
    def get_or_create(self, key: BeanName) -> Any: ...

    def get_or_create(self, key: BeanKey) -> Any:
        """Return the bean registered under ``key``, creating it if needed.

        Singletons are cached on first creation and returned as-is afterwards.
        Transients are created on every call.

        Args:
            key: Bean name, or a type matching exactly one registered bean.

        Raises:
            BeanwireBeanNotRegisteredError: If nothing is registered for ``key``.
            BeanwireAmbiguousBeanError: If a type key matches several beans.
            BeanwireCircularDependencyError: If the bean is already being
                created further up the call stack.

        """
        return self._get_or_create_from_spec(self._find_spec(key))

    def preinstantiate_singletons(self) -> None:
        """Create every non-lazy singleton bean in registration order."""
        created = 0
        for spec in self._providers_registrations.values():
            if not spec.is_singleton or spec.lazy or spec.name in self._singletons:
                continue
            self._get_or_create_from_spec(spec)
            created += 1
        logger.info("Instantiated %d singleton bean(s) eagerly", created)

    def get_beans_of_type(self, key: type[T]) -> dict[BeanName, T]:
        """Return every bean providing ``key``, keyed by bean name, creating them if needed."""
        return {
            spec.name: self._get_or_create_from_spec(spec)
            for spec in self._providers_registrations.find_by_type(key)
        }

    # endregion Resolution Methods

    # region Introspection Methods
    def get_bean_names(self) -> list[BeanName]:
        """Return registered bean names in registration order."""
        return self._providers_registrations.names()

    def contains_bean(self, name: BeanName) -> bool:
        return name in self._providers_registrations

    def is_singleton(self, name: BeanName) -> bool:
        """Return whether the bean registered under ``name`` is a singleton.

        Raises:
            BeanwireBeanNotRegisteredError: If ``name`` is not registered.

        """
        return self._find_spec(name).is_singleton

    def __contains__(self, name: object) -> bool:
        return name in self._providers_registrations

    def __len__(self) -> int:
        return len(self._providers_registrations)

    # endregion Introspection Methods

    # region Lifecycle Methods
    def close(self) -> None:
        """Discard cached singleton instances. Registrations are kept."""
        logger.debug("Discarding %d cached singleton(s)", len(self._singletons))
        self._singletons.clear()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    # endregion Lifecycle Methods

    def _build_spec(
        self,
        *,
        factory: FactoryProvider[Any],
        name: BeanName | Literal["infer"],
        provides: type[Any] | Literal["infer"],
        lifetime: Lifetime | Literal["from_container"],
        lazy: bool | Literal["from_container"],
        dependencies: Mapping[str, BeanKey] | Literal["infer"],
        method_name: str,
    ) -> ProviderSpec:
        """Validate registration arguments and build a spec without installing it."""
        self._registration_validator.validate_factory(factory)

        resolved_name = getattr(factory, "__name__", None) if name == "infer" else name
        self._registration_validator.validate_name(resolved_name, method_name=method_name)

        resolved_lifetime = self._default_lifetime if lifetime == "from_container" else lifetime
        self._registration_validator.validate_lifetime(resolved_lifetime, method_name=method_name)

        resolved_lazy = self._lazy_init if lazy == "from_container" else lazy
        self._registration_validator.validate_lazy(resolved_lazy, method_name=method_name)

        if provides == "infer":
            resolved_provides = self._provider_dependencies_extractor.extract_return_type(factory)
        elif is_bean_type(provides):
            resolved_provides = provides
        else:
            msg = (
                f"{method_name}() parameter 'provides' must be a class or 'infer', "
                f"got {provides!r}."
            )
            raise BeanwireInvalidRegistrationError(msg)

        return ProviderSpec(
            name=resolved_name,
            provides=resolved_provides,
            factory=factory,
            lifetime=resolved_lifetime,
            lazy=resolved_lazy,
            dependencies=self._resolve_registration_dependencies(
                factory=factory,
                dependencies=dependencies,
                method_name=method_name,
            ),
        )

    def _resolve_registration_dependencies(
        self,
        *,
        factory: FactoryProvider[Any],
        dependencies: Mapping[str, BeanKey] | Literal["infer"],
        method_name: str,
    ) -> list[ProviderDependency]:
        inferred = self._provider_dependencies_extractor.extract_from_factory(factory)
        if dependencies == "infer":
            return inferred

        inferred_by_name = {dependency.parameter.name: dependency for dependency in inferred}
        for parameter_name, key in dependencies.items():
            dependency = inferred_by_name.get(parameter_name)
            if dependency is None:
                msg = (
                    f"{method_name}() explicit dependency for unknown parameter "
                    f"'{parameter_name}' in factory {factory!r}."
                )
                raise BeanwireInvalidRegistrationError(msg)
            if not isinstance(key, str) and not is_bean_type(key):
                msg = (
                    f"{method_name}() explicit dependency for parameter '{parameter_name}' "
                    f"must be a bean name or a class, got {key!r}."
                )
                raise BeanwireInvalidRegistrationError(msg)
            dependency.provides = key
        return inferred

    def _add_spec(self, spec: ProviderSpec) -> None:
        replaced = self._providers_registrations.add(spec)
        if replaced is not None:
            self._singletons.pop(spec.name, None)
            logger.debug("Overriding bean '%s'", spec.name)
        logger.debug(
            "Registered bean '%s' (provides=%s, lifetime=%s, lazy=%s)",
            spec.name,
            spec.provides,
            spec.lifetime.name,
            spec.lazy,
        )

    def _find_spec(self, key: BeanKey) -> ProviderSpec:
        if isinstance(key, str):
            spec = self._providers_registrations.find_by_name(key)
            if spec is None:
                msg = f"No bean named '{key}' is registered."
                raise BeanwireBeanNotRegisteredError(msg)
            return spec

        if not is_bean_type(key):
            msg = f"Bean keys must be a name or a class, got {key!r}."
            raise BeanwireBeanNotRegisteredError(msg)

        matches = self._providers_registrations.find_by_type(key)
        if not matches:
            msg = f"No bean of type {key.__qualname__} is registered."
            raise BeanwireBeanNotRegisteredError(msg)
        if len(matches) > 1:
            names = ", ".join(f"'{spec.name}'" for spec in matches)
            msg = (
                f"Expected a single bean of type {key.__qualname__} but found "
                f"{len(matches)}: {names}."
            )
            raise BeanwireAmbiguousBeanError(msg)
        return matches[0]

    def _is_resolvable(self, key: BeanKey) -> bool:
        if isinstance(key, str):
            return key in self._providers_registrations
        return bool(self._providers_registrations.find_by_type(key))

    def _is_container_key(self, key: BeanKey) -> bool:
        return is_bean_type(key) and issubclass(key, Container) and isinstance(self, key)

    def _get_or_create_from_spec(self, spec: ProviderSpec) -> Any:
        if spec.is_singleton and spec.name in self._singletons:
            logger.debug("Returning cached singleton '%s'", spec.name)
            return self._singletons[spec.name]

        instance = self._create(spec)
        if spec.is_singleton:
            self._singletons[spec.name] = instance
        return instance

    def _create(self, spec: ProviderSpec) -> Any:
        if spec.name in self._creation_stack:
            cycle = [*self._creation_stack[self._creation_stack.index(spec.name) :], spec.name]
            msg = f"Circular dependency detected: {' -> '.join(cycle)}."
            raise BeanwireCircularDependencyError(msg)

        self._creation_stack.append(spec.name)
        try:
            args, kwargs = self._resolve_arguments(spec)
            logger.debug("Creating bean '%s'", spec.name)
            return spec.factory(*args, **kwargs)
        finally:
            self._creation_stack.pop()

    def _resolve_arguments(self, spec: ProviderSpec) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for dependency in spec.dependencies:
            if self._is_container_key(dependency.provides):
                value: Any = self
            elif not dependency.is_required and not self._is_resolvable(dependency.provides):
                if dependency.parameter.kind is not dependency.parameter.POSITIONAL_ONLY:
                    continue
                value = dependency.parameter.default
            else:
                value = self.get_or_create(dependency.provides)

            if dependency.parameter.kind is dependency.parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[dependency.parameter.name] = value
        return args, kwargs

class BeanwireError(Exception):
    """Represent a base class for all beanwire-specific failures.

    Catch this type when you want to handle any beanwire error path without
    matching each concrete exception class individually.
    """


class BeanwireInvalidRegistrationError(BeanwireError):
    """Signal invalid registration configuration.

    Raised by registration APIs such as ``Container.add_factory``,
    ``Container.add_instance``, and ``Container.add_configuration`` when
    arguments are invalid.

    Typical fixes include passing a callable factory, a non-empty bean name,
    a valid ``Lifetime`` value, or decorating configuration classes with
    ``@configuration``.
    """


class BeanwireBeanNotRegisteredError(BeanwireError):
    """Signal that a bean name or type has no provider.

    Raised by ``Container.get_or_create`` and by the lookup helpers when no
    registration matches the requested key.

    Typical fix is registering the bean, either directly with
    ``Container.add_factory`` or through a ``@bean`` method.
    """


class BeanwireAmbiguousBeanError(BeanwireError):
    """Signal that a type key matches more than one registered bean.

    Typical fix is requesting the bean by name instead of by type.
    """


class BeanwireCircularDependencyError(BeanwireError):
    """Signal that a bean was requested while it was still being created.

    The message lists the full creation chain, for example
    ``eoo -> foo -> eoo``.

    Typical fix is restructuring the factories so that neither needs the other
    while it is being constructed.
    """

"""Registry bootstrapper: two singleton beans and the identity of a shared ``Foo``.

``eoo()`` calls ``self.foo()`` while it is being created. Registered through
``AppConfig`` that call is routed to the container and returns the cached
``Foo``, so both printed hash codes match and ``foo()`` runs once.
``LiteAppConfig`` turns bean-method proxying off: the call runs the method body
again and ``eoo()`` sees a second, different ``Foo``.
"""

from __future__ import annotations

from beanwire.configuration import bean, configuration
from beanwire.container import Container


class Foo:
    pass


class Eoo:
    pass


@configuration()
class AppConfig:
    @bean
    def foo(self) -> Foo:
        print("foo() invoked...")
        foo = Foo()
        print(f"foo() method foo hashcode: {hash(foo)}")
        return foo

    @bean
    def eoo(self) -> Eoo:
        print("eoo() invoked...")
        foo = self.foo()
        print(f"eoo() method foo hashcode: {hash(foo)}")
        return Eoo()


@configuration(proxy_bean_methods=False)
class LiteAppConfig(AppConfig):
    """``AppConfig`` beans with sibling calls left as plain method calls."""


def bootstrap(config_class: type[AppConfig] = AppConfig) -> Container:
    """Register ``config_class`` and eagerly create its singleton beans."""
    container = Container()
    container.add_configuration(config_class)
    container.preinstantiate_singletons()
    return container


def main() -> int:
    container = bootstrap()
    for bean_name in container.get_bean_names():
        print(bean_name)
    return 0

"""Bean methods: sibling calls with and without bean-method proxies.

With ``@configuration()`` a bean method calling another bean method gets the
container's cached singleton. With ``proxy_bean_methods=False`` the call is a
plain method call and builds a new object.
"""

from __future__ import annotations

from beanwire import Container, bean, configuration


class Clock:
    pass


class Scheduler:
    def __init__(self, clock: Clock) -> None:
        self.clock = clock


@configuration()
class ProxiedConfig:
    @bean
    def clock(self) -> Clock:
        return Clock()

    @bean
    def scheduler(self) -> Scheduler:
        return Scheduler(self.clock())


@configuration(proxy_bean_methods=False)
class LiteConfig(ProxiedConfig):
    pass


def shares_clock(config_class: type[ProxiedConfig]) -> bool:
    container = Container()
    container.add_configuration(config_class)
    container.preinstantiate_singletons()
    return container.get_or_create(Scheduler).clock is container.get_or_create(Clock)


def main() -> None:
    print(f"proxied_shared={shares_clock(ProxiedConfig)}")  # => proxied_shared=True
    print(f"lite_shared={shares_clock(LiteConfig)}")  # => lite_shared=False


if __name__ == "__main__":
    main()

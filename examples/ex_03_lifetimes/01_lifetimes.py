"""Lifetimes: ``SINGLETON`` and ``TRANSIENT``.

See how object identity changes across repeated lookups, and how ``close``
discards cached singletons.
"""

from __future__ import annotations

from beanwire import Container, Lifetime


class SingletonService:
    pass


class TransientService:
    pass


def main() -> None:
    container = Container()
    container.add_factory(SingletonService, name="singleton_service")
    container.add_factory(
        TransientService,
        name="transient_service",
        lifetime=Lifetime.TRANSIENT,
    )

    singleton_first = container.get_or_create(SingletonService)
    singleton_second = container.get_or_create(SingletonService)
    print(f"singleton_same={singleton_first is singleton_second}")  # => singleton_same=True

    transient_first = container.get_or_create(TransientService)
    transient_second = container.get_or_create(TransientService)
    print(f"transient_new={transient_first is not transient_second}")  # => transient_new=True

    container.close()
    singleton_after_close = container.get_or_create(SingletonService)
    print(f"recreated={singleton_after_close is not singleton_first}")  # => recreated=True


if __name__ == "__main__":
    main()

"""Quickstart: register factories and let the container wire them.

Factory parameters are dependencies. Annotated parameters are looked up by
type, unannotated ones by bean name.
"""

from __future__ import annotations

from beanwire import Container


class Database:
    def __init__(self) -> None:
        self.host = "localhost"


class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


def main() -> None:
    container = Container()

    @container.add_factory
    def database() -> Database:
        return Database()

    @container.add_factory
    def user_repository(database: Database) -> UserRepository:
        return UserRepository(database)

    repository = container.get_or_create(UserRepository)
    print(f"db_host={repository.database.host}")  # => db_host=localhost

    same_database = repository.database is container.get_or_create("database")
    print(f"same_database={same_database}")  # => same_database=True

    print(f"names={container.get_bean_names()}")  # => names=['database', 'user_repository']


if __name__ == "__main__":
    main()

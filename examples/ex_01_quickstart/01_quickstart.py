"""Quickstart: wire services by reference and inject parameters.

Register definitions, ask for the top-level service, and see how dicompose
builds its dependencies first, exactly once.
"""

from __future__ import annotations

from dicompose import Container, Reference


class Database:
    def __init__(self, dsn: str) -> None:
        self.dsn = dsn


class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


class UserService:
    def __init__(self, repository: UserRepository, greeting: str) -> None:
        self.repository = repository
        self.greeting = greeting


def main() -> None:
    container = Container()
    container.set_parameter("db.host", "localhost")
    container.set_parameter("db.dsn", "postgres://%db.host%/app")
    container.set_parameter("greeting", "hi")

    container.register("database", Database, "%db.dsn%")
    container.register("users.repository", UserRepository, Reference("database"))
    container.register("users.service", UserService, Reference("users.repository"), "%greeting%")

    service = container.get("users.service")

    print(f"dsn={service.repository.database.dsn}")  # => dsn=postgres://localhost/app
    print(f"greeting={service.greeting}")  # => greeting=hi
    print(f"cached={container.get('database') is service.repository.database}")  # => cached=True


if __name__ == "__main__":
    main()

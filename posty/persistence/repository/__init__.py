"""PostgreSQL repository implementations."""

from posty.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
]

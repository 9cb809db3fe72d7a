"""Base class for value objects."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable value compared by its fields.

    Used for data crossing service boundaries (platform profiles,
    session grants) that must not be mutated in flight.
    """

    model_config = ConfigDict(frozen=True)

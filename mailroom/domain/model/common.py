"""Base model for all domain records."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for all domain records.

    Records are immutable snapshots of what the backend returned; live
    behaviour sits on the wrapper objects built around them.
    """

    model_config = ConfigDict(
        frozen=True,  # All domain records are immutable
        arbitrary_types_allowed=True,  # Allow custom value objects
    )

"""Shared base for immutable API records."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Frozen record; API fields without a matching attribute are dropped."""

    model_config = ConfigDict(frozen=True, extra="ignore")

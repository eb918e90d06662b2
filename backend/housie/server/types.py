from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CreateRoomRequest(BaseModel):
    """Body of POST /rooms. settings is validated later against GameSettings."""

    model_config = ConfigDict(extra="forbid")

    host_id: str = Field(min_length=1, max_length=100)
    host_name: str = Field(min_length=1, max_length=50)
    settings: dict[str, Any] | None = None

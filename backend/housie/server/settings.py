"""Room server configuration via environment variables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from housie.logic.settings import CALL_INTERVAL_SECONDS, MIN_LOBBY_SIZE, ROOM_INACTIVITY_SECONDS
from shared.validators import CorsEnvSettingsSource, parse_cors_origins

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource

# Outside production a host may start a round alone to try the flow.
_DEV_MIN_PLAYERS = 1


class HousieServerSettings(BaseSettings):
    model_config = {"env_prefix": "HOUSIE_"}

    environment: Literal["production", "development", "test"] = "production"
    call_interval_seconds: float = Field(default=CALL_INTERVAL_SECONDS, gt=0)
    room_inactivity_seconds: float = Field(default=ROOM_INACTIVITY_SECONDS, ge=60)
    max_rooms: int = Field(default=1000, ge=1)
    log_dir: str | None = None
    cors_origins: list[str] = ["http://localhost:3000"]

    @property
    def min_players(self) -> int:
        return MIN_LOBBY_SIZE if self.environment == "production" else _DEV_MIN_PLAYERS

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_cors_origins(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, CorsEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings

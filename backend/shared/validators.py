"""Validation helpers for server settings."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

_ORIGIN_SCHEMES = ("http://", "https://")


def _check_origin(origin: str) -> str:
    if origin != "*" and not origin.startswith(_ORIGIN_SCHEMES):
        raise ValueError(f"CORS origin must be '*' or start with http:// or https://, got {origin!r}")
    return origin.rstrip("/")


def parse_cors_origins(value: str | list[str]) -> list[str]:
    """Parse CORS origins from a list, a JSON array string or a comma-separated string.

    Raises ValueError for empty input, malformed JSON or origins without a scheme.
    Trailing slashes are stripped since browsers never send them.
    """
    if isinstance(value, list):
        origins = value
    else:
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON array: {e}") from e
            if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
                raise ValueError("JSON value must be an array of strings")
            origins = parsed
        else:
            origins = [part.strip() for part in stripped.split(",") if part.strip()]

    if not origins:
        raise ValueError("CORS origins must not be empty")
    return [_check_origin(origin) for origin in origins]


class CorsEnvSettingsSource(EnvSettingsSource):
    """Env source that hands the raw cors_origins string to its field validator.

    pydantic-settings would otherwise try to JSON-decode list fields and fail
    on comma-separated values.
    """

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name == "cors_origins" and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)

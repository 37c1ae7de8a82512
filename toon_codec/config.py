# -*- coding: utf-8 -*-
"""Location: ./toon_codec/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Runtime settings for the ``toon`` command line.
Settings are loaded from environment variables (prefix ``TOON_``) or an
optional ``.env`` file. They only provide the CLI's defaults; explicit flags
always win, and the codec functions never read them.

Environment variables:
- TOON_INDENT: Spaces per nesting level (default: 2)
- TOON_DELIMITER: comma, tab or pipe (default: "comma")
- TOON_STRICT: Strict decoding (default: True)
- TOON_KEY_FOLDING: off or safe (default: "off")
- TOON_FLATTEN_DEPTH: Maximum folded key segments (default: unbounded)
- TOON_LOG_LEVEL: Logging level (default: "WARNING")

Examples:
    >>> s = Settings(delimiter="pipe", log_level="debug")
    >>> s.delimiter, s.log_level
    ('pipe', 'DEBUG')
    >>> try:
    ...     Settings(log_level="loud")
    ... except ValueError:
    ...     print("error")
    error
"""

# Standard
from functools import lru_cache
from typing import Any, Literal, Optional

# Third-Party
from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict

# First-Party
from toon_codec.constants import DEFAULT_INDENT


class Settings(BaseSettings):
    """Defaults for the ``toon`` command, overridable through the environment.

    Examples:
        >>> Settings().indent
        2
        >>> Settings(key_folding="SAFE").key_folding
        'safe'
    """

    indent: int = Field(default=DEFAULT_INDENT, gt=0, description="Spaces per nesting level")
    delimiter: str = Field(default="comma", description="Delimiter name or character for inline arrays and tabular rows")
    strict: bool = Field(default=True, description="Strict structural validation when decoding")
    key_folding: Literal["off", "safe"] = Field(default="off", description="Fold single-key object chains when encoding")
    flatten_depth: Optional[int] = Field(default=None, ge=0, description="Maximum segments per folded key")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING", description="Logging level for the CLI")

    model_config = SettingsConfigDict(env_prefix="TOON_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    @field_validator("log_level", "key_folding", mode="before")
    @classmethod
    def _normalize_case(cls, v: Any, info: ValidationInfo) -> Any:
        """Accept level and mode names in any case.

        Args:
            v: Raw value from the environment or constructor.
            info: Validation info (field name).

        Returns:
            Upper-cased log level or lower-cased folding mode.
        """
        if not isinstance(v, str):
            return v
        return v.upper() if info.field_name == "log_level" else v.lower()


@lru_cache()
def get_settings(**kwargs: Any) -> Settings:
    """Get cached settings instance.

    Args:
        **kwargs: Keyword arguments to pass to the Settings setup.

    Returns:
        Settings: A cached instance of the Settings class.

    Examples:
        >>> get_settings() is get_settings()
        True
    """
    return Settings(**kwargs)

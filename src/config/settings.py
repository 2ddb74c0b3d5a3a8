"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MINIMESSAGE_ prefix (e.g., MINIMESSAGE_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MINIMESSAGE_ prefix.

    Examples:
        MINIMESSAGE_STRICT_MODE=true
        MINIMESSAGE_MAX_NESTING_DEPTH=64
        MINIMESSAGE_ERROR_CONTEXT=false
    """

    model_config = SettingsConfigDict(
        env_prefix="MINIMESSAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: unclosed tags, mismatched closes and <reset> raise ParsingError",
    )

    max_nesting_depth: int = Field(
        default=128,
        ge=1,
        description="Maximum number of simultaneously open tags",
    )

    # Diagnostics
    debug_mode: bool = Field(
        default=False,
        description="Log the element tree of every parsed message",
    )

    error_context: bool = Field(
        default=True,
        description="Include the source text and a marker line in ParsingError messages",
    )

    def depth_exceeded(self, depth: int) -> bool:
        """
        Check whether opening a scope at the given depth would exceed the limit.

        Args:
            depth: Nesting depth the new tag would have (root children are depth 1)

        Returns:
            True if the depth is past max_nesting_depth

        Example:
            >>> settings = AppSettings(max_nesting_depth=2)
            >>> settings.depth_exceeded(3)
            True
        """
        return depth > self.max_nesting_depth


# Singleton instance - import this in your code
appsettings = AppSettings()

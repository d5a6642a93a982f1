"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PREFIXPARSE_ prefix (e.g., PREFIXPARSE_SNIPPET_LENGTH=80).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Engine configuration via environment variables.

    Environment variables use PREFIXPARSE_ prefix.

    Examples:
        PREFIXPARSE_VERBOSITY=3
        PREFIXPARSE_REPORT_FURTHEST_FAILURE=false
        PREFIXPARSE_SNIPPET_LENGTH=120
    """

    model_config = SettingsConfigDict(
        env_prefix="PREFIXPARSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging configuration
    verbosity: int = Field(
        default=1,
        ge=0,
        description="Default verbosity for parse contexts (0=silent, 1=errors, 2=timing, 3=trace)",
    )

    log_timing: bool = Field(
        default=True,
        description="Log the wall-clock duration of each parse_to_end() call",
    )

    # Diagnostic configuration
    report_furthest_failure: bool = Field(
        default=True,
        description="Report the furthest failure reached by any branch instead of the last-tried one",
    )

    snippet_length: int = Field(
        default=40,
        ge=1,
        description="Maximum number of remaining-input characters quoted in a ParseError",
    )

    def snippet_make(self, text: str) -> str:
        """
        Truncate remaining input for display in a diagnostic.

        Args:
            text: Remaining input starting at the failure position

        Returns:
            The text itself if short enough, otherwise its first
            snippet_length characters followed by an ellipsis

        Example:
            >>> settings = AppSettings(snippet_length=3)
            >>> settings.snippet_make('abcdef')
            'abc...'
        """
        if len(text) <= self.snippet_length:
            return text
        return f"{text[: self.snippet_length]}..."


# Singleton instance - import this in your code
appsettings = AppSettings()

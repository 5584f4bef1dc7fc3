"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DOCSCHECK_ prefix (e.g., DOCSCHECK_STRICT_MODE=true).

A .env file in the working directory is read as well.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DOCSCHECK_ prefix.

    Examples:
        DOCSCHECK_STRICT_MODE=true
        DOCSCHECK_VALIDATE_SUBSTITUTIONS=false
        DOCSCHECK_REPORT_FILENAME=lint-report.json
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCSCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Checker toggles
    validate_directives: bool = Field(
        default=True,
        description="Parse directive blocks and validate them against the directive registry",
    )

    validate_frontmatter: bool = Field(
        default=True,
        description="Validate YAML frontmatter fields, applies_to keys and products",
    )

    validate_applies_to: bool = Field(
        default=True,
        description="Validate inline, section and parameter applies_to values in the document body",
    )

    validate_substitutions: bool = Field(
        default=True,
        description="Report undefined {{substitutions}} and literal values that have a substitution",
    )

    require_applies_to: bool = Field(
        default=True,
        description="Report frontmatter without an applies_to field",
    )

    # Run behaviour
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: treat warnings as errors when deciding the exit status",
    )

    # Substitution sources
    docset_filenames: List[str] = Field(
        default=["docset.yml", "_docset.yml"],
        description="Docset file names searched upwards from a document for shared subs",
    )

    # Output configuration
    report_filename: str = Field(
        default="docscheck-report.json",
        description="Summary report file name written to the output directory",
    )

    report_suffix: str = Field(
        default=".diagnostics.json",
        description="Suffix of the per-document diagnostics file",
    )


# Shared instance read by the linter and the CLI
appsettings = AppSettings()

"""Analyzer configuration using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from i18n_audit.models.enums import RebindPolicy


class AnalyzerSettings(BaseSettings):
    """Analyzer settings loaded from environment variables.

    Every field can be overridden with an ``I18N_AUDIT_`` prefixed variable;
    list values are given as JSON (``I18N_AUDIT_LOCALES='["en","de"]'``).
    """

    model_config = SettingsConfigDict(
        env_prefix="I18N_AUDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Call recognition
    translation_function_names: list[str] = Field(
        default=["t", "useTranslations", "getTranslations"],
        description="Identifiers whose string-literal calls are key lookups",
    )
    namespace_hooks: list[str] = Field(
        default=["useTranslations"],
        description="Hooks taking a single namespace string literal",
    )
    namespace_factories: list[str] = Field(
        default=["getTranslations"],
        description="Factories taking a namespace literal or an object with a namespace property",
    )

    # Catalog comparison
    allow_multi_namespace_keys: list[str] = Field(
        default_factory=list,
        description="Short keys accepted when several catalog paths end with them",
    )
    locales: list[str] = Field(default=["en", "zh"], description="Locales to compare against")

    # Discovery and output
    scan_patterns: list[str] = Field(
        default=["src/**/*.{ts,tsx,js,jsx}", "app/**/*.{ts,tsx,js,jsx}"],
        description="Glob patterns of source files, relative to the project root",
    )
    exclude_patterns: list[str] = Field(
        default=["**/*.test.*", "**/*.spec.*", "**/*.d.ts"],
        description="Glob patterns removed from the scan",
    )
    messages_dir: str = Field(default="messages", description="Catalog directory")
    output_dir: str = Field(default="reports", description="Report directory")

    # Resolution behaviour
    rebind_policy: RebindPolicy = Field(
        default=RebindPolicy.FIRST_WINS,
        description="Which namespace a binding keeps when it is assigned twice",
    )
    report_unresolved_jsx: bool = Field(
        default=False,
        description="Emit a warning for translators forwarded to unresolvable components",
    )
    jobs: int = Field(default=1, ge=1, description="Worker threads for per-file extraction")

    @property
    def namespace_producers(self) -> frozenset[str]:
        """Callee names whose calls establish a namespace rather than look up a key."""
        return frozenset(self.namespace_hooks) | frozenset(self.namespace_factories)


# Global settings instance
settings = AnalyzerSettings()

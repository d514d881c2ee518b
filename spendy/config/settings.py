"""
Configuration Management for Spendy

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage slot keys, presentation formats and logging knobs are read once
and validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Persistence gateway configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="SPENDY_STORAGE_",
        extra="ignore"
    )
    
    # Slot keys; the defaults match data written by the mobile app
    transactions_key: str = Field(
        default="@tracker_app_transactions",
        min_length=1,
        description="Key of the serialized transaction list"
    )
    categories_key: str = Field(
        default="@tracker_app_categories",
        min_length=1,
        description="Key of the serialized category mapping"
    )
    theme_key: str = Field(
        default="@tracker_app_theme",
        min_length=1,
        description="Key of the theme preference token"
    )
    file_suffix: str = Field(
        default=".json",
        description="File extension used by the JSON file backend"
    )


class LedgerSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="SPENDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Storage
    data_dir: Path = Field(
        default=Path(".spendy"),
        description="Directory used by the JSON file backend"
    )
    storage_backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Which persistence gateway to use"
    )
    
    # Presentation
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol prefixed to formatted amounts"
    )
    display_date_format: str = Field(
        default="{month}/{day}/{year}",
        description="Template for the frozen display date of a transaction"
    )
    default_theme: str = Field(
        default="light",
        pattern="^(light|dark)$",
        description="Theme used when none has been saved"
    )
    
    # Audit
    audit_history_size: int = Field(
        default=200,
        ge=0,
        le=10000,
        description="How many audit events to keep in memory"
    )
    
    @field_validator('display_date_format')
    @classmethod
    def validate_display_date_format(cls, v: str) -> str:
        """Reject templates that reference unknown fields."""
        try:
            v.format(day=1, month=1, year=2000)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"display_date_format may only use {{day}}, {{month}} and {{year}}: {e}"
            )
        return v


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, with an
    additional "<name>_error" entry for each failure.
    """
    results = {}
    
    settings = get_settings()
    
    try:
        _ = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)
    
    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)
    
    return results

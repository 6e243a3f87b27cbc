"""Application configuration and environment settings"""
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    # Input/Output locations with defaults
    INPUT_DIR: str = Field("/input", description="Directory (or single file) holding the streaming history export")
    OUTPUT_DIR: str = Field("/output", description="Directory for the generated report")
    REPORT_FILENAME: str = Field("results.json", description="File name of the JSON report inside OUTPUT_DIR")

    # Optional settings
    TIMEZONE: Optional[str] = Field(None, description="IANA zone all timestamps are converted to from UTC (kept in UTC if unset)")
    LOG_LEVEL: str = Field("INFO", description="Root logging level for the batch entry point")

    @field_validator('TIMEZONE')
    @classmethod
    def check_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"Unknown timezone: {value}")
        return value or None

    @property
    def tzinfo(self) -> Optional[tzinfo]:
        """Resolve TIMEZONE to a tzinfo, None meaning UTC"""
        return ZoneInfo(self.TIMEZONE) if self.TIMEZONE else None

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True
    )

settings = Settings()

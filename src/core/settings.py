"""
Settings — конфигурация расчёта из переменных окружения.

Pydantic Settings с префиксом TAX_REPORT_; значения можно переопределить
через окружение или файл .env. Аргументы CLI имеют приоритет над настройками.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.ingest.dates import DEFAULT_DATE_FORMAT, DEFAULT_TIME_FORMAT
from src.ingest.reverse_lines import DEFAULT_CHUNK_SIZE


class TaxReportSettings(BaseSettings):
    """Настройки расчёта налогового отчёта."""

    model_config = SettingsConfigDict(
        env_prefix="TAX_REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    carry_window_years: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Глубина окна переноса убытков (лет)",
    )
    log_level: str = Field(
        default="WARNING",
        description="Уровень логирования (DEBUG, INFO, WARNING, ERROR)",
    )
    csv_date_format: str = Field(
        default=DEFAULT_DATE_FORMAT,
        description="Формат даты в выгрузке (strptime)",
    )
    csv_time_format: str = Field(
        default=DEFAULT_TIME_FORMAT,
        description="Формат времени в выгрузке (strptime)",
    )
    read_chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        ge=1,
        description="Размер блока при чтении файла с конца (байт)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return level


@lru_cache
def get_settings() -> TaxReportSettings:
    return TaxReportSettings()

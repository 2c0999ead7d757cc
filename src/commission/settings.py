"""
Commission settings — загрузка конфигурации ставок.

Settings читаются из переменных окружения (префикс COMMISSION_) и .env файла.
Если задан COMMISSION_CONFIG_PATH, таблицы ставок загружаются из JSON файла,
проверяются контрактом commission_config и разбираются в CommissionConfig.
Иначе используются стандартные таблицы.
"""

import json
import logging
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.commission.engine import CommissionEngine
from src.core.contracts import validate_commission_config
from src.core.domain.schemes import CommissionConfig, default_commission_config

logger = logging.getLogger(__name__)


class CommissionSettings(BaseSettings):
    """Settings commission engine из переменных окружения."""

    model_config = SettingsConfigDict(
        env_prefix="COMMISSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    config_path: Optional[Path] = Field(
        default=None,
        description="JSON файл таблиц ставок (по умолчанию стандартные таблицы)",
    )


@lru_cache
def get_settings() -> CommissionSettings:
    """Get cached settings instance."""
    return CommissionSettings()


def load_commission_config(path: Path | str) -> CommissionConfig:
    """
    Загрузка таблиц ставок из JSON файла.

    Числа разбираются как Decimal, без двоичного приближения.

    Raises:
        FileNotFoundError: Файл не найден
        jsonschema.ValidationError: Файл не соответствует контракту
        pydantic.ValidationError: Нарушены инварианты конфигурации
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f, parse_float=Decimal)

    validate_commission_config(data)
    return CommissionConfig.model_validate(data)


def build_engine(settings: CommissionSettings | None = None) -> CommissionEngine:
    """Создание CommissionEngine по settings."""
    settings = settings or get_settings()

    if settings.config_path is None:
        logger.info("Building commission engine with default rate tables")
        return CommissionEngine(default_commission_config())

    config = load_commission_config(settings.config_path)
    logger.info(
        "Building commission engine from %s (%d schemes, %d tier brackets, %d partner rates)",
        settings.config_path,
        len(config.schemes),
        len(config.tier_brackets),
        len(config.partner_rates),
    )
    return CommissionEngine(config)

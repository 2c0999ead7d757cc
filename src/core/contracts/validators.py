"""
JSON Schema Contract Validators

Валидация JSON-декодированных данных commission engine по контрактам
Draft 2020-12 из contracts/schema/:
- commission_config.json (файл таблиц ставок)
- commission_request.json (запрос HTTP слоя)

Схема читается и проходит meta-validation один раз; скомпилированный
Draft202012Validator кэшируется в загрузчике и разделяется всеми
валидаторами одного контракта.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик контрактов с кэшем схем и скомпилированных валидаторов.

    По умолчанию читает схемы, поставляемые вместе с пакетом (SCHEMA_DIR).
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or SCHEMA_DIR
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}
        self._validators: Dict[str, Draft202012Validator] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема контракта по имени (без расширения .json).

        Raises:
            FileNotFoundError: Файла контракта нет в schema_dir
            ValueError: Файл не является валидной JSON Schema
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema

    def validator(self, schema_name: str) -> Draft202012Validator:
        """Скомпилированный валидатор контракта (создаётся один раз)."""
        compiled = self._validators.get(schema_name)
        if compiled is None:
            compiled = Draft202012Validator(self.load_schema(schema_name))
            self._validators[schema_name] = compiled
        return compiled


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Проверка данных против одного контракта."""

    schema_name: str

    def __init__(self, loader: SchemaLoader | None = None):
        self.validator = (loader or _SCHEMA_LOADER).validator(self.schema_name)

    @property
    def schema(self) -> Dict[str, Any]:
        return self.validator.schema

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Первое (best match) нарушение контракта
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        """Все нарушения контракта, без остановки на первом."""
        return self.validator.iter_errors(data)


class CommissionConfigValidator(ContractValidator):
    """Контракт файла таблиц ставок."""

    schema_name = "commission_config"


class CommissionRequestValidator(ContractValidator):
    """Контракт запроса к CommissionEngine.evaluate."""

    schema_name = "commission_request"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_CONFIG_VALIDATOR = CommissionConfigValidator()
_REQUEST_VALIDATOR = CommissionRequestValidator()


def validate_commission_config(data: Dict[str, Any]) -> None:
    """
    Валидация данных файла конфигурации ставок.

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют контракту
    """
    _CONFIG_VALIDATOR.validate(data)


def validate_commission_request(data: Dict[str, Any]) -> None:
    """
    Валидация запроса к commission engine.

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют контракту
    """
    _REQUEST_VALIDATOR.validate(data)

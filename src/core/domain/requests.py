"""
CommissionRequest — Модель запроса к commission engine

Immutable Pydantic модель JSON-декодированного запроса от HTTP слоя.
Соответствует схеме contracts/schema/commission_request.json.

Модель проверяет только форму запроса (наличие полей для операции).
Диапазоны значений (amount >= 0, rate в [0, 1] ...) проверяет engine,
чтобы нарушения поднимали типизированные ошибки CommissionError.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator

from .schemes import CommissionScheme

Number = Union[int, float, Decimal]


class CommissionOperation(str, Enum):
    """Операция commission engine"""

    FLAT_RATE = "flat_rate"
    TIERED = "tiered"
    PARTNER = "partner"
    WEIGHTED_VALUE = "weighted_value"
    AGGREGATE = "aggregate"
    SPLIT_EVEN = "split_even"
    SPLIT_CUSTOM = "split_custom"


# Обязательные поля по операциям
REQUIRED_FIELDS: dict[CommissionOperation, tuple[str, ...]] = {
    CommissionOperation.FLAT_RATE: ("amount",),
    CommissionOperation.TIERED: ("amount",),
    CommissionOperation.PARTNER: ("amount", "partner_id"),
    CommissionOperation.WEIGHTED_VALUE: ("amount", "probability"),
    CommissionOperation.AGGREGATE: ("amounts",),
    CommissionOperation.SPLIT_EVEN: ("total", "parts"),
    CommissionOperation.SPLIT_CUSTOM: ("total", "weights"),
}


class CommissionRequest(BaseModel):
    """Запрос на вычисление комиссии."""

    operation: CommissionOperation = Field(..., description="Вычисляемая операция")

    amount: Optional[Number] = Field(None, description="Сумма сделки")
    rate: Optional[Number] = Field(None, description="Явная ставка (фракция)")
    scheme: CommissionScheme = Field(
        default=CommissionScheme.REFERRAL, description="Схема для flat_rate"
    )
    partner_id: Optional[str] = Field(None, description="Идентификатор партнёра")
    probability: Optional[Number] = Field(None, description="Вероятность (0-100)")
    amounts: Optional[list[Number]] = Field(None, description="Суммы для aggregate")
    total: Optional[Number] = Field(None, description="Сумма для split")
    parts: Optional[int] = Field(None, description="Количество получателей")
    weights: Optional[list[Number]] = Field(None, description="Доли для split_custom")
    reconcile: bool = Field(
        default=False, description="Largest-remainder сверка для split_custom"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_required_fields(self) -> "CommissionRequest":
        """Проверка наличия полей, обязательных для операции."""
        missing = [
            name
            for name in REQUIRED_FIELDS[self.operation]
            if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(
                f"Operation {self.operation.value!r} requires fields: {', '.join(missing)}"
            )
        return self

"""
Commission Errors — Типизированная таксономия ошибок

Каждое нарушение входного контракта поднимает собственный класс исключения
с тегом kind (CommissionErrorKind). Вызывающий слой ветвится по kind или
по классу исключения, а не по тексту сообщения.

Все ошибки синхронные и не подлежат retry: они означают некорректный вызов,
а не временный сбой. HTTP слой транслирует их в 400.
"""

from enum import Enum
from typing import Any


class CommissionErrorKind(str, Enum):
    """Вид ошибки валидации"""

    INVALID_AMOUNT = "InvalidAmount"
    INVALID_RATE = "InvalidRate"
    INVALID_PROBABILITY = "InvalidProbability"
    INVALID_PARTNER_COUNT = "InvalidPartnerCount"
    INVALID_WEIGHTS = "InvalidWeights"


class CommissionError(ValueError):
    """
    Базовая ошибка commission engine.

    Attributes:
        kind: Тег вида ошибки
        value: Значение, нарушившее контракт (для диагностики)
    """

    kind: CommissionErrorKind

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class InvalidAmount(CommissionError):
    """Сумма не число, NaN, Inf или отрицательная."""

    kind = CommissionErrorKind.INVALID_AMOUNT


class InvalidRate(CommissionError):
    """Ставка вне [0, 1] (или вне границ схемы, если они применяются)."""

    kind = CommissionErrorKind.INVALID_RATE


class InvalidProbability(CommissionError):
    """Вероятность вне [0, 100]."""

    kind = CommissionErrorKind.INVALID_PROBABILITY


class InvalidPartnerCount(CommissionError):
    """Количество получателей split <= 0."""

    kind = CommissionErrorKind.INVALID_PARTNER_COUNT


class InvalidWeights(CommissionError):
    """Веса split пусты, отрицательны или не суммируются в ~1.0."""

    kind = CommissionErrorKind.INVALID_WEIGHTS

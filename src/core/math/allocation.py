"""
Allocation — Разделение денежной суммы между получателями

Алгоритмы split:
- split_even: равные доли, округлённые вниз до цента, остаток целиком
  последнему получателю
- split_weighted: независимое округление каждой взвешенной доли
  (сумма долей может отличаться от total на ±1 цент на элемент)
- split_weighted_reconciled: largest-remainder, сумма долей ровно round(total)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. split_even: Σ shares == round(total), все элементы кроме последнего равны
2. split_weighted_reconciled: Σ shares == round(total)
3. Все доли >= 0 и квантованы до цента

ПОЛИТИКА ОСТАТКА (split_even):
    Весь остаток после floor-деления достаётся ПОСЛЕДНЕМУ элементу.
    Round-robin распределение было бы равноправной альтернативой, но меняет
    то, кто получает лишний цент.

LARGEST-REMAINDER (split_weighted_reconciled):
    raw_i = total_cents * w_i / Σw
    share_i = floor(raw_i) + (1 если i среди leftover наибольших остатков)
    Равные остатки: меньший индекс первым.
"""

from decimal import ROUND_FLOOR, Decimal, localcontext
from typing import Final, Sequence

from src.core.domain.errors import InvalidPartnerCount, InvalidWeights
from src.core.math.money import (
    ONE,
    ZERO,
    floor_to_cent,
    from_cents,
    is_valid_number,
    round_money,
    to_cents,
    to_decimal,
)

# Допустимое отклонение Σ weights от 1.0
WEIGHT_SUM_TOLERANCE_DEFAULT: Final[Decimal] = Decimal("0.0001")


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_parts(parts: object) -> int:
    """
    Валидация количества получателей.

    Raises:
        InvalidPartnerCount: Если parts не целое число или parts <= 0
    """
    if isinstance(parts, bool) or not isinstance(parts, int):
        raise InvalidPartnerCount(
            f"Partner count must be an integer, got {parts!r}", parts
        )
    if parts <= 0:
        raise InvalidPartnerCount(
            f"Partner count must be greater than 0, got {parts}", parts
        )
    return parts


def validate_weights(
    weights: Sequence[object],
    tolerance: Decimal = WEIGHT_SUM_TOLERANCE_DEFAULT,
) -> list[Decimal]:
    """
    Валидация весов split.

    Args:
        weights: Доли получателей (фракции)
        tolerance: Допустимое |Σ weights - 1.0|

    Returns:
        Веса как Decimal

    Raises:
        InvalidWeights: Если веса пусты, содержат NaN/Inf/отрицательные значения
            или сумма отклоняется от 1.0 больше чем на tolerance
    """
    if not weights:
        raise InvalidWeights("Split percentages must not be empty", weights)

    result: list[Decimal] = []
    for weight in weights:
        if not is_valid_number(weight):
            raise InvalidWeights(
                f"Split percentage must be a finite number, got {weight!r}", weights
            )
        value = to_decimal(weight)
        if value < ZERO:
            raise InvalidWeights(
                f"Split percentage cannot be negative, got {weight!r}", weights
            )
        result.append(value)

    total = sum(result, ZERO)
    if abs(total - ONE) > tolerance:
        raise InvalidWeights(
            f"Split percentages must sum to 1.0, got {total}", weights
        )

    return result


# =============================================================================
# SPLIT
# =============================================================================


def split_even(total: Decimal, parts: int) -> list[Decimal]:
    """
    Равное разделение суммы, остаток последнему получателю.

    base = floor(total * 100 / parts) / 100
    remainder = round(total - base * parts)

    Args:
        total: Неотрицательная сумма (валидированная)
        parts: Количество получателей (валидированное, >= 1)

    Returns:
        parts долей, Σ == round(total)

    Examples:
        >>> split_even(Decimal("100000.00"), 3)
        [Decimal('33333.33'), Decimal('33333.33'), Decimal('33333.34')]
    """
    # Частное округляется вниз, чтобы base * parts никогда не превышал total
    with localcontext() as ctx:
        ctx.rounding = ROUND_FLOOR
        base = floor_to_cent(total / parts)
    remainder = round_money(total - base * parts)

    shares = [base] * parts
    if remainder > ZERO:
        shares[-1] = round_money(shares[-1] + remainder)

    return shares


def split_weighted(total: Decimal, weights: Sequence[Decimal]) -> list[Decimal]:
    """
    Взвешенное разделение с независимым округлением каждой доли.

    Сумма долей НЕ сверяется с round(total): для некоторых наборов весов
    возможен дрейф ±1 цент (например, 100 на [1/3, 1/3, 1/3] → 99.99).

    Examples:
        >>> split_weighted(Decimal("10000"), [Decimal("0.5"), Decimal("0.3"), Decimal("0.2")])
        [Decimal('5000.00'), Decimal('3000.00'), Decimal('2000.00')]
    """
    return [round_money(total * weight) for weight in weights]


def split_weighted_reconciled(
    total: Decimal, weights: Sequence[Decimal]
) -> list[Decimal]:
    """
    Взвешенное разделение методом largest remainder.

    Веса нормализуются к сумме 1, каждая доля округляется вниз до цента,
    оставшиеся центы раздаются по одному в порядке убывания дробного остатка.

    Returns:
        Доли, Σ == round(total)

    Examples:
        >>> split_weighted_reconciled(Decimal("100"), [Decimal("0.5"), Decimal("0.5")])
        [Decimal('50.00'), Decimal('50.00')]
    """
    target_cents = to_cents(total)
    weight_sum = sum(weights, ZERO)

    if weight_sum.is_zero():
        return [from_cents(0) for _ in weights]

    raw = [Decimal(target_cents) * weight / weight_sum for weight in weights]
    floors = [int(value // 1) for value in raw]
    leftover = target_cents - sum(floors)

    # Стабильная сортировка: равные остатки сохраняют порядок индексов
    order = sorted(
        range(len(weights)), key=lambda i: raw[i] - floors[i], reverse=True
    )
    cents = list(floors)
    for step in range(max(leftover, 0)):
        cents[order[step % len(order)]] += 1

    return [from_cents(value) for value in cents]

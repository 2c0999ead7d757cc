"""
Money — Денежные примитивы с точной десятичной арифметикой

Модуль обеспечивает детерминированную работу с денежными суммами:
- Точная конверсия int/float/Decimal → Decimal (float через shortest repr)
- Округление до центов round half away from zero (ROUND_HALF_UP)
- Конверсия в целые центы и обратно
- Валидация входов (amount, rate, probability) с типизированными ошибками

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Float никогда не участвует в арифметике: только Decimal
2. Округление выполняется один раз, на границе возврата результата
3. Возвращаемые суммы >= 0, конечны, не более 2 знаков после запятой
4. -0.00 никогда не возвращается
5. amount <= MAX_AMOUNT: результат с центами умещается в 28 значащих
   цифр контекста decimal по умолчанию
"""

import math
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Final, Union

from src.core.domain.errors import InvalidAmount, InvalidProbability, InvalidRate

Number = Union[int, float, Decimal]

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Квант денежной суммы (1 цент)
CENT: Final[Decimal] = Decimal("0.01")

ZERO: Final[Decimal] = Decimal("0")

ONE: Final[Decimal] = Decimal("1")

CENTS_PER_UNIT: Final[int] = 100

# Верхняя граница вероятности (проценты)
PROBABILITY_MAX: Final[Decimal] = Decimal("100")

# Верхняя граница суммы (10^15). 16 цифр целой части + 2 знака центов
# оставляют запас точности для произведений и сумм в контексте prec=28
MAX_AMOUNT: Final[Decimal] = Decimal("1E+15")


# =============================================================================
# КОНВЕРСИЯ
# =============================================================================


def is_valid_number(value: object) -> bool:
    """
    Проверка, является ли значение конечным числом.

    bool не считается числом, хотя и является подклассом int.

    Args:
        value: Проверяемое значение

    Returns:
        True для конечных int/float/Decimal, False иначе (NaN, Inf, str, None...)
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return False


def to_decimal(value: Number) -> Decimal:
    """
    Точная конверсия числа в Decimal.

    Float конвертируется через repr, поэтому 100.33 → Decimal("100.33"),
    а не двоичное приближение 100.3299999....

    Args:
        value: int, float или Decimal

    Returns:
        Decimal без потери введённых знаков

    Raises:
        TypeError: Если value не число (в том числе bool)

    Examples:
        >>> to_decimal(100.33)
        Decimal('100.33')
        >>> to_decimal(15000)
        Decimal('15000')
    """
    if isinstance(value, bool):
        raise TypeError(f"Expected a number, got bool: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    raise TypeError(f"Expected a number, got {type(value).__name__}: {value!r}")


def round_money(value: Decimal) -> Decimal:
    """
    Округление до центов, round half away from zero.

    round(x) = round_half_away_from_zero(x * 100) / 100

    Args:
        value: Сумма произвольной точности

    Returns:
        Decimal с ровно двумя знаками после запятой

    Examples:
        >>> round_money(Decimal("15.0495"))
        Decimal('15.05')
        >>> round_money(Decimal("0.0015"))
        Decimal('0.00')
    """
    rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        # Нормализуем -0.00 → 0.00
        return abs(rounded)
    return rounded


def floor_to_cent(value: Decimal) -> Decimal:
    """
    Округление вниз до цента (cent-quantized floor).

    Examples:
        >>> floor_to_cent(Decimal("3333.3333"))
        Decimal('3333.33')
    """
    return value.quantize(CENT, rounding=ROUND_FLOOR)


def to_cents(value: Decimal) -> int:
    """
    Конверсия суммы в целые центы (с округлением round_money).

    Examples:
        >>> to_cents(Decimal("100.005"))
        10001
    """
    return int(round_money(value) * CENTS_PER_UNIT)


def from_cents(cents: int) -> Decimal:
    """
    Конверсия целых центов в денежную сумму.

    Examples:
        >>> from_cents(333334)
        Decimal('3333.34')
    """
    return Decimal(cents).scaleb(-2).quantize(CENT)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_amount(value: object, name: str = "amount") -> Decimal:
    """
    Валидация денежной суммы.

    Ноль допустим.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        Точное Decimal представление суммы

    Raises:
        InvalidAmount: Если value не число, NaN, Inf, отрицательное или
            больше MAX_AMOUNT
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidAmount(f"Invalid {name}: must be a number, got {value!r}", value)

    if not is_valid_number(value):
        raise InvalidAmount(f"Invalid {name}: must be finite (not NaN/Inf), got {value!r}", value)

    amount = to_decimal(value)
    if amount < ZERO:
        raise InvalidAmount(f"Invalid {name}: cannot be negative, got {value!r}", value)

    if amount > MAX_AMOUNT:
        raise InvalidAmount(
            f"Invalid {name}: exceeds maximum of {MAX_AMOUNT:f}, got {value!r}", value
        )

    return amount


def validate_rate(value: object, name: str = "rate") -> Decimal:
    """
    Валидация ставки комиссии (доля суммы сделки).

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        Точное Decimal представление ставки

    Raises:
        InvalidRate: Если value не конечное число или вне [0, 1]
    """
    if not is_valid_number(value):
        raise InvalidRate(f"Invalid {name}: must be a finite number, got {value!r}", value)

    rate = to_decimal(value)
    if rate < ZERO or rate > ONE:
        raise InvalidRate(f"Commission {name} must be between 0 and 1, got {value!r}", value)

    return rate


def validate_probability(value: object) -> Decimal:
    """
    Валидация вероятности закрытия сделки (в процентах).

    Raises:
        InvalidProbability: Если value не конечное число или вне [0, 100]
    """
    if not is_valid_number(value):
        raise InvalidProbability(
            f"Probability must be a finite number, got {value!r}", value
        )

    probability = to_decimal(value)
    if probability < ZERO or probability > PROBABILITY_MAX:
        raise InvalidProbability(
            f"Probability must be between 0 and 100, got {value!r}", value
        )

    return probability

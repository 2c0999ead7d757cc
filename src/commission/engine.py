"""Commission Engine — детерминированный расчёт комиссий

Stateless калькулятор денежных комиссий:
- flat-rate (referral/reseller/msp/custom) с явной ставкой или ставкой схемы
- прогрессивная шкала (tiered brackets), аналог маржинальных налоговых ставок
- индивидуальные ставки партнёров с fallback на ставку по умолчанию
- взвешенная по вероятности стоимость сделки (pipeline forecasting)
- агрегация и разделение комиссии между получателями

Порядок каждой операции:
1. Валидация всех входов (InvalidAmount / InvalidRate / ...)
2. Вычисление в Decimal с полной точностью
3. Однократное округление до цента на границе возврата

Единственное разделяемое состояние — таблицы ставок из CommissionConfig,
снапшот которых берётся при создании engine и далее только читается.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from src.core.contracts import validate_commission_request
from src.core.domain.errors import InvalidRate
from src.core.domain.requests import CommissionOperation, CommissionRequest
from src.core.domain.schemes import (
    CommissionConfig,
    CommissionScheme,
    SchemeTerms,
    default_commission_config,
)
from src.core.math.allocation import (
    split_even,
    split_weighted,
    split_weighted_reconciled,
    validate_parts,
    validate_weights,
)
from src.core.math.money import (
    PROBABILITY_MAX,
    ZERO,
    Number,
    round_money,
    validate_amount,
    validate_probability,
    validate_rate,
)

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class TierSlice:
    """Часть суммы, попавшая в одну ступень шкалы."""

    lower_bound: Decimal
    upper_bound: Optional[Decimal]  # None = ∞
    rate: Decimal
    taxable_amount: Decimal  # Срез суммы в этой ступени
    commission: Decimal  # taxable_amount * rate, без округления


@dataclass(frozen=True)
class TieredCommissionBreakdown:
    """Разбивка прогрессивной комиссии по ступеням.

    Invariant: Σ slice.taxable_amount == amount
    Invariant: total == round(Σ slice.commission)
    """

    amount: Decimal
    slices: tuple[TierSlice, ...]
    total: Decimal


# =============================================================================
# ENGINE
# =============================================================================


class CommissionEngine:
    """Commission Engine: чистые функции от входов и таблиц ставок.

    Usage:
        engine = CommissionEngine()
        engine.flat_rate_commission(100000)            # Decimal('15000.00')
        engine.tiered_commission(600000)               # Decimal('90000.00')
        engine.split_even(Decimal("100000.00"), 3)     # [33333.33, 33333.33, 33333.34]
    """

    def __init__(self, config: CommissionConfig | None = None):
        self.config = config or default_commission_config()

        # Read-only снапшот таблиц
        self._schemes: Mapping[CommissionScheme, SchemeTerms] = MappingProxyType(
            dict(self.config.schemes)
        )
        self._partner_rates: Mapping[str, Decimal] = MappingProxyType(
            dict(self.config.partner_rates)
        )
        self._brackets = tuple(self.config.tier_brackets)

    # -------------------------------------------------------------------------
    # Схемы
    # -------------------------------------------------------------------------

    def scheme_terms(self, scheme: CommissionScheme) -> SchemeTerms:
        """Условия схемы.

        Raises:
            ValueError: Неизвестное имя схемы
            KeyError: Если схема отсутствует в конфигурации
        """
        scheme = CommissionScheme(scheme)
        try:
            return self._schemes[scheme]
        except KeyError:
            raise KeyError(f"Commission scheme not configured: {scheme!r}") from None

    def is_rate_within_scheme_bounds(self, scheme: CommissionScheme, rate: Number) -> bool:
        """Проверка, что ставка в договорных границах [min_rate, max_rate] схемы."""
        value = validate_rate(rate)
        terms = self.scheme_terms(scheme)
        return terms.min_rate <= value <= terms.max_rate

    # -------------------------------------------------------------------------
    # Flat-rate
    # -------------------------------------------------------------------------

    def flat_rate_commission(
        self,
        amount: Number,
        rate: Optional[Number] = None,
        scheme: CommissionScheme = CommissionScheme.REFERRAL,
    ) -> Decimal:
        """Комиссия по фиксированной ставке.

        Args:
            amount: Сумма сделки
            rate: Явная ставка; None → ставка схемы по умолчанию
            scheme: Схема, чья ставка используется по умолчанию

        Returns:
            round(amount * rate)

        Raises:
            InvalidAmount: amount не валиден
            InvalidRate: ставка вне [0, 1] или вне границ схемы
                (при config.enforce_scheme_bounds)
        """
        value = validate_amount(amount)
        scheme = CommissionScheme(scheme)
        terms = self.scheme_terms(scheme)

        if rate is None:
            effective_rate = validate_rate(terms.default_rate)
        else:
            effective_rate = validate_rate(rate)
            if self.config.enforce_scheme_bounds and not (
                terms.min_rate <= effective_rate <= terms.max_rate
            ):
                raise InvalidRate(
                    f"Commission rate {rate!r} outside {scheme.value} bounds "
                    f"[{terms.min_rate}, {terms.max_rate}]",
                    rate,
                )

        result = round_money(value * effective_rate)
        logger.debug(
            "flat_rate_commission scheme=%s amount=%s rate=%s -> %s",
            scheme.value, value, effective_rate, result,
        )
        return result

    def referral_commission(self, amount: Number, rate: Optional[Number] = None) -> Decimal:
        return self.flat_rate_commission(amount, rate, CommissionScheme.REFERRAL)

    def reseller_commission(self, amount: Number, rate: Optional[Number] = None) -> Decimal:
        return self.flat_rate_commission(amount, rate, CommissionScheme.RESELLER)

    def msp_commission(self, amount: Number, rate: Optional[Number] = None) -> Decimal:
        return self.flat_rate_commission(amount, rate, CommissionScheme.MSP)

    def custom_commission(self, amount: Number, rate: Optional[Number] = None) -> Decimal:
        return self.flat_rate_commission(amount, rate, CommissionScheme.CUSTOM)

    # -------------------------------------------------------------------------
    # Tiered
    # -------------------------------------------------------------------------

    def tiered_breakdown(self, amount: Number) -> TieredCommissionBreakdown:
        """Прогрессивная комиссия с разбивкой по ступеням.

        Алгоритм:
            remaining = amount, previous_ceiling = 0
            для каждой ступени (по возрастанию):
                slice = min(remaining, ceiling - previous_ceiling)
                total += slice * rate
                remaining -= slice
                previous_ceiling = ceiling
            стоп при remaining <= 0 или исчерпании ступеней

        Каждый цент суммы попадает ровно в один срез. Срезы накапливаются
        без округления, округляется только итог.
        """
        value = validate_amount(amount)

        remaining = value
        previous_ceiling = ZERO
        accumulated = ZERO
        slices: list[TierSlice] = []

        for bracket in self._brackets:
            if remaining <= ZERO:
                break

            if bracket.upper_bound is None:
                taxable = remaining
            else:
                taxable = min(remaining, bracket.upper_bound - previous_ceiling)

            commission = taxable * bracket.rate
            slices.append(
                TierSlice(
                    lower_bound=previous_ceiling,
                    upper_bound=bracket.upper_bound,
                    rate=bracket.rate,
                    taxable_amount=taxable,
                    commission=commission,
                )
            )

            accumulated += commission
            remaining -= taxable
            if bracket.upper_bound is not None:
                previous_ceiling = bracket.upper_bound

        total = round_money(accumulated)
        logger.debug(
            "tiered_commission amount=%s brackets_used=%d -> %s",
            value, len(slices), total,
        )
        return TieredCommissionBreakdown(amount=value, slices=tuple(slices), total=total)

    def tiered_commission(self, amount: Number) -> Decimal:
        """Прогрессивная комиссия (итог tiered_breakdown)."""
        return self.tiered_breakdown(amount).total

    # -------------------------------------------------------------------------
    # Partner
    # -------------------------------------------------------------------------

    def partner_rate(self, partner_id: str) -> Decimal:
        """Ставка партнёра; отсутствующий партнёр → ставка схемы по умолчанию."""
        rate = self._partner_rates.get(partner_id)
        if rate is None:
            rate = self.scheme_terms(self.config.default_partner_scheme).default_rate
            logger.debug(
                "partner %r not in rate table, using %s default rate %s",
                partner_id, self.config.default_partner_scheme.value, rate,
            )
        return rate

    def partner_commission(self, amount: Number, partner_id: str) -> Decimal:
        """Комиссия по индивидуальной ставке партнёра.

        Returns:
            round(amount * partner_rate(partner_id))
        """
        value = validate_amount(amount)
        rate = validate_rate(self.partner_rate(partner_id))

        result = round_money(value * rate)
        logger.debug(
            "partner_commission partner=%r amount=%s rate=%s -> %s",
            partner_id, value, rate, result,
        )
        return result

    # -------------------------------------------------------------------------
    # Weighted value
    # -------------------------------------------------------------------------

    def weighted_value(self, amount: Number, probability: Number) -> Decimal:
        """Стоимость сделки, взвешенная по вероятности закрытия.

        Args:
            amount: Сумма сделки
            probability: Вероятность в процентах [0, 100]

        Returns:
            round(amount * probability / 100)

        Raises:
            InvalidAmount, InvalidProbability
        """
        value = validate_amount(amount)
        pct = validate_probability(probability)

        result = round_money(value * pct / PROBABILITY_MAX)
        logger.debug("weighted_value amount=%s probability=%s -> %s", value, pct, result)
        return result

    def weighted_pipeline_value(self, deals: Iterable[tuple[Number, Number]]) -> Decimal:
        """Суммарная взвешенная стоимость pipeline.

        Взвешенные значения сделок суммируются без промежуточного округления.

        Args:
            deals: Пары (amount, probability)
        """
        accumulated = ZERO
        count = 0
        for amount, probability in deals:
            value = validate_amount(amount)
            pct = validate_probability(probability)
            accumulated += value * pct / PROBABILITY_MAX
            count += 1

        result = round_money(accumulated)
        logger.debug("weighted_pipeline_value deals=%d -> %s", count, result)
        return result

    # -------------------------------------------------------------------------
    # Aggregate / Split
    # -------------------------------------------------------------------------

    def aggregate(self, amounts: Iterable[Number]) -> Decimal:
        """Сумма комиссий, round(Σ amounts). Пустой список → 0.00."""
        total = sum(
            (validate_amount(amount, name="commission") for amount in amounts), ZERO
        )
        result = round_money(total)
        logger.debug("aggregate -> %s", result)
        return result

    def split_even(self, total: Number, parts: int) -> list[Decimal]:
        """Равное разделение комиссии, остаток последнему получателю.

        Raises:
            InvalidAmount: total не валиден
            InvalidPartnerCount: parts <= 0
        """
        value = validate_amount(total, name="total commission")
        count = validate_parts(parts)

        shares = split_even(value, count)
        logger.debug("split_even total=%s parts=%d -> %s", value, count, shares)
        return shares

    def split_custom(
        self,
        total: Number,
        weights: Sequence[Number],
        reconcile: bool = False,
    ) -> list[Decimal]:
        """Разделение комиссии по долям.

        Args:
            total: Сумма для разделения
            weights: Доли получателей, Σ ≈ 1.0 (допуск config.split_weight_tolerance)
            reconcile: False → независимое округление каждой доли (возможен
                дрейф ±1 цент относительно round(total));
                True → largest-remainder, Σ == round(total)

        Raises:
            InvalidAmount, InvalidWeights
        """
        value = validate_amount(total, name="total commission")
        fractions = validate_weights(weights, self.config.split_weight_tolerance)

        if reconcile:
            shares = split_weighted_reconciled(value, fractions)
        else:
            shares = split_weighted(value, fractions)

        logger.debug(
            "split_custom total=%s weights=%d reconcile=%s -> %s",
            value, len(fractions), reconcile, shares,
        )
        return shares

    # -------------------------------------------------------------------------
    # Request dispatch
    # -------------------------------------------------------------------------

    def evaluate(
        self, request: Union[CommissionRequest, dict[str, Any]]
    ) -> Union[Decimal, list[Decimal]]:
        """Выполнение операции по запросу HTTP слоя.

        dict проверяется по контракту commission_request и разбирается в
        CommissionRequest.

        Raises:
            jsonschema.ValidationError: dict не соответствует контракту
            pydantic.ValidationError: нет полей, обязательных для операции
            CommissionError: нарушен входной контракт операции
        """
        if isinstance(request, dict):
            validate_commission_request(request)
            request = CommissionRequest.model_validate(request)

        op = request.operation
        if op == CommissionOperation.FLAT_RATE:
            return self.flat_rate_commission(request.amount, request.rate, request.scheme)
        if op == CommissionOperation.TIERED:
            return self.tiered_commission(request.amount)
        if op == CommissionOperation.PARTNER:
            return self.partner_commission(request.amount, request.partner_id)
        if op == CommissionOperation.WEIGHTED_VALUE:
            return self.weighted_value(request.amount, request.probability)
        if op == CommissionOperation.AGGREGATE:
            return self.aggregate(request.amounts)
        if op == CommissionOperation.SPLIT_EVEN:
            return self.split_even(request.total, request.parts)
        if op == CommissionOperation.SPLIT_CUSTOM:
            return self.split_custom(request.total, request.weights, request.reconcile)

        raise ValueError(f"Unsupported operation: {op!r}")

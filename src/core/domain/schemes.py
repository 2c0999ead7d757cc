"""
CommissionConfig — Неизменяемая конфигурация ставок

Immutable Pydantic модели таблиц ставок, которые передаются в
CommissionEngine при создании:
- SchemeTerms: ставка по умолчанию и границы для схемы (referral/reseller/msp/custom)
- TierBracket: прогрессивная шкала (верхняя граница + ставка)
- CommissionConfig: полный набор таблиц

Таблицы — статическая конфигурация: загружаются один раз и не изменяются.
Обновление = новый экземпляр CommissionConfig (atomic replace), никогда
не мутация полей.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class CommissionScheme(str, Enum):
    """Схема комиссии партнёра"""

    REFERRAL = "referral"
    RESELLER = "reseller"
    MSP = "msp"
    CUSTOM = "custom"


# =============================================================================
# MODELS
# =============================================================================


class SchemeTerms(BaseModel):
    """
    Условия схемы комиссии.

    Инвариант: 0 <= min_rate <= default_rate <= max_rate <= 1
    """

    default_rate: Decimal = Field(..., ge=0, le=1, description="Ставка по умолчанию (фракция)")
    min_rate: Decimal = Field(..., ge=0, le=1, description="Минимальная договорная ставка")
    max_rate: Decimal = Field(..., ge=0, le=1, description="Максимальная договорная ставка")
    description: str = Field(default="", description="Описание схемы")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_bounds_order(self) -> "SchemeTerms":
        """Проверка min_rate <= default_rate <= max_rate."""
        if not self.min_rate <= self.default_rate <= self.max_rate:
            raise ValueError(
                f"Scheme rates must satisfy min <= default <= max, got "
                f"min={self.min_rate}, default={self.default_rate}, max={self.max_rate}"
            )
        return self


class TierBracket(BaseModel):
    """
    Одна ступень прогрессивной шкалы.

    upper_bound=None означает бесконечность (последняя ступень).
    """

    upper_bound: Optional[Annotated[Decimal, Field(gt=0)]] = Field(
        ..., description="Верхняя граница ступени (None = ∞)"
    )
    rate: Decimal = Field(..., ge=0, le=1, description="Ставка ступени (фракция)")

    model_config = {"frozen": True}

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None


class CommissionConfig(BaseModel):
    """
    Полная конфигурация ставок commission engine.

    Инварианты:
    - default_partner_scheme присутствует в schemes
    - tier_brackets строго возрастают, покрывают [0, ∞) без разрывов:
      все границы кроме последней конечны, последняя = None
    - partner_rates в [0, 1]
    """

    schemes: dict[CommissionScheme, SchemeTerms] = Field(
        ..., min_length=1, description="Условия по схемам"
    )
    tier_brackets: tuple[TierBracket, ...] = Field(
        ..., min_length=1, description="Прогрессивная шкала (по возрастанию)"
    )
    partner_rates: dict[str, Decimal] = Field(
        default_factory=dict, description="Индивидуальные ставки партнёров"
    )
    default_partner_scheme: CommissionScheme = Field(
        default=CommissionScheme.REFERRAL,
        description="Схема, чья ставка применяется к партнёрам вне таблицы",
    )
    split_weight_tolerance: Decimal = Field(
        default=Decimal("0.0001"), ge=0, description="Допуск |Σ weights - 1.0|"
    )
    enforce_scheme_bounds: bool = Field(
        default=False,
        description="Отклонять явные ставки вне [min_rate, max_rate] схемы",
    )

    model_config = {"frozen": True}

    @field_validator("tier_brackets")
    @classmethod
    def validate_tier_brackets(
        cls, v: tuple[TierBracket, ...]
    ) -> tuple[TierBracket, ...]:
        """Проверка покрытия [0, ∞) строго возрастающими границами."""
        *bounded, last = v
        if not last.is_unbounded:
            raise ValueError("Last tier bracket must be unbounded (upper_bound=None)")

        previous = Decimal("0")
        for index, bracket in enumerate(bounded):
            if bracket.upper_bound is None:
                raise ValueError(
                    f"Only the last tier bracket may be unbounded, bracket {index} is"
                )
            if bracket.upper_bound <= previous:
                raise ValueError(
                    f"Tier bracket upper bounds must be strictly increasing, "
                    f"bracket {index}: {bracket.upper_bound} <= {previous}"
                )
            previous = bracket.upper_bound
        return v

    @field_validator("partner_rates")
    @classmethod
    def validate_partner_rates(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for partner_id, rate in v.items():
            if not partner_id:
                raise ValueError("Partner id must be a non-empty string")
            if not rate.is_finite() or rate < 0 or rate > 1:
                raise ValueError(
                    f"Partner rate for {partner_id!r} must be between 0 and 1, got {rate}"
                )
        return v

    @model_validator(mode="after")
    def validate_default_partner_scheme(self) -> "CommissionConfig":
        if self.default_partner_scheme not in self.schemes:
            raise ValueError(
                f"default_partner_scheme {self.default_partner_scheme.value!r} "
                f"is missing from schemes"
            )
        return self


# =============================================================================
# DEFAULTS
# =============================================================================


def default_commission_config() -> CommissionConfig:
    """
    Стандартные таблицы ставок.

    - referral 15% (5-25%), reseller 30% (20-50%), msp 25% (15-40%), custom 20% (5-50%)
    - шкала: 0-100k 10%, 100k-500k 15%, 500k+ 20%
    - премиальные партнёры 18%, стратегический партнёр 22%
    """
    return CommissionConfig(
        schemes={
            CommissionScheme.REFERRAL: SchemeTerms(
                default_rate=Decimal("0.15"),
                min_rate=Decimal("0.05"),
                max_rate=Decimal("0.25"),
                description="One-time referral commission",
            ),
            CommissionScheme.RESELLER: SchemeTerms(
                default_rate=Decimal("0.30"),
                min_rate=Decimal("0.20"),
                max_rate=Decimal("0.50"),
                description="Reseller margin-based commission",
            ),
            CommissionScheme.MSP: SchemeTerms(
                default_rate=Decimal("0.25"),
                min_rate=Decimal("0.15"),
                max_rate=Decimal("0.40"),
                description="Managed service provider ongoing commission",
            ),
            CommissionScheme.CUSTOM: SchemeTerms(
                default_rate=Decimal("0.20"),
                min_rate=Decimal("0.05"),
                max_rate=Decimal("0.50"),
                description="Custom commission structure",
            ),
        },
        tier_brackets=(
            TierBracket(upper_bound=Decimal("100000"), rate=Decimal("0.10")),
            TierBracket(upper_bound=Decimal("500000"), rate=Decimal("0.15")),
            TierBracket(upper_bound=None, rate=Decimal("0.20")),
        ),
        partner_rates={
            "partner-premium-001": Decimal("0.18"),
            "partner-premium-002": Decimal("0.18"),
            "partner-strategic-001": Decimal("0.22"),
        },
    )

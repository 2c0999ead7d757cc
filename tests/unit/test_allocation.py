"""
Тесты для модуля Allocation

Проверяет:
1. split_even: остаток последнему, точная реконструкция суммы
2. split_weighted: независимое округление (и его дрейф)
3. split_weighted_reconciled: largest remainder, точная реконструкция
4. Валидацию количества получателей и весов
"""

from decimal import Decimal

import pytest

from src.core.domain.errors import CommissionErrorKind, InvalidPartnerCount, InvalidWeights
from src.core.math.allocation import (
    split_even,
    split_weighted,
    split_weighted_reconciled,
    validate_parts,
    validate_weights,
)
from src.core.math.money import MAX_AMOUNT, round_money, to_decimal

THIRD = to_decimal(1 / 3)


def _d(*values: str) -> list[Decimal]:
    return [Decimal(v) for v in values]


# =============================================================================
# ТЕСТЫ ВАЛИДАЦИИ
# =============================================================================


class TestValidateParts:
    """Тесты для validate_parts"""

    def test_positive_int_valid(self) -> None:
        assert validate_parts(1) == 1
        assert validate_parts(3) == 3

    @pytest.mark.parametrize("parts", [0, -1, -100])
    def test_non_positive_raises(self, parts: int) -> None:
        with pytest.raises(InvalidPartnerCount, match="greater than 0"):
            validate_parts(parts)

    @pytest.mark.parametrize("parts", [2.0, "3", None, True])
    def test_non_int_raises(self, parts: object) -> None:
        with pytest.raises(InvalidPartnerCount, match="must be an integer"):
            validate_parts(parts)

    def test_kind(self) -> None:
        with pytest.raises(InvalidPartnerCount) as exc_info:
            validate_parts(0)
        assert exc_info.value.kind == CommissionErrorKind.INVALID_PARTNER_COUNT


class TestValidateWeights:
    """Тесты для validate_weights"""

    def test_valid_weights_converted(self) -> None:
        assert validate_weights([0.5, 0.3, 0.2]) == _d("0.5", "0.3", "0.2")

    def test_sum_within_tolerance(self) -> None:
        """Σ = 0.99999 и 0.9999 укладываются в допуск 1e-4"""
        validate_weights([0.33333, 0.33333, 0.33333])
        validate_weights([0.5, 0.4999])

    def test_sum_outside_tolerance_raises(self) -> None:
        with pytest.raises(InvalidWeights, match="must sum to 1.0"):
            validate_weights([0.5, 0.3])

        with pytest.raises(InvalidWeights, match="must sum to 1.0"):
            validate_weights([0.5, 0.4998])

    def test_custom_tolerance(self) -> None:
        validate_weights([0.5, 0.49], tolerance=Decimal("0.01"))

        with pytest.raises(InvalidWeights):
            validate_weights([0.5, 0.49])

    def test_empty_raises(self) -> None:
        with pytest.raises(InvalidWeights, match="must not be empty"):
            validate_weights([])

    def test_negative_weight_raises(self) -> None:
        """Σ == 1.0, но отрицательная доля дала бы отрицательную сумму"""
        with pytest.raises(InvalidWeights, match="cannot be negative"):
            validate_weights([0.5, 0.6, -0.1])

    def test_nan_weight_raises(self) -> None:
        with pytest.raises(InvalidWeights, match="finite"):
            validate_weights([float("nan"), 1.0])

    def test_kind(self) -> None:
        with pytest.raises(InvalidWeights) as exc_info:
            validate_weights([0.2])
        assert exc_info.value.kind == CommissionErrorKind.INVALID_WEIGHTS


# =============================================================================
# ТЕСТЫ SPLIT EVEN
# =============================================================================


class TestSplitEven:
    """Тесты для split_even"""

    def test_remainder_goes_to_last(self) -> None:
        assert split_even(Decimal("100000.00"), 3) == _d("33333.33", "33333.33", "33333.34")
        assert split_even(Decimal("10000"), 3) == _d("3333.33", "3333.33", "3333.34")

    def test_exact_division(self) -> None:
        assert split_even(Decimal("10000"), 2) == _d("5000.00", "5000.00")
        assert split_even(Decimal("15000"), 3) == _d("5000.00", "5000.00", "5000.00")

    def test_single_part(self) -> None:
        assert split_even(Decimal("123.45"), 1) == _d("123.45")

    def test_single_cent_many_parts(self) -> None:
        assert split_even(Decimal("0.01"), 3) == _d("0.00", "0.00", "0.01")

    def test_zero_total(self) -> None:
        assert split_even(Decimal("0"), 4) == _d("0.00", "0.00", "0.00", "0.00")

    def test_sub_cent_total_rounds_into_last(self) -> None:
        """total с долями цента: Σ == round(total)"""
        assert split_even(Decimal("10.005"), 1) == _d("10.01")

    def test_base_is_floor_of_quotient(self) -> None:
        """Частное 0.0299...9 за пределами 28 цифр: base = 0.02, а не 0.03"""
        total = Decimal("0.08" + "9" * 29)
        shares = split_even(total, 3)

        assert shares == _d("0.02", "0.02", "0.05")
        assert shares[0] * 3 <= total
        assert sum(shares) == round_money(total)

    def test_maximum_amount(self) -> None:
        shares = split_even(MAX_AMOUNT, 3)
        assert shares == _d("333333333333333.33", "333333333333333.33", "333333333333333.34")
        assert sum(shares) == MAX_AMOUNT

    @pytest.mark.parametrize(
        "total",
        ["0", "0.01", "1", "99.99", "100000", "12345.67", "10.005", "999999.99"],
    )
    def test_sum_reconstructs_rounded_total(self, total: str) -> None:
        """Σ split_even(total, n) == round(total) для всех n >= 1"""
        value = Decimal(total)
        for parts in range(1, 13):
            shares = split_even(value, parts)

            assert len(shares) == parts
            assert sum(shares) == round_money(value)
            # Все элементы кроме последнего равны
            assert len(set(shares[:-1])) <= 1
            assert shares[-1] >= shares[0]
            assert all(share.as_tuple().exponent == -2 for share in shares)


# =============================================================================
# ТЕСТЫ SPLIT WEIGHTED
# =============================================================================


class TestSplitWeighted:
    """Тесты для split_weighted (независимое округление)"""

    def test_exact_weights(self) -> None:
        shares = split_weighted(Decimal("10000"), _d("0.5", "0.3", "0.2"))
        assert shares == _d("5000.00", "3000.00", "2000.00")

    def test_drift_down_for_thirds(self) -> None:
        """100 на три равные доли: 33.33 * 3 = 99.99 (дрейф -1 цент)"""
        shares = split_weighted(Decimal("100"), [THIRD, THIRD, THIRD])
        assert shares == _d("33.33", "33.33", "33.33")
        assert sum(shares) == Decimal("99.99")

    def test_drift_up_for_halves(self) -> None:
        """0.05 пополам: 0.025 → 0.03 дважды = 0.06 (дрейф +1 цент)"""
        shares = split_weighted(Decimal("0.05"), _d("0.5", "0.5"))
        assert shares == _d("0.03", "0.03")
        assert sum(shares) == Decimal("0.06")


class TestSplitWeightedReconciled:
    """Тесты для split_weighted_reconciled (largest remainder)"""

    def test_exact_weights_unchanged(self) -> None:
        shares = split_weighted_reconciled(Decimal("10000"), _d("0.5", "0.3", "0.2"))
        assert shares == _d("5000.00", "3000.00", "2000.00")

    def test_thirds_reconcile_to_total(self) -> None:
        """Равные остатки: лишний цент получает меньший индекс"""
        shares = split_weighted_reconciled(Decimal("100"), [THIRD, THIRD, THIRD])
        assert shares == _d("33.34", "33.33", "33.33")
        assert sum(shares) == Decimal("100.00")

    def test_halves_reconcile_to_total(self) -> None:
        shares = split_weighted_reconciled(Decimal("0.05"), _d("0.5", "0.5"))
        assert shares == _d("0.03", "0.02")
        assert sum(shares) == Decimal("0.05")

    def test_largest_remainder_wins(self) -> None:
        """33.3 / 33.3 / 33.4 цента → лишний цент последнему (остаток 0.4)"""
        shares = split_weighted_reconciled(Decimal("1.00"), _d("0.333", "0.333", "0.334"))
        assert shares == _d("0.33", "0.33", "0.34")

    def test_weights_normalized(self) -> None:
        """Σ weights = 0.9999: сумма всё равно ровно round(total)"""
        shares = split_weighted_reconciled(Decimal("1000000"), _d("0.5", "0.4999"))
        assert sum(shares) == Decimal("1000000.00")

    def test_zero_weight_gets_nothing(self) -> None:
        shares = split_weighted_reconciled(Decimal("10"), _d("0", "1"))
        assert shares == _d("0.00", "10.00")

    @pytest.mark.parametrize("total", ["0.01", "0.05", "1", "99.99", "100", "12345.67"])
    def test_sum_reconstructs_rounded_total(self, total: str) -> None:
        value = Decimal(total)
        for weights in (
            [THIRD, THIRD, THIRD],
            _d("0.1", "0.2", "0.3", "0.4"),
            _d("0.125", "0.125", "0.75"),
            _d("0.07", "0.93"),
        ):
            shares = split_weighted_reconciled(value, weights)
            assert sum(shares) == round_money(value)
            assert all(share >= 0 for share in shares)

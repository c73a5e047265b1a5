import pytest

from domain.tax import compute_tax
from domain.token import to_wei
from tests.constants import AIRDROPER


def test_three_percent_of_thousand_tokens() -> None:
    split = compute_tax(to_wei(1000), 300, AIRDROPER)

    assert split.tax == to_wei(30)
    assert split.net_amount == to_wei(970)
    assert split.tax_recipient == AIRDROPER


@pytest.mark.parametrize(
    ("amount", "expected_tax"),
    [(0, 0), (1, 0), (33, 0), (34, 1), (100, 3), (199, 5)],
)
def test_tax_is_floored(amount: int, expected_tax: int) -> None:
    split = compute_tax(amount, 300, AIRDROPER)

    assert split.tax == expected_tax
    assert split.tax + split.net_amount == amount


def test_zero_rate_charges_nothing() -> None:
    assert compute_tax(12345, 0, AIRDROPER).tax == 0


def test_invalid_inputs_are_rejected() -> None:
    with pytest.raises(ValueError):
        compute_tax(-1, 300, AIRDROPER)
    with pytest.raises(TypeError):
        compute_tax(100.0, 300, AIRDROPER)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        compute_tax(True, 300, AIRDROPER)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        compute_tax(1, 10_001, AIRDROPER)

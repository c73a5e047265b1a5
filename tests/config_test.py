import pytest

from config import AppSettings
from domain.token import to_wei


def test_defaults_build_unpack_parameters() -> None:
    parameters = AppSettings().token_parameters()

    assert parameters.symbol == "UNP"
    assert parameters.total_supply == to_wei(1_000_000_000)
    assert parameters.tax_basis_points == 300


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UNPACK_INITIAL_SUPPLY", "21000000")
    monkeypatch.setenv("UNPACK_TAX_BASIS_POINTS", "250")

    parameters = AppSettings().token_parameters()

    assert parameters.total_supply == to_wei(21_000_000)
    assert parameters.tax_basis_points == 250

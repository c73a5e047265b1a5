from __future__ import annotations

from functools import cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.token import TokenParameters, to_wei


class AppSettings(BaseSettings):
    token_name: str = "UnPack"
    token_symbol: str = "UNP"
    decimals: int = 18
    # Whole tokens; converted to wei when building the ledger parameters.
    initial_supply: int = 1_000_000_000
    tax_basis_points: int = 300
    database_file: str = "unpack_ledger.db"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="UNPACK_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def token_parameters(self) -> TokenParameters:
        return TokenParameters(
            name=self.token_name,
            symbol=self.token_symbol,
            decimals=self.decimals,
            total_supply=to_wei(self.initial_supply, self.decimals),
            tax_basis_points=self.tax_basis_points,
        )


@cache
def config() -> AppSettings:
    return AppSettings()

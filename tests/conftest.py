from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base
from domain.token import TokenParameters
from domain.token_ledger import TokenLedger
from tests.constants import ROLE_ADDRESSES, TOTAL_SUPPLY

engine: Engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
session_factory = sessionmaker(engine)


@pytest.fixture(scope="function")
def test_session() -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session


@pytest.fixture(scope="function", autouse=True)
def reset_db() -> Generator[None, None, None]:
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def parameters() -> TokenParameters:
    return TokenParameters(total_supply=TOTAL_SUPPLY)


@pytest.fixture(scope="function")
def ledger(parameters: TokenParameters) -> TokenLedger:
    token_ledger = TokenLedger(parameters)
    token_ledger.initialize(*ROLE_ADDRESSES)
    return token_ledger

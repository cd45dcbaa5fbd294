import os
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# Registers every table on SQLModel.metadata
import src.domain  # noqa: F401
from src.adapter.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyPointTransactionRepository,
    SqlAlchemyProcessedInvoiceRepository,
    SqlAlchemyProductPointRateRepository,
    SqlAlchemyReferralRepository,
    SqlAlchemySlabDefinitionRepository,
    SqlAlchemySlabEvaluationRepository,
    SqlAlchemyWithdrawalRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.points_ledger import PointsLedger


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """
    Create test database engine

    Uses TEST_DB_URI when set (e.g. a PostgreSQL test database), otherwise a
    throwaway SQLite file per test.
    """
    test_db_url = os.environ.get("TEST_DB_URI") or f"sqlite+aiosqlite:///{tmp_path / 'loyalty_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


class Repos:
    """Every SQLAlchemy repository bound to one session, plus the ledger and unit of work"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.uow = SqlAlchemyUnitOfWork(session)
        self.accounts = SqlAlchemyAccountRepository(session)
        self.transactions = SqlAlchemyPointTransactionRepository(session)
        self.rates = SqlAlchemyProductPointRateRepository(session)
        self.referrals = SqlAlchemyReferralRepository(session)
        self.processed_invoices = SqlAlchemyProcessedInvoiceRepository(session)
        self.slab_definitions = SqlAlchemySlabDefinitionRepository(session)
        self.slab_evaluations = SqlAlchemySlabEvaluationRepository(session)
        self.withdrawals = SqlAlchemyWithdrawalRepository(session)
        self.ledger = PointsLedger(self.accounts, self.transactions)


@pytest.fixture
def repos(db_session):
    return Repos(db_session)


@pytest.fixture
def make_repos():
    """Build a Repos bundle for an extra session (concurrency tests)"""
    return Repos

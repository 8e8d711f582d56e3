"""Tests for SqlUnitOfWork — session lifecycle without a database."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from portfolio_ledger.infrastructure.persistence.repositories import (
    SqlPortfolioRepository,
    SqlUnitOfWork,
)


def _factory():
    session = AsyncMock()
    return MagicMock(return_value=session), session


async def test_enter_binds_repositories_to_new_session():
    factory, session = _factory()
    async with SqlUnitOfWork(factory) as uow:
        assert isinstance(uow.portfolios, SqlPortfolioRepository)
        assert uow.holdings._session is session


async def test_commit_commits_session():
    factory, session = _factory()
    async with SqlUnitOfWork(factory) as uow:
        await uow.commit()
    session.commit.assert_awaited_once()


async def test_exit_rolls_back_and_closes():
    factory, session = _factory()
    async with SqlUnitOfWork(factory):
        pass
    session.rollback.assert_awaited_once()
    session.close.assert_awaited_once()


async def test_error_rolls_back_without_commit():
    factory, session = _factory()
    with pytest.raises(RuntimeError):
        async with SqlUnitOfWork(factory):
            raise RuntimeError("boom")
    session.commit.assert_not_awaited()
    session.close.assert_awaited_once()

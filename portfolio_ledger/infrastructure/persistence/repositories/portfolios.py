"""SQLAlchemy implementation of PortfolioRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from portfolio_ledger.domain.models.portfolio import AssetAllocation as DomainAllocation
from portfolio_ledger.domain.models.portfolio import Portfolio as DomainPortfolio
from portfolio_ledger.domain.repositories.portfolios import PortfolioRepository
from portfolio_ledger.infrastructure.persistence.models.portfolio import (
    Portfolio as OrmPortfolio,
)
from portfolio_ledger.infrastructure.persistence.models.portfolio import (
    PortfolioAllocation as OrmAllocation,
)


def _allocation_to_domain(row: OrmAllocation) -> DomainAllocation:
    return DomainAllocation(
        asset=row.asset,
        target_allocation_bps=row.target_allocation_bps,
        current_value=int(row.current_value),
        target_value=int(row.target_value),
        last_rebalance_time=row.last_rebalance_time,
    )


def _portfolio_to_domain(row: OrmPortfolio) -> DomainPortfolio:
    return DomainPortfolio(
        portfolio_id=row.portfolio_id,
        owner=row.owner,
        name=row.name,
        allocations=[_allocation_to_domain(a) for a in row.allocations],
        total_value=int(row.total_value),
        last_rebalance_time=row.last_rebalance_time,
        created_at=row.created_at,
        is_active=row.is_active,
        risk_level=row.risk_level,
        rebalance_threshold_bps=row.rebalance_threshold_bps,
    )


def _allocation_rows(entity: DomainPortfolio) -> list[OrmAllocation]:
    return [
        OrmAllocation(
            portfolio_id=entity.portfolio_id,
            asset=a.asset,
            position=i,
            target_allocation_bps=a.target_allocation_bps,
            current_value=a.current_value,
            target_value=a.target_value,
            last_rebalance_time=a.last_rebalance_time,
        )
        for i, a in enumerate(entity.allocations)
    ]


class SqlPortfolioRepository(PortfolioRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, portfolio_id: int) -> DomainPortfolio | None:
        row = await self._load(portfolio_id)
        return _portfolio_to_domain(row) if row else None

    async def list(self, limit: int = 50, offset: int = 0) -> list[DomainPortfolio]:
        stmt = (
            select(OrmPortfolio)
            .options(selectinload(OrmPortfolio.allocations))
            .order_by(OrmPortfolio.portfolio_id.asc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [_portfolio_to_domain(row) for row in result.scalars()]

    async def list_by_owner(self, owner: str) -> list[DomainPortfolio]:
        stmt = (
            select(OrmPortfolio)
            .options(selectinload(OrmPortfolio.allocations))
            .where(OrmPortfolio.owner == owner)
            .order_by(OrmPortfolio.portfolio_id.asc())
        )
        result = await self._session.execute(stmt)
        return [_portfolio_to_domain(row) for row in result.scalars()]

    async def create(self, entity: DomainPortfolio) -> DomainPortfolio:
        row = OrmPortfolio(
            owner=entity.owner,
            name=entity.name,
            total_value=entity.total_value,
            last_rebalance_time=entity.last_rebalance_time,
            created_at=entity.created_at,
            is_active=entity.is_active,
            risk_level=entity.risk_level,
            rebalance_threshold_bps=entity.rebalance_threshold_bps,
        )
        self._session.add(row)
        await self._session.flush()  # assigns portfolio_id from the sequence
        return entity.model_copy(update={"portfolio_id": row.portfolio_id})

    async def update(self, entity: DomainPortfolio) -> DomainPortfolio:
        row = await self._load(entity.portfolio_id)
        if row is None:
            raise KeyError(f"Portfolio {entity.portfolio_id} does not exist")
        row.name = entity.name
        row.total_value = entity.total_value
        row.last_rebalance_time = entity.last_rebalance_time
        row.is_active = entity.is_active
        row.rebalance_threshold_bps = entity.rebalance_threshold_bps

        new_rows = _allocation_rows(entity)
        if [a.asset for a in row.allocations] != [a.asset for a in new_rows] or any(
            _allocation_to_domain(old) != _allocation_to_domain(new)
            for old, new in zip(row.allocations, new_rows)
        ):
            # Orphans must be deleted before rows with the same PK are inserted.
            row.allocations.clear()
            await self._session.flush()
            row.allocations.extend(new_rows)
        return entity

    async def _load(self, portfolio_id: int) -> OrmPortfolio | None:
        stmt = (
            select(OrmPortfolio)
            .options(selectinload(OrmPortfolio.allocations))
            .where(OrmPortfolio.portfolio_id == portfolio_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

"""SQLAlchemy implementation of HoldingRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_ledger.domain.models.portfolio import AssetHolding as DomainHolding
from portfolio_ledger.domain.repositories.holdings import HoldingRepository
from portfolio_ledger.infrastructure.persistence.models.portfolio import (
    AssetHolding as OrmHolding,
)


def _holding_to_domain(row: OrmHolding) -> DomainHolding:
    return DomainHolding(
        portfolio_id=row.portfolio_id,
        asset=row.asset,
        amount=int(row.amount),
        target_allocation_bps=row.target_allocation_bps,
        current_allocation_bps=row.current_allocation_bps,
        last_price=int(row.last_price),
        unrealized_pnl=int(row.unrealized_pnl),
    )


class SqlHoldingRepository(HoldingRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, portfolio_id: int, asset: str) -> DomainHolding | None:
        row = await self._session.get(OrmHolding, (portfolio_id, asset))
        return _holding_to_domain(row) if row else None

    async def list_for_portfolio(self, portfolio_id: int) -> list[DomainHolding]:
        stmt = (
            select(OrmHolding)
            .where(OrmHolding.portfolio_id == portfolio_id)
            .order_by(OrmHolding.position.asc())
        )
        result = await self._session.execute(stmt)
        return [_holding_to_domain(row) for row in result.scalars()]

    async def save(self, holding: DomainHolding) -> DomainHolding:
        row = await self._session.get(OrmHolding, (holding.portfolio_id, holding.asset))
        if row is None:
            row = OrmHolding(
                portfolio_id=holding.portfolio_id,
                asset=holding.asset,
                position=await self._next_position(holding.portfolio_id),
            )
            self._session.add(row)
        row.amount = holding.amount
        row.target_allocation_bps = holding.target_allocation_bps
        row.current_allocation_bps = holding.current_allocation_bps
        row.last_price = holding.last_price
        row.unrealized_pnl = holding.unrealized_pnl
        return holding

    async def delete(self, portfolio_id: int, asset: str) -> None:
        row = await self._session.get(OrmHolding, (portfolio_id, asset))
        if row is not None:
            await self._session.delete(row)
            await self._session.flush()

    async def _next_position(self, portfolio_id: int) -> int:
        stmt = select(func.max(OrmHolding.position)).where(
            OrmHolding.portfolio_id == portfolio_id
        )
        result = await self._session.execute(stmt)
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

"""SQLAlchemy implementations of the ledger-wide repositories:
supported assets, protocol counters and the event log."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_ledger.domain.models.enums import EventType
from portfolio_ledger.domain.models.events import LedgerEvent as DomainEvent
from portfolio_ledger.domain.repositories.assets import SupportedAssetRepository
from portfolio_ledger.domain.repositories.events import EventRepository
from portfolio_ledger.domain.repositories.protocol import ProtocolStateRepository
from portfolio_ledger.infrastructure.persistence.models.ledger import (
    LedgerEvent as OrmEvent,
)
from portfolio_ledger.infrastructure.persistence.models.ledger import (
    ProtocolState as OrmProtocolState,
)
from portfolio_ledger.infrastructure.persistence.models.ledger import (
    SupportedAsset as OrmSupportedAsset,
)

_PROTOCOL_ROW_ID = 1


def _event_to_domain(row: OrmEvent) -> DomainEvent:
    return DomainEvent(
        event_type=EventType(row.event_type),
        portfolio_id=row.portfolio_id,
        timestamp=row.timestamp,
        payload=row.payload or {},
    )


class SqlSupportedAssetRepository(SupportedAssetRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def is_supported(self, asset: str) -> bool:
        return await self._session.get(OrmSupportedAsset, asset) is not None

    async def add(self, asset: str) -> None:
        if not await self.is_supported(asset):
            self._session.add(OrmSupportedAsset(asset=asset))

    async def remove(self, asset: str) -> None:
        row = await self._session.get(OrmSupportedAsset, asset)
        if row is not None:
            await self._session.delete(row)

    async def list(self) -> list[str]:
        stmt = select(OrmSupportedAsset.asset).order_by(OrmSupportedAsset.asset.asc())
        result = await self._session.execute(stmt)
        return list(result.scalars())


class SqlProtocolStateRepository(ProtocolStateRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_total_value_locked(self) -> int:
        row = await self._session.get(OrmProtocolState, _PROTOCOL_ROW_ID)
        return int(row.total_value_locked) if row else 0

    async def adjust_total_value_locked(self, delta: int) -> int:
        stmt = (
            select(OrmProtocolState)
            .where(OrmProtocolState.id == _PROTOCOL_ROW_ID)
            .with_for_update()
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            row = OrmProtocolState(id=_PROTOCOL_ROW_ID, total_value_locked=0)
            self._session.add(row)
        row.total_value_locked = max(0, int(row.total_value_locked) + delta)
        return row.total_value_locked


class SqlEventRepository(EventRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, event: DomainEvent) -> DomainEvent:
        self._session.add(
            OrmEvent(
                event_type=event.event_type.value,
                portfolio_id=event.portfolio_id,
                timestamp=event.timestamp,
                payload=event.payload,
            )
        )
        return event

    async def list_for_portfolio(
        self, portfolio_id: int, limit: int = 100, offset: int = 0
    ) -> list[DomainEvent]:
        stmt = (
            select(OrmEvent)
            .where(OrmEvent.portfolio_id == portfolio_id)
            .order_by(OrmEvent.event_id.asc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [_event_to_domain(row) for row in result.scalars()]

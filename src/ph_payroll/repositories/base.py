"""Generic async repository base."""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Sequence, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from ph_payroll.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Persistence for one mapped entity.

    Repositories take a session from the caller and never commit; the caller
    owns the transaction.
    """

    model: ClassVar[type[Base]]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, pk: Any) -> ModelT | None:
        return await self.session.get(self.model, pk)  # type: ignore[return-value]

    async def add(self, instance: ModelT) -> ModelT:
        """Add and flush so generated keys are available."""
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def add_all(self, instances: Sequence[ModelT]) -> None:
        self.session.add_all(instances)
        await self.session.flush()

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepository:
    """Shared plumbing. Repositories never commit; callers own the transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    def upsert_insert(self, model):
        """INSERT that supports ON CONFLICT clauses on the active backend."""
        if self.dialect_name == "postgresql":
            return postgresql.insert(model)
        return sqlite.insert(model)

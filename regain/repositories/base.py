from sqlalchemy.ext.asyncio import AsyncSession


class Repository:
    """Base for repositories bound to a single AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

# apps/api/src/core/database.py
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from prisma import Prisma as Database
else:
    # Annotation used by route signatures; resolved to the client for type checkers
    Database = Any

# Global Prisma instance, created on first use so the generated client is
# only required by code paths that actually talk to the database.
_prisma: "Database | None" = None


def get_prisma() -> "Database":
    global _prisma
    if _prisma is None:
        from prisma import Prisma

        _prisma = Prisma()
    return _prisma


async def get_db() -> "Database":
    """Database dependency for FastAPI dependency injection."""
    return get_prisma()

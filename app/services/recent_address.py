from sqlalchemy.ext.asyncio import AsyncSession

from app.models.recent_address import RecentAddress


def add_recent_address(
    db: AsyncSession,
    user_id: int,
    description: str,
    lat: float,
    lng: float,
    alias: str | None = None,
) -> RecentAddress:
    """Queue a recent-address row in the current transaction."""
    address = RecentAddress(
        user_id=user_id,
        alias=alias or description,
        description=description,
        lat=lat,
        lng=lng,
    )
    db.add(address)
    return address

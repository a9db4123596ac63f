"""Read-only access to physician profiles."""

from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession

from locum.core.exceptions import ProfileNotFoundError
from locum.core.timeutils import utc_now
from locum.models.profile import PhysicianProfileRecord
from locum.schemas.profile import PhysicianProfile, ProfileUpsertRequest


class ProfileStore(ABC):
    """Source of canonical physician profiles.

    The application workflow only reads profiles; how they are edited is
    up to the profile owner.
    """

    @abstractmethod
    async def get_profile(self, physician_id: str) -> PhysicianProfile | None:
        """Return the current profile, or None when the physician has none."""
        pass

    async def require_profile(self, physician_id: str) -> PhysicianProfile:
        profile = await self.get_profile(physician_id)
        if profile is None:
            raise ProfileNotFoundError(physician_id)
        return profile


class SqlProfileStore(ProfileStore):
    """Profile store backed by the ``physician_profiles`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_profile(self, physician_id: str) -> PhysicianProfile | None:
        record = await self.session.get(PhysicianProfileRecord, physician_id)
        if record is None:
            return None
        return PhysicianProfile.model_validate(
            {**record.data, "physician_id": record.physician_id}
        )

    async def upsert_profile(
        self, physician_id: str, request: ProfileUpsertRequest
    ) -> PhysicianProfile:
        """Create or replace a profile. The caller commits."""
        data = request.model_dump(mode="json")
        record = await self.session.get(PhysicianProfileRecord, physician_id)
        if record is None:
            record = PhysicianProfileRecord(physician_id=physician_id)
            self.session.add(record)
        record.data = data
        record.completion_percentage = request.completion_percentage
        record.updated_at = utc_now()
        await self.session.flush()
        return PhysicianProfile.model_validate({**data, "physician_id": physician_id})

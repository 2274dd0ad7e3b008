from typing import Optional
from sqlalchemy.future import select
from storefront.models.admin_panel import AdminPanel
from storefront.repositories.base import BaseRepository


class AdminPanelRepository(BaseRepository):
    model = AdminPanel

    async def get_by_admin_id(self, admin_id: str) -> Optional[AdminPanel]:
        result = await self.session.execute(
            select(AdminPanel).filter_by(admin_id=admin_id).limit(1)
        )
        return result.scalars().first()

"""
LocalBiz Directory — Category Route Handlers
==============================================

What:  GET /categories, used by the business form's category picker.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.category import CategoryOut
from app.services.category_service import category_service

router = APIRouter(prefix=f"{settings.api_prefix}/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryOut], summary="All categories by name")
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
) -> List[CategoryOut]:
    return await category_service.list_categories(db)

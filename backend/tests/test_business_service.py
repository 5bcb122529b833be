"""
LocalBiz Directory — Business Service Unit Tests
==================================================

How:   Mock DB sessions; category lookups patched where they matter.

What we test:
    ✅ Unknown category on create raises InvalidCategoryError, nothing added
    ✅ Update checks: 404 before 403 before the category lookup
    ✅ Delete reports a missing listing as 403, like someone else's
    ✅ get_business raises NotFoundError for a missing id
    ✅ SQLAlchemy failures surface as DatabaseError
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import (
    DatabaseError,
    ForbiddenError,
    InvalidCategoryError,
    NotFoundError,
)
from app.models.user import Role
from app.schemas.business import BusinessCreate, BusinessUpdate
from app.security.tokens import Identity
from app.services.business_service import BusinessService

ADMIN = Identity(user_id=1, role=Role.ADMIN)
OTHER = Identity(user_id=2, role=Role.ADMIN)


def _returns(session, row):
    result = MagicMock()
    result.scalar_one_or_none.return_value = row
    session.execute.return_value = result


class TestCreateBusiness:

    def setup_method(self):
        self.service = BusinessService()

    @pytest.mark.asyncio
    async def test_unknown_category_persists_nothing(self, mock_db_session):
        with patch("app.services.business_service.category_service") as mock_categories:
            mock_categories.get_by_name = AsyncMock(return_value=None)

            with pytest.raises(InvalidCategoryError) as exc_info:
                await self.service.create_business(
                    mock_db_session,
                    ADMIN,
                    BusinessCreate(name="Crumbs", category="Bakeries"),
                )

        assert exc_info.value.message == "Invalid category"
        assert exc_info.value.error_code == "invalid_category"
        mock_db_session.add.assert_not_called()
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_flush_failure_becomes_database_error(self, mock_db_session):
        with patch("app.services.business_service.category_service") as mock_categories:
            mock_categories.get_by_name = AsyncMock(
                return_value=SimpleNamespace(id=3, name="Bakery")
            )
            mock_db_session.flush.side_effect = OperationalError("INSERT", {}, Exception("db down"))

            with pytest.raises(DatabaseError):
                await self.service.create_business(
                    mock_db_session,
                    ADMIN,
                    BusinessCreate(name="Crumbs", category="Bakery"),
                )


class TestUpdateBusiness:

    def setup_method(self):
        self.service = BusinessService()
        self.payload = BusinessUpdate(name="Renamed", category="Nope")

    @pytest.mark.asyncio
    async def test_missing_is_404(self, mock_db_session):
        _returns(mock_db_session, None)
        with pytest.raises(NotFoundError):
            await self.service.update_business(mock_db_session, ADMIN, 9, self.payload)

    @pytest.mark.asyncio
    async def test_not_owner_is_403_before_category_check(self, mock_db_session):
        business = SimpleNamespace(id=9, owner_id=ADMIN.user_id, name="Crumbs")
        _returns(mock_db_session, business)

        with patch("app.services.business_service.category_service") as mock_categories:
            mock_categories.get_by_name = AsyncMock(return_value=None)
            with pytest.raises(ForbiddenError) as exc_info:
                await self.service.update_business(mock_db_session, OTHER, 9, self.payload)

            mock_categories.get_by_name.assert_not_awaited()

        assert exc_info.value.message == "Not authorized to update this business"
        assert business.name == "Crumbs"

    @pytest.mark.asyncio
    async def test_owner_with_unknown_category_is_400(self, mock_db_session):
        business = SimpleNamespace(id=9, owner_id=ADMIN.user_id, name="Crumbs")
        _returns(mock_db_session, business)

        with patch("app.services.business_service.category_service") as mock_categories:
            mock_categories.get_by_name = AsyncMock(return_value=None)
            with pytest.raises(InvalidCategoryError):
                await self.service.update_business(mock_db_session, ADMIN, 9, self.payload)

        assert business.name == "Crumbs"
        mock_db_session.flush.assert_not_awaited()


class TestDeleteBusiness:

    def setup_method(self):
        self.service = BusinessService()

    @pytest.mark.asyncio
    async def test_missing_is_reported_as_forbidden(self, mock_db_session):
        _returns(mock_db_session, None)
        with pytest.raises(ForbiddenError) as exc_info:
            await self.service.delete_business(mock_db_session, ADMIN, 404)
        assert exc_info.value.message == "You are not authorized to delete this business."
        # only the lookup ran, no DELETE
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_not_owner_is_forbidden(self, mock_db_session):
        _returns(mock_db_session, SimpleNamespace(id=5, owner_id=OTHER.user_id))
        with pytest.raises(ForbiddenError):
            await self.service.delete_business(mock_db_session, ADMIN, 5)
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_owner_deletes(self, mock_db_session):
        _returns(mock_db_session, SimpleNamespace(id=5, owner_id=ADMIN.user_id))
        await self.service.delete_business(mock_db_session, ADMIN, 5)
        assert mock_db_session.execute.await_count == 2


class TestGetBusiness:

    @pytest.mark.asyncio
    async def test_missing_is_404(self, mock_db_session):
        _returns(mock_db_session, None)
        with pytest.raises(NotFoundError) as exc_info:
            await BusinessService().get_business(mock_db_session, 77)
        assert exc_info.value.message == "Business with ID '77' was not found"

    @pytest.mark.asyncio
    async def test_query_failure_is_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))
        with pytest.raises(DatabaseError):
            await BusinessService().get_business(mock_db_session, 1)

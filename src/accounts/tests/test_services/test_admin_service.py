import pytest

from accounts.exceptions import AppError, ErrorKind
from accounts.schemas.admin import AdminFilter, AdminUpdate


@pytest.mark.asyncio
class TestAdminService:

    async def test_new_admin_is_active(self, create_admin):
        admin = await create_admin()

        assert admin.id is not None
        assert admin.active is True

    async def test_admin_needs_no_phone(self, admin_service, admin_payload):
        admin = await admin_service.create(admin_payload())
        assert not hasattr(admin, "phone")

    async def test_missing_surname_is_invalid(self, admin_service, admin_payload):
        with pytest.raises(AppError) as exc_info:
            await admin_service.create(admin_payload(surname=""))

        assert exc_info.value.kind is ErrorKind.INVALID
        assert exc_info.value.message == "Surname is required"

    async def test_duplicate_email_is_conflict(self, admin_service, admin_payload, create_admin):
        existing = await create_admin()

        with pytest.raises(AppError) as exc_info:
            await admin_service.create(admin_payload(email=existing.email))

        assert exc_info.value.kind is ErrorKind.CONFLICT

    async def test_same_email_as_a_user_is_allowed(self, admin_service, admin_payload, create_user):
        user = await create_user()
        admin = await admin_service.create(admin_payload(email=user.email))
        assert admin.email == user.email

    async def test_deactivate(self, admin_service, create_admin):
        admin = await create_admin()

        await admin_service.update(admin.id, AdminUpdate(active=False))

        assert (await admin_service.find_by_id(admin.id)).active is False

    async def test_name_patch_keeps_active_flag(self, admin_service, create_admin):
        admin = await create_admin()

        updated = await admin_service.update(admin.id, AdminUpdate(name="Root"))

        assert updated.name == "Root"
        assert updated.active is True

    async def test_not_found_message(self, admin_service):
        with pytest.raises(AppError) as exc_info:
            await admin_service.find_by_id(424242)

        assert exc_info.value.message == "Admin not found"

    async def test_list_and_delete(self, admin_service, create_admin):
        a = await create_admin()
        b = await create_admin()

        page, total = await admin_service.find_many(AdminFilter(limit=1))
        assert total == 2
        assert [x.id for x in page] == [b.id]

        await admin_service.delete(a.id)
        page, total = await admin_service.find_many(AdminFilter())
        assert [x.id for x in page] == [b.id]
        assert total == 1


@pytest.mark.asyncio
class TestAdminSharedTransaction:

    async def test_rejected_update_leaves_row_untouched_after_outer_commit(self, admin_service, create_admin, database):
        admin = await create_admin(surname="Root")

        async with database.transaction() as tx:
            with pytest.raises(AppError) as exc_info:
                await admin_service.update(admin.id, AdminUpdate(surname="", active=False), tx=tx)
            assert exc_info.value.kind is ErrorKind.INVALID
            await tx.commit()

        stored = await admin_service.find_by_id(admin.id)
        assert stored.surname == "Root"
        assert stored.active is True

    async def test_conflicting_update_leaves_row_untouched_after_outer_commit(
        self, admin_service, create_admin, database
    ):
        a = await create_admin()
        b = await create_admin()

        async with database.transaction() as tx:
            with pytest.raises(AppError) as exc_info:
                await admin_service.update(b.id, AdminUpdate(email=a.email), tx=tx)
            assert exc_info.value.kind is ErrorKind.CONFLICT
            await tx.commit()

        assert (await admin_service.find_by_id(b.id)).email == b.email

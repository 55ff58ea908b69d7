"""Tests for the local user directory and the active-user session record."""

import pytest

from nexushub.models.constants import SESSION_KEY
from nexushub.models.user import User
from nexushub.storage.backend import LocalBackend
from nexushub.storage.errors import DuplicateUserError, InvalidCredentialsError, StorageFullError
from nexushub.storage.kv_store import MemoryKeyValueStore


class TestRegister:
    """Test LocalBackend.register()."""

    @pytest.mark.asyncio
    async def test_register_returns_public_user(self, backend):
        user = await backend.register("ada@example.com", "s3cret!", "Ada")

        assert isinstance(user, User)
        assert user.id
        assert user.email == "ada@example.com"
        assert user.name == "Ada"
        assert "password" not in user.model_dump()

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(self, backend):
        first = await backend.register("ada@example.com", "s3cret!", "Ada")

        with pytest.raises(DuplicateUserError) as exc_info:
            await backend.register("ada@example.com", "other", "Imposter")

        assert str(exc_info.value) == "User already exists"
        records = backend.users.load(None)
        assert len(records) == 1
        assert records[0].id == first.id
        assert records[0].name == "Ada"

    @pytest.mark.asyncio
    async def test_register_remembers_session(self, backend, memory_store):
        user = await backend.register("ada@example.com", "s3cret!", "Ada")

        assert memory_store.get_item(SESSION_KEY) is not None
        assert backend.current_user() == user

    @pytest.mark.asyncio
    async def test_register_without_session_memory(self, memory_store):
        backend = LocalBackend(memory_store, latency_ms=0, remember_session=False)
        await backend.register("ada@example.com", "s3cret!", "Ada")

        assert memory_store.get_item(SESSION_KEY) is None
        assert backend.current_user() is None


class TestLogin:
    """Test LocalBackend.login()."""

    @pytest.mark.asyncio
    async def test_login_with_matching_credentials(self, backend):
        registered = await backend.register("ada@example.com", "s3cret!", "Ada")
        await backend.logout()

        user = await backend.login("ada@example.com", "s3cret!")

        assert user == registered
        assert backend.current_user() == registered

    @pytest.mark.asyncio
    async def test_wrong_password_is_rejected(self, backend):
        await backend.register("ada@example.com", "s3cret!", "Ada")

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await backend.login("ada@example.com", "wrong")

        assert str(exc_info.value) == "Invalid credentials"
        assert "s3cret!" not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unknown_email_is_rejected(self, backend):
        with pytest.raises(InvalidCredentialsError):
            await backend.login("nobody@example.com", "s3cret!")

    @pytest.mark.asyncio
    async def test_email_match_is_exact(self, backend):
        await backend.register("ada@example.com", "s3cret!", "Ada")

        with pytest.raises(InvalidCredentialsError):
            await backend.login("ADA@example.com", "s3cret!")


class TestSession:
    """Test the session record and logout."""

    def test_no_session_by_default(self, backend):
        assert backend.current_user() is None

    def test_unreadable_session_is_ignored(self, backend, memory_store):
        memory_store.set_item(SESSION_KEY, "{not json")
        assert backend.current_user() is None

    @pytest.mark.asyncio
    async def test_logout_keeps_user_collections(self, backend, sample_link):
        user = await backend.register("ada@example.com", "s3cret!", "Ada")
        await backend.add_link(sample_link.model_copy(update={"user_id": user.id}))

        await backend.logout()

        assert backend.current_user() is None
        assert len(await backend.get_links(user.id)) == 1
        # The account itself survives logout too
        assert await backend.login("ada@example.com", "s3cret!") == user


class TestRegisterWhenStorageIsFull:
    """Test registration against a nearly full store."""

    @pytest.mark.asyncio
    async def test_account_survives_when_session_does_not_fit(self):
        sizing_store = MemoryKeyValueStore()
        await LocalBackend(sizing_store, latency_ms=0, remember_session=False).register("ada@example.com", "s3cret!", "Ada")
        # Room for the users collection but not for the session record
        store = MemoryKeyValueStore(quota_chars=sizing_store.usage() + 5)
        backend = LocalBackend(store, latency_ms=0)

        user = await backend.register("ada@example.com", "s3cret!", "Ada")

        assert user.email == "ada@example.com"
        assert store.get_item(SESSION_KEY) is None
        assert [record.id for record in backend.users.load(None)] == [user.id]
        assert await backend.login("ada@example.com", "s3cret!") == user

    @pytest.mark.asyncio
    async def test_no_account_when_user_record_does_not_fit(self):
        backend = LocalBackend(MemoryKeyValueStore(quota_chars=10), latency_ms=0)

        with pytest.raises(StorageFullError):
            await backend.register("ada@example.com", "s3cret!", "Ada")

        assert backend.users.load(None) == []
        assert backend.current_user() is None

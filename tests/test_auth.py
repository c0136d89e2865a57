"""Tests for the simulated credential store."""

import base64
import json
from unittest.mock import AsyncMock, patch

import pytest

from taskdeck.auth import AuthService, AuthToken, User, UserRecord, avatar_url
from taskdeck.constants import MS_PER_DAY, TOKEN_KEY, USERS_KEY
from taskdeck.errors import DuplicateUserError, InvalidCredentialsError
from taskdeck.storage import read_json, write_json


def _stored_users(storage) -> list[dict]:
    return read_json(storage, USERS_KEY, [])


class TestModels:
    """Tests for user and session records."""

    def test_user_to_dict_omits_missing_avatar(self):
        user = User(id="1", email="a@example.com", name="A")
        assert user.to_dict() == {"id": "1", "email": "a@example.com", "name": "A"}

    def test_user_record_to_user_drops_password(self):
        record = UserRecord(id="7", email="b@example.com", name="B", password="pw", avatar="x")
        user = record.to_user()
        assert user == User(id="7", email="b@example.com", name="B", avatar="x")

    def test_auth_token_from_browser_layout(self):
        data = {
            "token": "abc",
            "user": {"id": "1", "email": "demo@example.com", "name": "Demo User"},
            "expiresAt": 1717243200000,
        }
        token = AuthToken.from_dict(data)
        assert token.user.avatar is None
        assert token.expires_at == 1717243200000
        assert token.to_dict() == data

    def test_is_expired_boundary(self):
        token = AuthToken(token="t", user=User(id="1", email="e", name="n"), expires_at=1000)
        assert not token.is_expired(999)
        assert token.is_expired(1000)


class TestRegister:
    """Tests for AuthService.register."""

    @pytest.mark.asyncio
    async def test_register_returns_session_for_new_user(self, auth, clock):
        session = await auth.register("ada@example.com", "s3cret", "Ada")

        assert session.user.email == "ada@example.com"
        assert session.user.name == "Ada"
        assert session.user.id == str(int(clock().timestamp() * 1000))
        assert session.user.avatar == avatar_url("Ada")
        assert auth.get_current_user() == session.user

    @pytest.mark.asyncio
    async def test_register_persists_plaintext_record(self, auth, storage):
        await auth.register("ada@example.com", "s3cret", "Ada")

        emails = [u["email"] for u in _stored_users(storage)]
        assert emails == ["demo@example.com", "ada@example.com"]
        assert _stored_users(storage)[1]["password"] == "s3cret"

    @pytest.mark.asyncio
    async def test_register_duplicate_email_fails(self, auth, storage):
        await auth.register("ada@example.com", "s3cret", "Ada")
        auth.logout()

        with pytest.raises(DuplicateUserError) as exc_info:
            await auth.register("ada@example.com", "other", "Someone Else")

        assert exc_info.value.error_code == "DUPLICATE_USER"
        assert len(_stored_users(storage)) == 2
        assert auth.get_current_user() is None

    @pytest.mark.asyncio
    async def test_register_demo_email_is_taken(self, auth):
        with pytest.raises(DuplicateUserError):
            await auth.register("demo@example.com", "x", "Impostor")

    @pytest.mark.asyncio
    async def test_email_match_is_case_sensitive(self, auth, storage):
        await auth.register("ada@example.com", "pw", "Ada")
        await auth.register("Ada@example.com", "pw", "Ada Again")
        assert len(_stored_users(storage)) == 3

    @pytest.mark.asyncio
    async def test_ids_unique_within_one_millisecond(self, auth, storage):
        await auth.register("one@example.com", "pw", "One")
        await auth.register("two@example.com", "pw", "Two")
        ids = [u["id"] for u in _stored_users(storage)]
        assert len(set(ids)) == len(ids)

    def test_avatar_url_quotes_seed(self):
        assert avatar_url("Ada Lovelace").endswith("seed=Ada%20Lovelace")


class TestLogin:
    """Tests for AuthService.login."""

    @pytest.mark.asyncio
    async def test_demo_user_seeded_on_first_login(self, auth, storage):
        session = await auth.login("demo@example.com", "password123")
        assert session.user.id == "1"
        assert session.user.name == "Demo User"
        assert len(_stored_users(storage)) == 1

    @pytest.mark.asyncio
    async def test_no_demo_user_when_disabled(self, storage, clock, mock_context):
        settings = mock_context.settings.model_copy(update={"seed_demo_user": False})
        auth = AuthService(storage, settings, clock=clock)

        with pytest.raises(InvalidCredentialsError):
            await auth.login("demo@example.com", "password123")
        assert storage.get_item(USERS_KEY) is None

    @pytest.mark.asyncio
    async def test_wrong_password_fails(self, auth, storage):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth.login("demo@example.com", "wrong")
        assert exc_info.value.to_dict()["error"]["code"] == "INVALID_CREDENTIALS"
        assert storage.get_item(TOKEN_KEY) is None

    @pytest.mark.asyncio
    async def test_unknown_email_fails(self, auth):
        with pytest.raises(InvalidCredentialsError):
            await auth.login("nobody@example.com", "password123")

    @pytest.mark.asyncio
    async def test_session_layout_and_expiry(self, auth, storage, clock):
        session = await auth.login("demo@example.com", "password123")

        now_ms = int(clock().timestamp() * 1000)
        assert session.expires_at == now_ms + MS_PER_DAY

        stored = json.loads(storage.get_item(TOKEN_KEY))
        assert set(stored) == {"token", "user", "expiresAt"}
        assert stored["expiresAt"] == session.expires_at
        assert stored["user"] == {"id": "1", "email": "demo@example.com", "name": "Demo User"}

    @pytest.mark.asyncio
    async def test_token_encodes_timestamp_and_random(self, auth, clock):
        session = await auth.login("demo@example.com", "password123")

        decoded = base64.b64decode(session.token).decode()
        stamp, rand = decoded.split("_", 1)
        assert stamp == str(int(clock().timestamp() * 1000))
        assert 0 <= float(rand) < 1

    @pytest.mark.asyncio
    async def test_new_login_replaces_session(self, auth, clock):
        first = await auth.register("ada@example.com", "pw", "Ada")
        clock.advance(seconds=5)
        second = await auth.login("demo@example.com", "password123")

        assert second.token != first.token
        assert auth.get_current_user().email == "demo@example.com"

    @pytest.mark.asyncio
    async def test_latency_is_awaited(self, storage, clock, mock_context):
        settings = mock_context.settings.model_copy(update={"simulated_latency": 1.0})
        auth = AuthService(storage, settings, clock=clock)

        with patch("taskdeck.auth.service.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await auth.login("demo@example.com", "password123")
            await auth.register("ada@example.com", "pw", "Ada")

        assert sleep.await_count == 2
        sleep.assert_awaited_with(1.0)

    @pytest.mark.asyncio
    async def test_zero_latency_skips_sleep(self, auth):
        with patch("taskdeck.auth.service.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await auth.login("demo@example.com", "password123")
        sleep.assert_not_awaited()


class TestSession:
    """Tests for current user, expiry, logout and avatar updates."""

    def test_no_session(self, auth):
        assert auth.get_current_user() is None
        assert not auth.is_authenticated()

    @pytest.mark.asyncio
    async def test_session_valid_until_expiry(self, auth, clock):
        await auth.login("demo@example.com", "password123")
        clock.advance(hours=23, minutes=59)
        assert auth.is_authenticated()

    @pytest.mark.asyncio
    async def test_expired_session_is_purged(self, auth, storage, clock):
        await auth.login("demo@example.com", "password123")
        clock.advance(hours=24)

        assert auth.get_current_user() is None
        assert storage.get_item(TOKEN_KEY) is None
        # Turning the clock back does not resurrect the purged session
        clock.advance(hours=-24)
        assert auth.get_current_user() is None

    @pytest.mark.asyncio
    async def test_custom_ttl(self, storage, clock, mock_context):
        settings = mock_context.settings.model_copy(update={"session_ttl_hours": 1})
        auth = AuthService(storage, settings, clock=clock)
        await auth.login("demo@example.com", "password123")

        clock.advance(minutes=61)
        assert not auth.is_authenticated()

    def test_corrupt_session_reads_as_absent(self, auth, storage):
        storage.set_item(TOKEN_KEY, "{not json")
        assert auth.get_current_user() is None

    def test_incomplete_session_reads_as_absent(self, auth, storage):
        write_json(storage, TOKEN_KEY, {"token": "t"})
        assert auth.current_session() is None

    @pytest.mark.asyncio
    async def test_logout(self, auth, storage):
        await auth.login("demo@example.com", "password123")
        auth.logout()
        assert storage.get_item(TOKEN_KEY) is None
        assert not auth.is_authenticated()
        # Logging out twice is harmless
        auth.logout()

    @pytest.mark.asyncio
    async def test_update_avatar(self, auth, storage):
        await auth.register("ada@example.com", "pw", "Ada")

        user = auth.update_avatar("https://example.com/ada.png")

        assert user.avatar == "https://example.com/ada.png"
        assert auth.get_current_user().avatar == "https://example.com/ada.png"
        ada = [u for u in _stored_users(storage) if u["email"] == "ada@example.com"][0]
        assert ada["avatar"] == "https://example.com/ada.png"
        demo = [u for u in _stored_users(storage) if u["email"] == "demo@example.com"][0]
        assert "avatar" not in demo

    def test_update_avatar_logged_out(self, auth):
        assert auth.update_avatar("https://example.com/x.png") is None


class TestUnreadableStorage:
    """Badly shaped stored values read as absent instead of raising."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["null", "{}", "{broken"])
    async def test_users_value_of_wrong_shape(self, auth, storage, raw):
        storage.set_item(USERS_KEY, raw)

        session = await auth.login("demo@example.com", "password123")

        assert session.user.id == "1"
        assert [u["email"] for u in _stored_users(storage)] == ["demo@example.com"]

    @pytest.mark.asyncio
    async def test_incomplete_user_records_skipped(self, auth, storage):
        write_json(
            storage,
            USERS_KEY,
            [
                {"id": "9", "email": "broken@example.com", "password": "pw"},
                {"id": "1", "email": "demo@example.com", "name": "Demo User", "password": "password123"},
            ],
        )

        with pytest.raises(InvalidCredentialsError):
            await auth.login("broken@example.com", "pw")
        session = await auth.login("demo@example.com", "password123")
        assert session.user.name == "Demo User"

    @pytest.mark.parametrize("raw", ["null", "[]", '"token"', '{"token": "t", "user": "u", "expiresAt": 1}'])
    def test_session_value_of_wrong_shape(self, auth, storage, raw):
        storage.set_item(TOKEN_KEY, raw)
        assert auth.get_current_user() is None

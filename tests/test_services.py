"""Service layer: chat orchestration, history queries, accounts."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from genchat.configs.system import AuthConfig, GoogleOAuthConfig
from genchat.core.auth.tokens import issue_token
from genchat.core.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    GoogleOnlyAccountError,
    InvalidCredentialsError,
    InvalidSessionError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from genchat.core.llm import CompletionClient
from genchat.core.models import SENDER_ASSISTANT, SENDER_USER, GoogleProfile, User
from genchat.core.service.auth import AuthService
from genchat.core.service.chat import ChatOrchestrator
from genchat.core.service.history import HistoryService
from genchat.infra.store import LocalHistoryStore, LocalUserStore

AUTH_CONFIG = AuthConfig(token_secret="unit-test-secret")
_TOKEN_USER = User(id="user_1", name="A", email="a@x.com", password_hash="h")


@pytest_asyncio.fixture
async def users() -> LocalUserStore:
    store = LocalUserStore()
    await store.create(
        User(id="user_1", name="Ada", email="ada@x.com", password_hash="unused")
    )
    return store


@pytest.fixture
def histories() -> LocalHistoryStore:
    return LocalHistoryStore()


@pytest.fixture
def history_service(users, histories) -> HistoryService:
    return HistoryService(users, histories)


def _orchestrator(histories, history_service, *responses: str) -> ChatOrchestrator:
    llm = FakeListChatModel(responses=list(responses) or ["answer"])
    return ChatOrchestrator(CompletionClient(llm, timeout=5), histories, history_service)


# =========================================================================
# Chat orchestrator
# =========================================================================


class TestChatOrchestrator:
    @pytest.mark.asyncio
    async def test_exchange_appended_to_conversation(
        self, histories, history_service
    ):
        conversation, _ = await history_service.start_conversation("user_1")
        orchestrator = _orchestrator(histories, history_service, "42")

        result = await orchestrator.handle_chat("meaning?", "user_1", conversation.id)

        assert result.assistant_text == "42"
        assert result.conversation_id == conversation.id
        stored = await history_service.get_conversation("user_1", conversation.id)
        assert [(m.sender, m.content) for m in stored.messages] == [
            (SENDER_USER, "meaning?"),
            (SENDER_ASSISTANT, "42"),
        ]

    @pytest.mark.asyncio
    async def test_first_chat_creates_history(self, histories, history_service):
        orchestrator = _orchestrator(histories, history_service)

        result = await orchestrator.handle_chat("hi", "user_1", "conv_whatever")

        conversations = await history_service.get_history("user_1")
        assert [c.id for c in conversations] == [result.conversation_id]
        assert result.conversation_id != "conv_whatever"

    @pytest.mark.asyncio
    async def test_history_grows_by_exactly_one_pair(
        self, histories, history_service
    ):
        conversation, _ = await history_service.start_conversation("user_1")
        orchestrator = _orchestrator(histories, history_service, "a", "b")

        await orchestrator.handle_chat("one", "user_1", conversation.id)
        await orchestrator.handle_chat("two", "user_1", conversation.id)

        stored = await history_service.get_conversation("user_1", conversation.id)
        assert [m.content for m in stored.messages] == ["one", "a", "two", "b"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "prompt, user_id, conversation_id, missing",
        [
            (None, "user_1", "c", "question"),
            ("  ", "user_1", "c", "question"),
            ("hi", None, "c", "userId"),
            ("hi", "user_1", "", "messageId"),
        ],
    )
    async def test_missing_fields(
        self, histories, history_service, prompt, user_id, conversation_id, missing
    ):
        orchestrator = _orchestrator(histories, history_service)

        with pytest.raises(ValidationError, match=missing):
            await orchestrator.handle_chat(prompt, user_id, conversation_id)

    @pytest.mark.asyncio
    async def test_unknown_user(self, histories, history_service):
        orchestrator = _orchestrator(histories, history_service)

        with pytest.raises(NotFoundError):
            await orchestrator.handle_chat("hi", "user_nobody", "c")

    @pytest.mark.asyncio
    async def test_upstream_failure_leaves_history_untouched(
        self, histories, history_service
    ):
        conversation, _ = await history_service.start_conversation("user_1")
        completion = AsyncMock(spec=CompletionClient)
        completion.complete.side_effect = UpstreamError()
        orchestrator = ChatOrchestrator(completion, histories, history_service)

        with pytest.raises(UpstreamError):
            await orchestrator.handle_chat("hi", "user_1", conversation.id)

        stored = await history_service.get_conversation("user_1", conversation.id)
        assert stored.messages == []


# =========================================================================
# History service
# =========================================================================


class TestHistoryService:
    @pytest.mark.asyncio
    async def test_listing_without_history_is_empty(self, history_service):
        assert await history_service.get_history("user_1") == []
        assert await history_service.list_summaries("user_1") == []

    @pytest.mark.asyncio
    async def test_lookup_without_history_is_not_found(self, history_service):
        with pytest.raises(NotFoundError):
            await history_service.get_conversation("user_1", "conv_x")

    @pytest.mark.asyncio
    async def test_lookup_unknown_conversation(self, history_service):
        await history_service.start_conversation("user_1")

        with pytest.raises(NotFoundError):
            await history_service.get_conversation("user_1", "conv_x")

    @pytest.mark.asyncio
    async def test_lookup_requires_conversation_id(self, history_service):
        with pytest.raises(ValidationError):
            await history_service.get_conversation("user_1", "")

    @pytest.mark.asyncio
    async def test_unknown_user(self, history_service):
        with pytest.raises(NotFoundError):
            await history_service.get_history("user_nobody")
        with pytest.raises(NotFoundError):
            await history_service.start_conversation("user_nobody")

    @pytest.mark.asyncio
    async def test_start_conversation_returns_owner(self, history_service):
        conversation, user = await history_service.start_conversation("user_1")

        assert user.name == "Ada"
        assert conversation.messages == []
        assert conversation.id.startswith("conv_")

    @pytest.mark.asyncio
    async def test_start_conversation_appends(self, history_service):
        first, _ = await history_service.start_conversation("user_1")
        second, _ = await history_service.start_conversation("user_1")

        conversations = await history_service.get_history("user_1")
        assert [c.id for c in conversations] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_summaries(self, histories, history_service):
        empty, _ = await history_service.start_conversation("user_1")
        result = await _orchestrator(histories, history_service).handle_chat(
            "what is a monad?", "user_1", "conv_new"
        )

        summaries = await history_service.list_summaries("user_1")
        assert [(s.id, s.preview, s.message_count) for s in summaries] == [
            (empty.id, "", 0),
            (result.conversation_id, "what is a monad?", 2),
        ]


# =========================================================================
# Auth service
# =========================================================================


@pytest.fixture
def auth() -> AuthService:
    return AuthService(
        LocalUserStore(),
        AUTH_CONFIG,
        GoogleOAuthConfig(default_picture_url="http://img.test/default.png"),
    )


def _google_profile(**overrides) -> GoogleProfile:
    fields = {
        "id": "google-1",
        "display_name": "Grace",
        "email": "grace@x.com",
        "photo_url": None,
    }
    fields.update(overrides)
    return GoogleProfile(**fields)


class TestAuthService:
    @pytest.mark.asyncio
    async def test_signup_then_login(self, auth):
        user = await auth.signup("Ada", "ada@x.com", "secret123")
        logged_in, token = await auth.login("ada@x.com", "secret123")

        assert logged_in.id == user.id
        assert auth.authenticate(token) == user.id

    @pytest.mark.asyncio
    async def test_password_is_hashed(self, auth):
        user = await auth.signup("Ada", "ada@x.com", "secret123")

        assert user.password_hash
        assert "secret123" not in user.password_hash

    @pytest.mark.asyncio
    async def test_email_is_normalized(self, auth):
        await auth.signup("Ada", "  Ada@X.com ", "secret123")

        user, _ = await auth.login("ada@x.com", "secret123")
        assert user.email == "ada@x.com"
        with pytest.raises(DuplicateEmailError):
            await auth.signup("Other", "ADA@x.com", "secret456")

    @pytest.mark.asyncio
    async def test_signup_missing_fields(self, auth):
        with pytest.raises(ValidationError, match="password"):
            await auth.signup("Ada", "ada@x.com", "")

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth):
        await auth.signup("Ada", "ada@x.com", "secret123")

        with pytest.raises(InvalidCredentialsError):
            await auth.login("ada@x.com", "wrong")

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, auth):
        with pytest.raises(InvalidCredentialsError):
            await auth.login("nobody@x.com", "secret123")

    @pytest.mark.asyncio
    async def test_password_login_on_google_account(self, auth):
        await auth.google_login(_google_profile())

        with pytest.raises(GoogleOnlyAccountError):
            await auth.login("grace@x.com", "anything")

    @pytest.mark.asyncio
    async def test_google_login_creates_then_reuses(self, auth):
        first, _ = await auth.google_login(_google_profile())
        second, token = await auth.google_login(_google_profile(display_name="G"))

        assert first.id == second.id
        assert first.google_id == "google-1"
        assert first.password_hash is None
        assert first.picture_url == "http://img.test/default.png"
        assert auth.authenticate(token) == first.id

    @pytest.mark.asyncio
    async def test_google_login_email_taken_by_password_account(self, auth):
        await auth.signup("Grace", "grace@x.com", "secret123")

        with pytest.raises(DuplicateEmailError):
            await auth.google_login(_google_profile())

    def test_authenticate_without_token(self, auth):
        with pytest.raises(AuthenticationError):
            auth.authenticate(None)

    def test_authenticate_rejects_foreign_signature(self, auth):
        foreign = issue_token(_TOKEN_USER, AuthConfig(token_secret="other-secret"))

        with pytest.raises(InvalidSessionError):
            auth.authenticate(foreign)

    def test_authenticate_rejects_expired_token(self, auth):
        expired = AUTH_CONFIG.model_copy(update={"token_ttl": timedelta(seconds=-1)})

        with pytest.raises(InvalidSessionError):
            auth.authenticate(issue_token(_TOKEN_USER, expired))

    def test_authenticate_rejects_garbage(self, auth):
        with pytest.raises(InvalidSessionError):
            auth.authenticate("not.a.jwt")

    @pytest.mark.asyncio
    async def test_get_user(self, auth):
        user = await auth.signup("Ada", "ada@x.com", "secret123")

        assert (await auth.get_user(user.id)).name == "Ada"
        with pytest.raises(NotFoundError):
            await auth.get_user("user_nobody")

import pytest

from tests.factories.user import UserFactory
from tokenauth.infra.sql.sqlalchemy_refresh_token_store import SQLAlchemyRefreshTokenStore
from tokenauth.models import RefreshToken
from tokenauth.repositories.user import UserRepository
from tokenauth.services._shared.errors import AuthorizationError, ConflictError, NotFoundError
from tokenauth.services._shared.ports import InMemoryRefreshTokenStore, TokenType
from tokenauth.services._shared.result import Err
from tokenauth.services.auth import TokenIssuer
from tokenauth.services.identity.dto import UserRegisterIn
from tokenauth.services.identity.service import IdentityService


class TestIdentityService:
    """Validate IdentityService behaviours for the User aggregate."""

    @pytest.fixture()
    def service(self, db) -> IdentityService:
        """Return a fresh service instance per test."""
        return IdentityService()

    @pytest.fixture()
    def repo(self, session) -> UserRepository:
        """Provide repository bound to the current session."""
        return UserRepository(session=session)

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def test_register_user_creates_new_user(self, service, repo):
        """Given valid data, a new user is registered with a hashed password."""
        result = service.register_user(
            UserRegisterIn(email="New@Example.com ", password="password123")
        )

        assert result.id is not None
        assert result.email == "new@example.com"

        stored = repo.get_by_email("new@example.com")
        assert stored is not None
        assert stored.password_hash != "password123"
        assert stored.verify_password("password123")

    def test_register_user_raises_conflict_when_email_exists(self, service):
        """Given an existing email (any case), registration raises ConflictError."""
        UserFactory(email="dup@example.com")

        with pytest.raises(ConflictError) as exc:
            service.register_user(UserRegisterIn(email="DUP@example.com", password="otherpass"))

        assert str(exc.value) == "Email has already been taken"

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def test_get_user_returns_public_view(self, service):
        user = UserFactory(email="me@example.com")

        out = service.get_user(user.id)

        assert out.id == user.id
        assert out.email == "me@example.com"
        assert not hasattr(out, "password_hash")

    def test_get_user_missing(self, service, db):
        with pytest.raises(NotFoundError):
            service.get_user(999)

    # --------------------------------------------------------------------- #
    # Removal
    # --------------------------------------------------------------------- #

    def test_delete_user_removes_user_and_refresh_record(self, service, session, codec):
        user = UserFactory()
        user_id = user.id
        TokenIssuer(codec=codec, store=SQLAlchemyRefreshTokenStore()).issue(user_id)
        assert session.query(RefreshToken).filter_by(user_id=user_id).count() == 1

        service.delete_user(actor_id=user_id, user_id=user_id)

        session.expire_all()
        assert session.query(RefreshToken).filter_by(user_id=user_id).count() == 0
        with pytest.raises(NotFoundError):
            service.get_user(user_id)

    def test_delete_user_missing(self, service, db):
        with pytest.raises(NotFoundError):
            service.delete_user(actor_id=1, user_id=999)

    def test_delete_other_user_is_forbidden(self, service):
        owner = UserFactory()
        intruder = UserFactory()

        with pytest.raises(AuthorizationError):
            service.delete_user(actor_id=intruder.id, user_id=owner.id)

        assert service.get_user(owner.id).id == owner.id

    def test_delete_user_clears_external_store(self, db, codec):
        store = InMemoryRefreshTokenStore()
        service = IdentityService(refresh_store=store)
        user = UserFactory()
        TokenIssuer(codec=codec, store=store).issue(user.id)

        service.delete_user(actor_id=user.id, user_id=user.id)

        assert store.get(user.id) is None

    def test_purge_user_by_email(self, service):
        user = UserFactory(email="gone@example.com")
        user_id = user.id

        assert service.purge_user("GONE@example.com") == user_id
        with pytest.raises(NotFoundError):
            service.get_user(user_id)

    def test_purge_unknown_email(self, service, db):
        with pytest.raises(NotFoundError):
            service.purge_user("nobody@example.com")

    def test_deleted_user_tokens_no_longer_refresh(self, db, codec):
        from tokenauth.services.auth import AuthService

        store = SQLAlchemyRefreshTokenStore()
        user = UserFactory()
        user_id = user.id
        pair = TokenIssuer(codec=codec, store=store).issue(user_id)

        IdentityService(refresh_store=store).delete_user(actor_id=user_id, user_id=user_id)

        assert codec.decode(pair.refresh_token, TokenType.REFRESH).value.subject == str(user_id)
        assert isinstance(AuthService(codec=codec, store=store).refresh(pair.refresh_token), Err)

import re
from datetime import date

import pytest

from socialfeed.application.services.auth_service import AuthService
from socialfeed.domain.errors import InvalidCredentialsError, UserAlreadyExistsError, UsernameTakenError
from socialfeed.domain.models import Gender, UserRole
from socialfeed.services.password_hasher import PasswordHasher
from socialfeed.services.username_generator import UsernameGenerator


class ScriptedUsernames:
    """Hands out a fixed sequence of handles, ignoring availability."""

    def __init__(self, *names):
        self._names = iter(names)

    def generate(self):
        return next(self._names)


class TestRegister:
    def test_token_resolves_to_new_user(self, auth_service, token_service, persistence):
        token = auth_service.register("Alice", "Alice@Example.com", "secret123")

        user = persistence.get_user_by_id(token_service.verify(token))
        assert user.email == "alice@example.com"
        assert user.name == "Alice"
        assert user.role == UserRole.USER
        assert user.password_hash != "secret123"

    def test_optional_profile_fields(self, auth_service, persistence):
        auth_service.register(
            "Bob", "bob@example.com", "secret123", date_of_birth=date(1990, 5, 1), gender=Gender.MALE
        )

        user = persistence.get_user_by_email("bob@example.com")
        assert user.date_of_birth == date(1990, 5, 1)
        assert user.gender == Gender.MALE

    def test_generates_username(self, auth_service, persistence):
        auth_service.register("Alice", "alice@example.com", "secret123")

        user = persistence.get_user_by_email("alice@example.com")
        assert re.fullmatch(r"[a-z]+\.[a-z]+\d*", user.username)

    def test_duplicate_email(self, auth_service):
        auth_service.register("Alice", "alice@example.com", "secret123")

        with pytest.raises(UserAlreadyExistsError):
            auth_service.register("Other Alice", "ALICE@example.com", "secret456")

    def test_username_race_retries_with_fresh_name(self, persistence, token_service, make_user):
        make_user("alice")
        service = AuthService(
            persistence,
            PasswordHasher(rounds=4),
            token_service,
            username_generator=ScriptedUsernames("test.alice", "calm.otter"),
        )

        token = service.register("Bob", "bob@example.com", "secret123")

        user = persistence.get_user_by_id(token_service.verify(token))
        assert user.email == "bob@example.com"
        assert user.username == "calm.otter"

    def test_username_race_gives_up_after_retries(self, persistence, token_service, make_user):
        make_user("alice")
        service = AuthService(
            persistence,
            PasswordHasher(rounds=4),
            token_service,
            username_generator=ScriptedUsernames("test.alice", "test.alice", "test.alice"),
        )

        with pytest.raises(UsernameTakenError):
            service.register("Bob", "bob@example.com", "secret123")
        assert persistence.get_user_by_email("bob@example.com") is None


class TestLogin:
    def test_login_after_register(self, auth_service, token_service, persistence):
        auth_service.register("Alice", "alice@example.com", "secret123")

        token = auth_service.login("alice@example.com", "secret123")

        user_id = token_service.verify(token)
        assert persistence.get_user_by_id(user_id).email == "alice@example.com"

    def test_wrong_password(self, auth_service):
        auth_service.register("Alice", "alice@example.com", "secret123")

        with pytest.raises(InvalidCredentialsError):
            auth_service.login("alice@example.com", "wrong-password")

    def test_unknown_email(self, auth_service):
        with pytest.raises(InvalidCredentialsError):
            auth_service.login("nobody@example.com", "secret123")


class TestUsernameGenerator:
    def test_free_name_is_used_as_is(self):
        name = UsernameGenerator(lambda candidate: False).generate()
        assert re.fullmatch(r"[a-z]+\.[a-z]+", name)

    def test_taken_name_gets_suffix(self):
        taken = []

        def is_taken(candidate):
            taken.append(candidate)
            return len(taken) == 1

        name = UsernameGenerator(is_taken).generate()

        assert name != taken[0]
        assert name.startswith(taken[0])
        assert name[len(taken[0]):].isdigit()

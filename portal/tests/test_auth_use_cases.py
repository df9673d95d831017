from __future__ import annotations

from dataclasses import replace

import pytest

from portal.application.services.token_service import JwtTokenIssuer
from portal.application.use_cases.users.current_user import GetCurrentUserUseCase
from portal.application.use_cases.users.login_user import LoginUserUseCase
from portal.application.use_cases.users.register_user import (
    DUPLICATE_DETAILS_MESSAGE,
    RegisterUserUseCase,
)
from portal.domain.users.entities import UserAccount
from portal.domain.users.exceptions import (
    DuplicateKeyError,
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserNotFoundError,
)
from portal.domain.users.repositories import PasswordHasher, UserRepository
from portal.shared.errors.base import ValidationError

ALICE = {
    "username": "alice_01",
    "password": "Str0ng!Pw",
    "id_number": "8001015009087",
    "account_number": "1234567890",
}


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, UserAccount] = {}
        self._seq = 1

    def find_by_username(self, username: str) -> UserAccount | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def find_by_id(self, user_id: int) -> UserAccount | None:
        return self._users.get(user_id)

    def add(self, account: UserAccount) -> UserAccount:
        for field in ("username", "id_number", "account_number"):
            value = getattr(account, field)
            if any(getattr(u, field) == value for u in self._users.values()):
                raise DuplicateKeyError(field)
        new_account = replace(account, id=self._seq)
        self._seq += 1
        self._users[new_account.id] = new_account
        return new_account


class RacingUserRepository(InMemoryUserRepository):
    """Pre-check never sees the row a concurrent request already inserted."""

    def find_by_username(self, username: str) -> UserAccount | None:
        return None


class RecordingHasher(PasswordHasher):
    def __init__(self) -> None:
        self.hash_calls = 0
        self.verify_calls = 0

    def hash(self, password: str) -> str:
        self.hash_calls += 1
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"hashed:{password}"


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> RecordingHasher:
    return RecordingHasher()


@pytest.fixture()
def tokens() -> JwtTokenIssuer:
    return JwtTokenIssuer(secret_key="test-secret-key-0123456789abcdefghij")


@pytest.fixture()
def register(
    users: InMemoryUserRepository, tokens: JwtTokenIssuer, hasher: RecordingHasher
) -> RegisterUserUseCase:
    return RegisterUserUseCase(users=users, tokens=tokens, password_hasher=hasher)


@pytest.fixture()
def login(
    users: InMemoryUserRepository, tokens: JwtTokenIssuer, hasher: RecordingHasher
) -> LoginUserUseCase:
    return LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher)


def test_register_user_success(
    register: RegisterUserUseCase, users: InMemoryUserRepository, tokens: JwtTokenIssuer
) -> None:
    result = register.execute(**ALICE)

    assert result.account.username == "alice_01"
    assert result.account.id == 1
    stored = users.find_by_username("alice_01")
    assert stored is not None
    assert stored.password_hash != ALICE["password"]
    assert stored.id_number == ALICE["id_number"]
    claims = tokens.verify(result.token)
    assert (claims.user_id, claims.username) == (1, "alice_01")


def test_register_then_login_tokens_share_user_id(
    register: RegisterUserUseCase, login: LoginUserUseCase, tokens: JwtTokenIssuer
) -> None:
    registered = register.execute(**ALICE)
    logged_in = login.execute("alice_01", "Str0ng!Pw")

    assert tokens.verify(registered.token).user_id == tokens.verify(logged_in.token).user_id


def test_register_duplicate_username_raises(register: RegisterUserUseCase) -> None:
    register.execute(**ALICE)

    with pytest.raises(DuplicateUserError) as exc_info:
        register.execute(
            username="alice_01",
            password="0ther!Pass",
            id_number="9001015009088",
            account_number="9876543210",
        )

    assert exc_info.value.message == "Username already taken"
    assert exc_info.value.status == 400


@pytest.mark.parametrize("field", ["id_number", "account_number"])
def test_register_duplicate_identifier_surfaces_as_duplicate_user(
    register: RegisterUserUseCase, field: str
) -> None:
    register.execute(**ALICE)
    other = {
        "username": "bob_02",
        "password": "0ther!Pass",
        "id_number": "9001015009088",
        "account_number": "9876543210",
        field: ALICE[field],
    }

    with pytest.raises(DuplicateUserError) as exc_info:
        register.execute(**other)

    assert exc_info.value.message == DUPLICATE_DETAILS_MESSAGE


def test_register_username_race_is_caught_by_store(
    tokens: JwtTokenIssuer, hasher: RecordingHasher
) -> None:
    users = RacingUserRepository()
    register = RegisterUserUseCase(users=users, tokens=tokens, password_hasher=hasher)
    register.execute(**ALICE)

    with pytest.raises(DuplicateUserError) as exc_info:
        register.execute(**{**ALICE, "id_number": "9001015009088", "account_number": "9876543210"})

    assert exc_info.value.message == "Username already taken"


def test_register_validation_failure_does_no_work(
    register: RegisterUserUseCase, users: InMemoryUserRepository, hasher: RecordingHasher
) -> None:
    with pytest.raises(ValidationError) as exc_info:
        register.execute(**{**ALICE, "password": "password"})

    assert exc_info.value.field == "password"
    assert hasher.hash_calls == 0
    assert users.find_by_username("alice_01") is None


def test_register_rejects_mismatched_confirmation(register: RegisterUserUseCase) -> None:
    with pytest.raises(ValidationError) as exc_info:
        register.execute(**ALICE, confirm_password="Different1!")

    assert exc_info.value.field == "confirmPassword"


def test_login_user_invalid_password(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute(**ALICE)

    with pytest.raises(InvalidCredentialsError) as exc_info:
        login.execute("alice_01", "Wr0ng!Pass")

    assert not isinstance(exc_info.value, UserNotFoundError)
    assert exc_info.value.status == 401


def test_login_unknown_user_is_indistinguishable(
    login: LoginUserUseCase, hasher: RecordingHasher
) -> None:
    with pytest.raises(UserNotFoundError) as exc_info:
        login.execute("nobody", "Str0ng!Pw")

    error = exc_info.value
    reference = InvalidCredentialsError()
    assert (error.message, error.code, error.status) == (
        reference.message,
        reference.code,
        reference.status,
    )
    assert hasher.verify_calls == 1


def test_login_missing_fields(login: LoginUserUseCase) -> None:
    with pytest.raises(ValidationError):
        login.execute("alice_01", "")
    with pytest.raises(ValidationError):
        login.execute(None, "Str0ng!Pw")


def test_current_user_resolves_token(
    register: RegisterUserUseCase, users: InMemoryUserRepository, tokens: JwtTokenIssuer
) -> None:
    result = register.execute(**ALICE)
    current = GetCurrentUserUseCase(users=users, tokens=tokens)

    summary = current.execute(result.token)

    assert summary == result.account


def test_current_user_rejects_token_for_unknown_account(
    users: InMemoryUserRepository, tokens: JwtTokenIssuer
) -> None:
    current = GetCurrentUserUseCase(users=users, tokens=tokens)

    with pytest.raises(InvalidTokenError):
        current.execute(tokens.issue(42, "ghost"))


def test_login_prepares_dummy_hash_once(
    users: InMemoryUserRepository, tokens: JwtTokenIssuer, hasher: RecordingHasher
) -> None:
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher)
    assert hasher.hash_calls == 1

    for _ in range(3):
        with pytest.raises(UserNotFoundError):
            login.execute("nobody", "Str0ng!Pw")

    assert hasher.hash_calls == 1
    assert hasher.verify_calls == 3

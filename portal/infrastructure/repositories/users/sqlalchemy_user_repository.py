# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.domain.users.entities import UserAccount
from portal.domain.users.exceptions import DuplicateKeyError
from portal.domain.users.repositories import UserRepository
from portal.infrastructure.db.models import UNIQUE_COLUMNS, UserAccountRow
from portal.infrastructure.unit_of_work import unit_of_work_scope


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _to_domain(row: UserAccountRow) -> UserAccount:
    return UserAccount(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        id_number=row.id_number,
        account_number=row.account_number,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _duplicate_field(exc: IntegrityError) -> str | None:
    detail = str(exc.orig).lower()
    for column in UNIQUE_COLUMNS:
        if column in detail:
            return column
    return None


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> UserAccount | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                select(UserAccountRow).where(UserAccountRow.username == username)
            ).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> UserAccount | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(UserAccountRow, user_id)
            return _to_domain(row) if row else None

    def add(self, account: UserAccount) -> UserAccount:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = UserAccountRow(
                    username=account.username,
                    password_hash=account.password_hash,
                    id_number=account.id_number,
                    account_number=account.account_number,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            raise DuplicateKeyError(_duplicate_field(exc)) from exc


__all__ = ["SqlAlchemyUserRepository"]

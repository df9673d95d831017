# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transactional scope for repository calls."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from portal.shared.logging import logger


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on any error."""

    session = factory()
    logger.debug("uow: session opened")
    try:
        yield session
        session.commit()
        logger.debug("uow: committed")
    except Exception as exc:
        logger.debug(f"uow: rollback due to {type(exc).__name__}")
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["unit_of_work_scope"]

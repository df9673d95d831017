# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .models import UNIQUE_COLUMNS, UserAccountRow
from .session import Base, Database

__all__ = ["Base", "Database", "UNIQUE_COLUMNS", "UserAccountRow"]

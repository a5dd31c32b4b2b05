"""Shared test setup.

The database URL must point at memory before ``config`` is imported.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("FREE_INSIGHT_LIMIT", "2")
os.environ.setdefault("FREE_PATTERN_LIMIT", "0")

# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Label store backends."""

from hts.store.sqlite import SQLiteLabelStore

__all__ = ["SQLiteLabelStore"]

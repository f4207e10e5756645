# src/millrate_api/config/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""
Config package export.

Keeps import sites clean and stable:
    from millrate_api.config import get_settings, Settings
"""

from __future__ import annotations

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]

# src/millrate_api/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Millrate: municipal assessing service.

Year-versioned configuration with copy-on-write edits, year locking, and
land valuation with batch recalculation.
"""

__version__ = "0.1.0"

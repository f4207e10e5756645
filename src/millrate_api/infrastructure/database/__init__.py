# src/millrate_api/infrastructure/database/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

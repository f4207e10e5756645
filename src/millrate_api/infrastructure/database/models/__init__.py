# src/millrate_api/infrastructure/database/models/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

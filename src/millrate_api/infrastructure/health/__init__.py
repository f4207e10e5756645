# src/millrate_api/infrastructure/health/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

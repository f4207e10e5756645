# src/millrate_api/infrastructure/logging/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

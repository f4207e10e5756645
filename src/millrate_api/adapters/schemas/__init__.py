# src/millrate_api/adapters/schemas/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

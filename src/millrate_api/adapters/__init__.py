# src/millrate_api/adapters/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

# src/millrate_api/adapters/repositories/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

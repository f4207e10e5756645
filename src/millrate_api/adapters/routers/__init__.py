# src/millrate_api/adapters/routers/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

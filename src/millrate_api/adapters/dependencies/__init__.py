# src/millrate_api/adapters/dependencies/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

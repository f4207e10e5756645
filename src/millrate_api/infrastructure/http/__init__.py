# src/millrate_api/infrastructure/http/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

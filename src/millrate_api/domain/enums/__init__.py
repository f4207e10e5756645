# src/millrate_api/domain/enums/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

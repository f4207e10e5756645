# src/millrate_api/domain/services/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

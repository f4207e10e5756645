# src/millrate_api/application/use_cases/valuation/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

# src/millrate_api/application/use_cases/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

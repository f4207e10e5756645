# src/millrate_api/application/use_cases/assessment_years/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

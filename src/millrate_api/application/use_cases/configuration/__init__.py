# src/millrate_api/application/use_cases/configuration/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

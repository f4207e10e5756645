# src/millrate_api/domain/entities/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

# src/millrate_api/domain/interfaces/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

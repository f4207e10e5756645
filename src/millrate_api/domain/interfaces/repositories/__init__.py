# src/millrate_api/domain/interfaces/repositories/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

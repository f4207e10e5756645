# src/millrate_api/infrastructure/middleware/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

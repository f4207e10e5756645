# src/millrate_api/application/services/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

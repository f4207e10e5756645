# src/millrate_api/application/schemas/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

# src/millrate_api/infrastructure/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

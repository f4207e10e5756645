# src/millrate_api/dependencies/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

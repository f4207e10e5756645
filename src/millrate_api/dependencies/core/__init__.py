# src/millrate_api/dependencies/core/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

# src/millrate_api/domain/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

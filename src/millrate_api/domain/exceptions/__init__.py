# src/millrate_api/domain/exceptions/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

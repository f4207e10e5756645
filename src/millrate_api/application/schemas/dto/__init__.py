# src/millrate_api/application/schemas/dto/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

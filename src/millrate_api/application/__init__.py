# src/millrate_api/application/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

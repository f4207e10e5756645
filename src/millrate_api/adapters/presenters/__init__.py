# src/millrate_api/adapters/presenters/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Minimal user-account service: registration, login, profile and logout."""

__version__ = "0.1.0"

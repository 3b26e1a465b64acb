# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Exceptions raised by Toolcall.
"""

from typing import Optional


class ToolcallError(Exception):
    """Base class for Toolcall errors."""


class DuplicateFunctionError(ToolcallError):
    """A function with the same name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function '{name}' is already registered")


class RemoteToolError(ToolcallError):
    """The remote tool host failed to execute a call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

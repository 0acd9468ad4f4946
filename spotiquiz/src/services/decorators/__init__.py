# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Decorators Package

Provides reusable decorators for:
- Outbound request logging
- Best-effort command execution
"""

from .client_decorators import (
    best_effort,
    with_request_logging,
)

__all__ = [
    "best_effort",
    "with_request_logging",
]

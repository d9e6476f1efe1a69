# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""loguru setup, per-request correlation ids and redaction of secrets."""

from .logger import (
    clear_correlation_id,
    get_correlation_id,
    logger,
    set_correlation_id,
    setup_logging,
)
from .sensitive_filter import SENSITIVE_PATTERNS, sanitize_message, sanitize_record

__all__ = [
    "SENSITIVE_PATTERNS",
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "sanitize_message",
    "sanitize_record",
    "set_correlation_id",
    "setup_logging",
]

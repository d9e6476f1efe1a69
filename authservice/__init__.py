# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Phone-number registration and login service with JWT bearer tokens."""

__version__ = "0.1.0"

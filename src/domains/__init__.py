# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the Tutoring Orchestrator.

This package contains domain services that encapsulate business logic.

Domains:
    tutoring_session: Multi-agent tutoring session lifecycle.
"""

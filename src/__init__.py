"""Tutoring Orchestrator Backend.

Multi-agent tutoring sessions: a supervisor loop coordinates specialist
agents and a human in the loop to plan, teach, quiz and review a topic.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

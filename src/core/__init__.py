# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for the tutoring orchestrator.

This package contains the core business logic and shared utilities:
- config: Application configuration and settings
- intelligence: LLM completions via LiteLLM
- agents: Agent roster, profiles and invocation
- orchestration: Session state, next-agent selection and the LangGraph loop
"""

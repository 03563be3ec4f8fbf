# tests/fixtures/__init__.py
"""Shared domain models for transmute tests.

Usage:
    from tests.fixtures.models import Person, PersonDto
"""

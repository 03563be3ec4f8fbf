# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Provides consistent test intensity across all property test modules.
Import these instead of using inline @settings(max_examples=...).

Usage:
    from tests.property.settings import STANDARD_SETTINGS

    @given(value=st.integers())
    @STANDARD_SETTINGS
    def test_something(value):
        ...

Tiers:
- DETERMINISM_SETTINGS: 500 examples - flattening and configuration equality
- STANDARD_SETTINGS: 100 examples - Regular property tests
- SLOW_SETTINGS: 50 examples - Tests converting whole object graphs
- QUICK_SETTINGS: 20 examples - Fast validation tests (enums, simple rejection)
"""

from hypothesis import settings

# The same input must always flatten to the same tree
DETERMINISM_SETTINGS = settings(max_examples=500)

# Standard property tests - good balance of coverage and speed
STANDARD_SETTINGS = settings(max_examples=100)

# Whole-graph conversions recurse through the handler chain per element
SLOW_SETTINGS = settings(max_examples=50)

# Quick validation tests - simple input rejection, enum validation
# Fast tests where more examples add little value
QUICK_SETTINGS = settings(max_examples=20)

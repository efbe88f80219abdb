from __future__ import annotations

import pytest

from tests._fixtures.usage_builder import UsageBuilder


@pytest.fixture
def usage_builder() -> UsageBuilder:
    """Provide a fresh usage builder for the default test extension."""
    return UsageBuilder()

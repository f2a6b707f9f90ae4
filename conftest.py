"""
Root pytest setup: async tests (forwarding client, lifespan) run under pytest-asyncio
"""

import pytest

# Strict mode: only tests marked with @pytest.mark.asyncio get an event loop
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: run the test coroutine on an event loop"
    )

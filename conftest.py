"""Top-level pytest configuration for plugin fixture registration.

This file centralizes `pytest_plugins` to comply with pytest's requirement
that plugin declarations live in a top-level conftest located at the rootdir.
"""

# Register shared test fixture modules used across the suite
pytest_plugins = [
    "tests.fixtures.models",
]

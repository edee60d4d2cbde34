"""Test configuration and shared fixtures."""

import os

# Must be set before any src.inventory module loads its configuration
os.environ.setdefault("APP_ENVIRONMENT", "test")

from tests.fixtures import *  # noqa: E402,F401,F403

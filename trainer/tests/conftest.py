"""Pytest configuration."""

import os
import pytest


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: mark test as exercising the command-line scripts end to end"
    )


# Built-in openings only, unless a test points the API somewhere else
os.environ.pop("TRAINER_LINES_SOURCE", None)

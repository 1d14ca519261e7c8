"""
Pytest configuration and shared fixtures for MemberRoot tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_path(temp_dir: Path) -> Path:
    """
    Create a sample configuration file for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to sample configuration file.
    """
    config_path = temp_dir / "config.yaml"
    config_path.write_text(f"""
tree:
  identifier_length: 32

logging:
  level: DEBUG
  file: {temp_dir}/memberroot.log
  json_format: false
""")
    return config_path


# Hypothesis settings for property-based tests
from hypothesis import settings, Verbosity

# Register custom profile for MemberRoot tests
settings.register_profile("memberroot", max_examples=100, verbosity=Verbosity.normal, deadline=None)
settings.register_profile("memberroot-ci", max_examples=1000, verbosity=Verbosity.verbose, deadline=None)
settings.register_profile("memberroot-dev", max_examples=10, verbosity=Verbosity.verbose, deadline=None)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "memberroot"))

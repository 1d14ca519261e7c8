"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MemberRoot, a product of Garudex Labs

Package version.

An installed distribution reports the version recorded in its metadata. A
source checkout falls back to the VERSION file beside the package.
"""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "memberroot"
VERSION_FILE = Path(__file__).resolve().parent.parent / "VERSION"


def get_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    if VERSION_FILE.is_file():
        return VERSION_FILE.read_text().strip()
    return "0.0.0+unknown"


__version__ = get_version()

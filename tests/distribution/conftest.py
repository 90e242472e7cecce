"""
Pytest fixtures for distribution list tests.

Provides:
- Distribution list files in several layouts
- Inline tables
"""

import pytest


@pytest.fixture
def write_list(tmp_path):
    """Write a distribution list file and return its path."""

    def _write(content: str, name: str = "recipients.csv", encoding: str = "utf-8"):
        path = tmp_path / name
        path.write_text(content, encoding=encoding)
        return path

    return _write


@pytest.fixture
def csv_list(write_list):
    """A comma separated list with every role and one unknown role."""
    return write_list(
        "role,address\n"
        "TO,alice@example.com\n"
        "cc,bob@example.com\n"
        "Bcc,carol@example.com\n"
        "XX,dave@example.com\n"
        "to,erin@example.com\n"
    )


@pytest.fixture
def inline_pairs():
    """An inline (role, address) table."""
    return [
        ("TO", "a@x.com"),
        ("CC", "b@x.com"),
        ("BCC", "c@x.com"),
    ]

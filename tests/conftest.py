"""Shared fixtures for fswtex tests."""

import pytest

# A prefixed middle-lane sign: spelling S10001 S10002, one symbol S10005
# placed 10 left of and 20 below the centre.
SCENARIO_SIGN = "AS10001S10002M500x500S10005490x520"


@pytest.fixture
def scenario_sign():
    return SCENARIO_SIGN


@pytest.fixture
def write_file(tmp_path):
    """Write bytes or text under tmp_path and return the path."""
    def _write(name, content):
        path = tmp_path / name
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return path
    return _write

"""Test configuration and shared fixtures."""

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src-python"))

import pytest

import emailobfuscator as eo


ALL_SETTINGS = [
    eo.Settings(stop_after_dot=dot, stop_after_at=at)
    for dot in (True, False)
    for at in (True, False)
]


@pytest.fixture(params=ALL_SETTINGS, ids=lambda s: f"dot={s.stop_after_dot}-at={s.stop_after_at}")
def settings(request):
    return request.param

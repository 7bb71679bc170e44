"""
Tests for the installed module list.

Run with: pytest tests/test_packaging.py -v
"""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parent.parent


def installed_modules():
    with open(ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["tool"]["setuptools"]["py-modules"]


def test_streamlit_page_not_installed():
    assert "streamlit_app" not in installed_modules()


def test_installed_modules_exist():
    for name in installed_modules():
        assert (ROOT / f"{name}.py").is_file(), name

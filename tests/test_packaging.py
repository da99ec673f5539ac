"""
Contract test for what the distribution installs
"""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_entry_script_is_not_installed_as_a_module() -> None:
    """
    main.py is run as a script; only uptime_pusher goes into site-packages
    """
    config = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))

    assert config["tool"]["setuptools"]["py-modules"] == ["uptime_pusher"]
    assert "scripts" not in config["project"]

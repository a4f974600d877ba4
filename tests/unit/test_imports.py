"""
Import-order checks for the dashboard API modules.
"""

import importlib
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@pytest.mark.parametrize(
    "module",
    [
        "app.models.api.dashboard_request",
        "app.models.api.dashboard_response",
        "app.features.business_tasks.api.router",
    ],
)
def test_module_imports_first_in_fresh_interpreter(module):
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=PROJECT_ROOT,
        env=os.environ.copy(),
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0, result.stderr


def test_router_submodule_is_not_shadowed():
    package = importlib.import_module("app.features.business_tasks.api")
    module = importlib.import_module("app.features.business_tasks.api.router")

    assert package.router is module
    assert hasattr(module, "settings_service")

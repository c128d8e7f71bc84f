import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so `symsolve`, `backend` and `main` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from symsolve import settings as settings_module


@pytest.fixture(autouse=True)
def _default_settings():
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()

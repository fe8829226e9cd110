"""
Pytest configuration for Code Escape.

Why this exists:
- The test suite imports backend modules using `backend.app.*`.
- Depending on pytest import mode / environment, the repository root may not be on `sys.path`,
  which makes `import backend...` fail during collection.

This file ensures the repo root is available on `sys.path` for all tests in a deterministic way,
and provides the shipped stage catalogue plus a deterministic (builtin) validator.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parent.parent
STAGE_CATALOGUE = PROJECT_ROOT / "data" / "stages" / "escape_room.yaml"

# Ensure the repository root is importable (so `import backend.app...` works).
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def stage_store():
    """StageStore over the shipped catalogue."""
    from backend.app.services.stage_store import StageStore

    return StageStore(stages_file=str(STAGE_CATALOGUE))


@pytest.fixture
def linting_service():
    """LintingService using the builtin analyzer, so results never depend on installed tools."""
    from backend.app.services.linting_service import LintingService
    from backend.app.services.static_analysis import NativeAnalyzer

    return LintingService(analyzer=NativeAnalyzer())

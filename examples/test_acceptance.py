"""Run the example specs as pytest cases.

    ERTAGENT_API_KEY=... pytest examples/test_acceptance.py
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import pytest

from ertagent.cases import TestCase, pytest_params
from ertagent.config import get_settings
from ertagent.runner import TestRunner
from ertagent.spec import load_spec_dir

SPEC_DIR = Path(__file__).parent / "specs"

pytestmark = pytest.mark.skipif(
    shutil.which("emacs") is None or not os.getenv("ERTAGENT_API_KEY"),
    reason="needs emacs and ERTAGENT_API_KEY",
)


@pytest.fixture(scope="module")
def runner() -> TestRunner:
    return TestRunner(get_settings())


@pytest.mark.parametrize("case", pytest_params(load_spec_dir(SPEC_DIR)))
def test_spec(runner: TestRunner, case: TestCase) -> None:
    verdict = runner.run_case(case)
    assert verdict.passed, verdict.reason

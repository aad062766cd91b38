"""Ahead-of-time table of named test cases."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ertagent.spec import TestGroup

_SLUG_RE = re.compile(r"[^a-z0-9]+")
MAX_SLUG_CHARS = 40


@dataclass(frozen=True)
class TestCase:
    """One test description ready to run."""

    __test__ = False

    case_id: str
    group: str
    setup: str
    description: str


def slugify(text: str, limit: int = MAX_SLUG_CHARS) -> str:
    slug = _SLUG_RE.sub("-", text.casefold()).strip("-")
    return slug[:limit].rstrip("-") or "case"


def build_cases(group: TestGroup) -> list[TestCase]:
    group_slug = slugify(group.group)
    return [
        TestCase(
            case_id=f"{group_slug}::{index:02d}-{slugify(spec.description)}",
            group=group.group,
            setup=group.setup,
            description=spec.description,
        )
        for index, spec in enumerate(group.tests, start=1)
    ]


def build_case_table(groups: Iterable[TestGroup]) -> list[TestCase]:
    """Flatten groups into cases, rejecting colliding ids."""
    table: list[TestCase] = []
    seen: set[str] = set()
    for group in groups:
        for case in build_cases(group):
            if case.case_id in seen:
                raise ValueError(f"Duplicate test case id: {case.case_id}")
            seen.add(case.case_id)
            table.append(case)
    return table


def pytest_params(groups: Iterable[TestGroup]) -> list[Any]:
    """Turn the case table into `pytest.param` values for parametrize."""
    import pytest

    return [pytest.param(case, id=case.case_id) for case in build_case_table(groups)]

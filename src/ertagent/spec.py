"""Loading of declarative test spec documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ertagent.errors import SpecError

SPEC_SUFFIXES = (".yaml", ".yml")


class TestSpec(BaseModel):
    """One natural-language test description."""

    __test__ = False

    description: str = Field(..., min_length=1)


class TestGroup(BaseModel):
    """A named group of tests sharing setup text."""

    __test__ = False

    group: str = Field(..., min_length=1)
    setup: str = ""
    tests: list[TestSpec] = Field(..., min_length=1)
    source: Path | None = Field(default=None, exclude=True)

    @field_validator("setup", mode="before")
    @classmethod
    def _none_setup_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


def load_spec_text(text: str, *, source: str = "<string>") -> TestGroup:
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecError(f"{source}: invalid YAML: {exc}") from exc
    if not isinstance(payload, dict):
        raise SpecError(f"{source}: spec must be a mapping with 'group' and 'tests'")
    try:
        return TestGroup.model_validate(payload)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise SpecError(f"{source}: {problems}") from exc


def load_spec(path: Path) -> TestGroup:
    """Load one spec file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecError(f"{path}: {exc}") from exc
    group = load_spec_text(text, source=str(path))
    return group.model_copy(update={"source": path})


def load_spec_dir(directory: Path) -> list[TestGroup]:
    """Load every spec file in `directory`, sorted by file name."""
    if not directory.is_dir():
        raise SpecError(f"{directory}: not a directory")
    return [
        load_spec(path) for path in sorted(directory.iterdir()) if path.is_file() and path.suffix in SPEC_SUFFIXES
    ]


def load_specs(paths: list[Path]) -> list[TestGroup]:
    groups: list[TestGroup] = []
    for path in paths:
        if path.is_dir():
            groups.extend(load_spec_dir(path))
        else:
            groups.append(load_spec(path))
    return groups

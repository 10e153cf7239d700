"""Skill categories and shared validation helpers."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional, Union


class SkillCategory(str, Enum):
    TESTING = "testing"
    DEBUGGING = "debugging"
    COLLABORATION = "collaboration"
    META = "meta"
    CODE_REVIEW = "code-review"
    GIT_WORKFLOW = "git-workflow"
    SECURITY = "security"


class TestResult(str, Enum):
    """Outcome of a test run inside a TDD workflow."""

    NOT_RUN = "not-run"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


class DebuggingPhase(str, Enum):
    ROOT_CAUSE_INVESTIGATION = "root-cause-investigation"
    PATTERN_ANALYSIS = "pattern-analysis"
    HYPOTHESIS_TESTING = "hypothesis-testing"
    IMPLEMENTATION = "implementation"


def list_categories() -> List[SkillCategory]:
    """Return every skill category in catalogue order."""
    return list(SkillCategory)


def validate_required(value: Optional[str], parameter_name: str) -> str:
    """Reject ``None``, empty, or whitespace-only values."""
    if value is None or not str(value).strip():
        raise ValueError(f"{parameter_name} cannot be null or empty")
    return value


def validate_directory(path: Optional[Union[str, Path]], parameter_name: str) -> Path:
    """Ensure ``path`` names an existing directory and return it resolved."""
    validate_required(None if path is None else str(path), parameter_name)
    candidate = Path(path).expanduser()  # type: ignore[arg-type]
    if not candidate.is_dir():
        raise NotADirectoryError(f"Directory not found: {path}")
    return candidate.resolve()

"""Data models for the hunksplit engine.

Contains:
- ChangeType: Kind of change a hunk makes
- Hunk: One indivisible change block within one file
- PlannedCommit: A single commit in a commit plan
- CommitPlan: The full plan supplied by the commit-planning component
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class ChangeType(str, Enum):
    """Kind of change a hunk makes, derived from its +/- line counts."""

    ADDITION = "addition"
    DELETION = "deletion"
    MODIFICATION = "modification"


def count_changes(content: str) -> tuple[int, int]:
    """Count added and removed lines, ignoring +++/--- file markers.

    Args:
        content: Hunk or patch text

    Returns:
        Tuple of (additions, deletions)
    """
    additions = 0
    deletions = 0
    for line in content.split("\n"):
        if line.startswith("+") and not line.startswith("+++"):
            additions += 1
        elif line.startswith("-") and not line.startswith("---"):
            deletions += 1
    return additions, deletions


def classify_change(content: str) -> ChangeType:
    """Classify hunk content as an addition, deletion or modification."""
    additions, deletions = count_changes(content)
    if deletions == 0 and additions > 0:
        return ChangeType.ADDITION
    if additions == 0 and deletions > 0:
        return ChangeType.DELETION
    return ChangeType.MODIFICATION


@dataclass
class Hunk:
    """One indivisible change block within one file.

    Line numbers are 1-based, inclusive, and refer to the post-change file.
    Only the dependency sets change after construction.
    """

    file_path: str
    start_line: int
    end_line: int
    content: str  # Verbatim @@ header plus body
    context: str = ""
    dependencies: set[str] = field(default_factory=set)  # applied before this hunk
    dependents: set[str] = field(default_factory=set)  # applied after this hunk
    change_type: ChangeType = ChangeType.MODIFICATION
    is_new_file: bool = False
    _id: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._id = f"{self.file_path}:{self.start_line}-{self.end_line}"

    @property
    def id(self) -> str:
        return self._id

    @property
    def header(self) -> str:
        """The @@ line of the hunk."""
        return self.content.split("\n", 1)[0]

    @property
    def line_range(self) -> str:
        return f"lines {self.start_line}-{self.end_line}"

    def count_changes(self) -> tuple[int, int]:
        return count_changes(self.content)

    @property
    def net_line_delta(self) -> int:
        """Additions minus deletions; nonzero means later lines shift."""
        additions, deletions = self.count_changes()
        return additions - deletions

    def add_dependency(self, other: "Hunk") -> None:
        """Record that this hunk must be applied after ``other``."""
        self.dependencies.add(other.id)
        other.dependents.add(self.id)


class PlannedCommit(BaseModel):
    """A single commit in the plan: which hunks it gets and its message."""

    message: str
    hunk_ids: list[str]
    rationale: Optional[str] = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("commit message must not be empty")
        return value


class CommitPlan(BaseModel):
    """The full plan produced by the commit-planning component."""

    commits: list[PlannedCommit] = []
    warnings: list[str] = []

    def all_hunk_ids(self) -> list[str]:
        """Every hunk ID referenced by the plan, in plan order."""
        return [hunk_id for commit in self.commits for hunk_id in commit.hunk_ids]

"""Hunk engine for hunksplit - parse diffs and apply hunk subsets safely.

This package provides:
- exceptions: HunkSplitError, ParseError, UnknownHunkIDError, OverlapError,
              PatchGenerationError, ApplyFailure, PlanExecutionError
- models: ChangeType, Hunk, PlannedCommit, CommitPlan
- parser: parse_diff, build_hunk_map, get_hunk_context
- dependencies: analyze_dependencies, hunks_have_line_dependency
- grouping: create_dependency_groups, topological_sort_hunks, order_group
- patch: create_hunk_patch, extract_files_from_patch
- validation: validate_hunk_combination, validate_patch_format
- snapshot: RepoSnapshot, create_snapshot, restore_snapshot
- applicator: HunkApplicator, ApplyResult, GroupResult, apply_hunks
- executor: execute_plan
- inventory: preview_hunk_application, format_hunk_inventory, group_summary
"""

# Exceptions
from hunksplit.engine.exceptions import (
    ApplyFailure,
    HunkSplitError,
    OverlapError,
    ParseError,
    PatchGenerationError,
    PlanExecutionError,
    UnknownHunkIDError,
)

# Models
from hunksplit.engine.models import (
    ChangeType,
    CommitPlan,
    Hunk,
    PlannedCommit,
)

# Parser
from hunksplit.engine.parser import (
    build_hunk_map,
    get_hunk_context,
    parse_diff,
)

# Dependencies
from hunksplit.engine.dependencies import (
    analyze_dependencies,
    hunks_have_line_dependency,
)

# Grouping and ordering
from hunksplit.engine.grouping import (
    create_dependency_groups,
    fallback_order,
    order_group,
    topological_sort_hunks,
)

# Patch builder
from hunksplit.engine.patch import (
    create_hunk_patch,
    extract_files_from_patch,
)

# Validation
from hunksplit.engine.validation import (
    validate_hunk_combination,
    validate_patch_format,
)

# Snapshots
from hunksplit.engine.snapshot import (
    RepoSnapshot,
    create_snapshot,
    restore_snapshot,
)

# Applicator
from hunksplit.engine.applicator import (
    ApplyResult,
    GroupResult,
    HunkApplicator,
    apply_hunks,
)

# Executor
from hunksplit.engine.executor import (
    execute_plan,
)

# Inventory
from hunksplit.engine.inventory import (
    format_hunk_inventory,
    group_summary,
    preview_hunk_application,
)


__all__ = [
    # Exceptions
    "HunkSplitError",
    "ParseError",
    "UnknownHunkIDError",
    "OverlapError",
    "PatchGenerationError",
    "ApplyFailure",
    "PlanExecutionError",
    # Models
    "ChangeType",
    "Hunk",
    "PlannedCommit",
    "CommitPlan",
    # Parser
    "parse_diff",
    "build_hunk_map",
    "get_hunk_context",
    # Dependencies
    "analyze_dependencies",
    "hunks_have_line_dependency",
    # Grouping
    "create_dependency_groups",
    "topological_sort_hunks",
    "fallback_order",
    "order_group",
    # Patch
    "create_hunk_patch",
    "extract_files_from_patch",
    # Validation
    "validate_hunk_combination",
    "validate_patch_format",
    # Snapshots
    "RepoSnapshot",
    "create_snapshot",
    "restore_snapshot",
    # Applicator
    "HunkApplicator",
    "ApplyResult",
    "GroupResult",
    "apply_hunks",
    # Executor
    "execute_plan",
    # Inventory
    "preview_hunk_application",
    "format_hunk_inventory",
    "group_summary",
]

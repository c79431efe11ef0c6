"""Core data models for CloudFormation stack lifecycle operations."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path

TERMINAL_STATUS = re.compile(r"_(COMPLETE|FAILED)$")


class StackStatus(StrEnum):
    """Overall CloudFormation stack status."""

    CREATE_IN_PROGRESS = "CREATE_IN_PROGRESS"
    CREATE_FAILED = "CREATE_FAILED"
    CREATE_COMPLETE = "CREATE_COMPLETE"
    ROLLBACK_IN_PROGRESS = "ROLLBACK_IN_PROGRESS"
    ROLLBACK_FAILED = "ROLLBACK_FAILED"
    ROLLBACK_COMPLETE = "ROLLBACK_COMPLETE"
    DELETE_IN_PROGRESS = "DELETE_IN_PROGRESS"
    DELETE_FAILED = "DELETE_FAILED"
    DELETE_COMPLETE = "DELETE_COMPLETE"
    UPDATE_IN_PROGRESS = "UPDATE_IN_PROGRESS"
    UPDATE_COMPLETE_CLEANUP_IN_PROGRESS = "UPDATE_COMPLETE_CLEANUP_IN_PROGRESS"
    UPDATE_COMPLETE = "UPDATE_COMPLETE"
    UPDATE_FAILED = "UPDATE_FAILED"
    UPDATE_ROLLBACK_IN_PROGRESS = "UPDATE_ROLLBACK_IN_PROGRESS"
    UPDATE_ROLLBACK_FAILED = "UPDATE_ROLLBACK_FAILED"
    UPDATE_ROLLBACK_COMPLETE_CLEANUP_IN_PROGRESS = "UPDATE_ROLLBACK_COMPLETE_CLEANUP_IN_PROGRESS"
    UPDATE_ROLLBACK_COMPLETE = "UPDATE_ROLLBACK_COMPLETE"
    REVIEW_IN_PROGRESS = "REVIEW_IN_PROGRESS"
    IMPORT_IN_PROGRESS = "IMPORT_IN_PROGRESS"
    IMPORT_COMPLETE = "IMPORT_COMPLETE"
    IMPORT_ROLLBACK_IN_PROGRESS = "IMPORT_ROLLBACK_IN_PROGRESS"
    IMPORT_ROLLBACK_FAILED = "IMPORT_ROLLBACK_FAILED"
    IMPORT_ROLLBACK_COMPLETE = "IMPORT_ROLLBACK_COMPLETE"


def is_failure_status(status: str) -> bool:
    """True for statuses that end an operation unsuccessfully."""
    return status.endswith("_FAILED") or status.endswith("ROLLBACK_COMPLETE")


@dataclass(frozen=True)
class Parameter:
    """A single stack parameter."""

    key: str
    value: str


@dataclass(frozen=True)
class StackOptions:
    """Optional modifiers applied to create and update calls."""

    capabilities: tuple[str, ...] = ()
    role_arn: str | None = None

    def as_cli_args(self) -> list[str]:
        """Render the modifiers the way the CloudFormation CLI spells them."""
        args = []
        if self.capabilities:
            args.extend(["--capabilities", " ".join(self.capabilities)])
        if self.role_arn:
            args.extend(["--role-arn", self.role_arn])
        return args


@dataclass(frozen=True)
class StackContext:
    """The stack an operation targets, and the local files that describe it."""

    name: str
    template_path: Path | None = None
    params_path: Path | None = None
    searched: tuple[Path, ...] = ()


@dataclass(frozen=True)
class StackEvent:
    """A single entry of a stack's event log."""

    event_id: str
    stack_name: str
    logical_id: str
    resource_type: str
    status: str
    timestamp: datetime
    physical_id: str | None = None
    reason: str | None = None

    @property
    def is_stack_event(self) -> bool:
        return self.logical_id == self.stack_name

    @property
    def is_terminal(self) -> bool:
        """True when the stack itself reached the end of an operation."""
        return self.is_stack_event and bool(TERMINAL_STATUS.search(self.status))

    @property
    def is_failure(self) -> bool:
        return is_failure_status(self.status)


@dataclass(frozen=True)
class Stack:
    """Deployed state of a stack as reported by CloudFormation."""

    stack_id: str
    name: str
    status: StackStatus
    parameters: list[Parameter] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)
    outputs: dict[str, str] = field(default_factory=dict)
    capabilities: tuple[str, ...] = ()
    status_reason: str | None = None


@dataclass(frozen=True)
class StackResource:
    """A resource managed by a stack."""

    logical_id: str
    physical_id: str
    resource_type: str
    status: str


@dataclass(frozen=True)
class StackExport:
    """A value exported by a stack output."""

    name: str
    value: str
    exporting_stack_id: str


@dataclass(frozen=True)
class DiffResult:
    """Outcome of comparing one deployed document against its local file."""

    subject: str
    lines: list[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def identical(self) -> bool:
        return not self.skipped and not self.lines

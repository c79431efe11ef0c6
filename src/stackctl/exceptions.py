"""Errors raised by stackctl before or around CloudFormation calls."""

from pathlib import Path


class StackError(Exception):
    """Base class for stackctl errors reported to the operator."""


class StackUsageError(StackError):
    """The positional arguments do not fit the command."""


class MissingStackError(StackUsageError):
    """No stack argument was given."""

    def __init__(self):
        super().__init__("No stack name given.")


class UnexpectedArgumentsError(StackUsageError):
    def __init__(self, extra: list[str]):
        self.extra = extra
        super().__init__(f"Unexpected arguments: {' '.join(extra)}")


class StackNotFoundError(StackError):
    def __init__(self, stack_name: str):
        self.stack_name = stack_name
        super().__init__(f"Stack {stack_name!r} does not exist.")


class TemplateNotFoundError(StackError):
    def __init__(self, stack_name: str, searched: tuple[Path, ...]):
        self.stack_name = stack_name
        self.searched = searched
        paths = " or ".join(str(p) for p in searched) or "a template path"
        super().__init__(f"No template for stack {stack_name!r}: expected {paths}.")


class ParamsNotFoundError(StackError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Parameters file {str(path)!r} does not exist.")


class TemplateTooLargeError(StackError):
    def __init__(self, path: Path, size: int, limit: int):
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(
            f"Template {str(path)!r} is {size} bytes; "
            f"inline templates are limited to {limit} bytes."
        )


class InvalidTemplateError(StackError):
    """A local template or parameters file is not valid JSON."""


class OperationFailedError(StackError):
    """A stack operation finished in a failed terminal status."""

    def __init__(self, stack_name: str, status: str):
        self.stack_name = stack_name
        self.status = status
        super().__init__(f"Stack {stack_name!r} finished in {status}.")

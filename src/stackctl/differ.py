"""Compare a deployed stack against its local template and parameters files."""

import difflib
import logging

from stackctl.aws.client import CloudFormationClient
from stackctl.models import DiffResult, StackContext
from stackctl.templates import (
    canonical_parameters,
    canonicalize,
    load_template,
    read_parameters,
)

logger = logging.getLogger(__name__)


def unified_diff(deployed: str, local: str, deployed_label: str, local_label: str) -> list[str]:
    return list(
        difflib.unified_diff(
            deployed.splitlines(),
            local.splitlines(),
            fromfile=deployed_label,
            tofile=local_label,
            lineterm="",
        )
    )


class StackDiffer:
    """Diffs deployed state against local files, template first, then parameters."""

    def __init__(self, client: CloudFormationClient):
        self._client = client

    def diff(self, context: StackContext) -> list[DiffResult]:
        """Run both reports. Raises before producing any output if the stack or
        the template file is missing."""
        self._client.describe_stack(context.name)
        local_template = load_template(context)

        return [
            self._diff_template(context, local_template),
            self._diff_parameters(context),
        ]

    def _diff_template(self, context: StackContext, local_template) -> DiffResult:
        deployed = canonicalize(self._client.get_template(context.name))
        lines = unified_diff(
            deployed,
            canonicalize(local_template),
            f"deployed/{context.name}",
            str(context.template_path),
        )
        return DiffResult(subject="template", lines=lines)

    def _diff_parameters(self, context: StackContext) -> DiffResult:
        if context.params_path is None:
            logger.debug("No parameters file for %s", context.name)
            return DiffResult(subject="parameters", skipped=True)

        local = canonical_parameters(read_parameters(context.params_path))
        deployed = canonical_parameters(self._client.get_parameters(context.name))
        lines = unified_diff(
            deployed,
            local,
            f"deployed/{context.name}",
            str(context.params_path),
        )
        return DiffResult(subject="parameters", lines=lines)

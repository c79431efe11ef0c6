"""Create, update, delete and recreate stacks, tailing each operation to completion."""

import json
import logging
import tempfile
from dataclasses import replace
from pathlib import Path

from botocore.exceptions import ClientError

from stackctl.aws.client import CloudFormationClient
from stackctl.exceptions import OperationFailedError
from stackctl.models import StackContext, StackEvent, StackOptions
from stackctl.tailer import EventTailer
from stackctl.templates import context_parameters, read_template, to_api_parameters

logger = logging.getLogger(__name__)

NO_UPDATES = "No updates are to be performed"
NO_ECHO_MASK = "****"


class StackLifecycle:
    """Runs mutating stack operations and hands each one off to the tailer.

    Local preconditions (template present and small enough, parameters file
    readable) are checked before any API call. Nothing is retried or rolled
    back: a failed initiation propagates and tailing never starts.
    """

    def __init__(self, client: CloudFormationClient, tailer: EventTailer):
        self._client = client
        self._tailer = tailer

    def create(self, context: StackContext, options: StackOptions) -> StackEvent:
        body = read_template(context)
        parameters = context_parameters(context)

        logger.info("Creating stack %s from %s", context.name, context.template_path)
        stack_id = self._client.create_stack(
            context.name,
            body,
            parameters,
            capabilities=options.capabilities,
            role_arn=options.role_arn,
        )
        return self._tailer.tail(context.name, stack_id=stack_id)

    def update(self, context: StackContext, options: StackOptions) -> StackEvent | None:
        """Update a stack. Returns None when CloudFormation reports nothing to change."""
        body = read_template(context)
        parameters = context_parameters(context)

        capabilities = options.capabilities
        if not capabilities:
            capabilities = self._client.describe_stack(context.name).capabilities
            if capabilities:
                logger.info("Reusing capabilities of %s: %s", context.name, ", ".join(capabilities))

        known = self._event_ids(context.name)
        logger.info("Updating stack %s from %s", context.name, context.template_path)
        try:
            stack_id = self._client.update_stack(
                context.name,
                body,
                parameters,
                capabilities=capabilities,
                role_arn=options.role_arn,
            )
        except ClientError as e:
            if NO_UPDATES in str(e):
                logger.info("Stack %s is already up to date", context.name)
                return None
            raise
        return self._tailer.tail(context.name, stack_id=stack_id, known=known)

    def delete(self, stack_name: str) -> StackEvent:
        stack = self._client.describe_stack(stack_name)
        known = self._event_ids(stack.stack_id)

        logger.info("Deleting stack %s", stack_name)
        self._client.delete_stack(stack_name)
        return self._tailer.tail(stack_name, stack_id=stack.stack_id, known=known)

    def recreate(self, stack_name: str, options: StackOptions) -> StackEvent:
        """Delete a stack and create it again from its deployed template and parameters.

        The snapshot is checked the same way ``create`` checks it before the
        stack is deleted. Beyond that this is not transactional: if the create
        fails after the delete finished, the stack is gone and has to be
        created by hand.
        """
        stack = self._client.describe_stack(stack_name)
        if not options.capabilities and stack.capabilities:
            options = replace(options, capabilities=stack.capabilities)

        with tempfile.TemporaryDirectory(prefix=f"stackctl-{stack_name}-") as workdir:
            context = self.snapshot(stack_name, Path(workdir))
            read_template(context)
            context_parameters(context)

            deleted = self.delete(stack_name)
            if deleted.is_failure:
                raise OperationFailedError(stack_name, deleted.status)

            return self.create(context, options)

    def snapshot(self, stack_name: str, directory: Path) -> StackContext:
        """Write the deployed template and parameters of a stack into directory.

        Text templates are written as returned and parsed ones compactly, so
        the file is no larger than what CloudFormation accepted.
        """
        template = self._client.get_template(stack_name)
        template_path = directory / f"{stack_name}.json"
        if isinstance(template, str):
            template_path.write_text(template)
        else:
            template_path.write_text(json.dumps(template, separators=(",", ":")))

        params = self._client.get_parameters(stack_name)
        masked = [p.key for p in params if p.value == NO_ECHO_MASK]
        if masked:
            logger.warning(
                "Stack %s hides NoEcho parameters %s; they will be recreated as %r",
                stack_name,
                ", ".join(masked),
                NO_ECHO_MASK,
            )
        params_path = directory / f"{stack_name}-params.json"
        params_path.write_text(json.dumps(to_api_parameters(params), indent=2))

        logger.debug("Saved %s to %s", stack_name, directory)
        return StackContext(
            name=stack_name,
            template_path=template_path,
            params_path=params_path,
            searched=(template_path,),
        )

    def _event_ids(self, ref: str) -> set[str]:
        """Ids of the events already logged, so a tail skips the previous operation."""
        return {e.event_id for e in self._client.list_events(ref)}

"""Thin boto3 wrapper for CloudFormation stack lifecycle API calls."""

import json
import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

from stackctl.exceptions import StackNotFoundError
from stackctl.models import (
    Parameter,
    Stack,
    StackEvent,
    StackExport,
    StackResource,
    StackStatus,
)
from stackctl.templates import to_api_parameters

logger = logging.getLogger(__name__)


def _is_missing_stack(error: ClientError) -> bool:
    return "does not exist" in str(error)


class CloudFormationClient:
    """Wraps boto3 CloudFormation calls and returns stackctl dataclasses.

    Every call is a single synchronous request (or paginated series). Nothing
    is retried; botocore errors propagate to the caller, except "does not
    exist" errors which become StackNotFoundError.
    """

    def __init__(self, region: str | None = None):
        self._client = boto3.client("cloudformation", **({"region_name": region} if region else {}))

    def create_stack(
        self,
        stack_name: str,
        template_body: str,
        parameters: list[Parameter] | None = None,
        capabilities: tuple[str, ...] = (),
        role_arn: str | None = None,
    ) -> str:
        """Start creating a stack with rollback disabled. Returns the stack id."""
        kwargs: dict[str, Any] = {
            "StackName": stack_name,
            "TemplateBody": template_body,
            "Parameters": to_api_parameters(parameters or []),
            "DisableRollback": True,
        }
        if capabilities:
            kwargs["Capabilities"] = list(capabilities)
        if role_arn:
            kwargs["RoleARN"] = role_arn

        logger.debug("CreateStack %s", stack_name)
        return self._client.create_stack(**kwargs)["StackId"]

    def update_stack(
        self,
        stack_name: str,
        template_body: str,
        parameters: list[Parameter] | None = None,
        capabilities: tuple[str, ...] = (),
        role_arn: str | None = None,
    ) -> str:
        """Start updating a stack. Returns the stack id."""
        kwargs: dict[str, Any] = {
            "StackName": stack_name,
            "TemplateBody": template_body,
            "Parameters": to_api_parameters(parameters or []),
        }
        if capabilities:
            kwargs["Capabilities"] = list(capabilities)
        if role_arn:
            kwargs["RoleARN"] = role_arn

        logger.debug("UpdateStack %s", stack_name)
        return self._client.update_stack(**kwargs)["StackId"]

    def delete_stack(self, stack_name: str) -> None:
        logger.debug("DeleteStack %s", stack_name)
        self._client.delete_stack(StackName=stack_name)

    def describe_stack(self, stack_name: str) -> Stack:
        """Fetch status, parameters, tags and outputs of a stack."""
        try:
            resp = self._client.describe_stacks(StackName=stack_name)
        except ClientError as e:
            if _is_missing_stack(e):
                raise StackNotFoundError(stack_name) from e
            raise

        if not resp["Stacks"]:
            raise StackNotFoundError(stack_name)
        stack = resp["Stacks"][0]

        return Stack(
            stack_id=stack["StackId"],
            name=stack["StackName"],
            status=StackStatus(stack["StackStatus"]),
            parameters=[
                Parameter(key=p["ParameterKey"], value=p.get("ParameterValue", ""))
                for p in stack.get("Parameters", [])
            ],
            tags={t["Key"]: t["Value"] for t in stack.get("Tags", [])},
            outputs={o["OutputKey"]: o.get("OutputValue", "") for o in stack.get("Outputs", [])},
            capabilities=tuple(stack.get("Capabilities", [])),
            status_reason=stack.get("StackStatusReason"),
        )

    def list_stacks(self) -> list[Stack]:
        """List every stack in the region that has not been deleted."""
        paginator = self._client.get_paginator("describe_stacks")
        stacks = []
        for page in paginator.paginate():
            for stack in page["Stacks"]:
                stacks.append(
                    Stack(
                        stack_id=stack["StackId"],
                        name=stack["StackName"],
                        status=StackStatus(stack["StackStatus"]),
                    )
                )
        return stacks

    def list_events(self, stack_name: str) -> list[StackEvent]:
        """Fetch a stack's full event log, oldest first.

        The API pages newest first; reversing keeps the emission order for
        events that share a timestamp.
        """
        paginator = self._client.get_paginator("describe_stack_events")
        raw = []
        try:
            for page in paginator.paginate(StackName=stack_name):
                raw.extend(page["StackEvents"])
        except ClientError as e:
            if _is_missing_stack(e):
                raise StackNotFoundError(stack_name) from e
            raise

        events = [
            StackEvent(
                event_id=e["EventId"],
                stack_name=e["StackName"],
                logical_id=e["LogicalResourceId"],
                resource_type=e["ResourceType"],
                status=e["ResourceStatus"],
                timestamp=e["Timestamp"],
                physical_id=e.get("PhysicalResourceId"),
                reason=e.get("ResourceStatusReason"),
            )
            for e in reversed(raw)
        ]
        return sorted(events, key=lambda e: e.timestamp)

    def get_template(self, stack_name: str) -> Any:
        """Fetch the deployed template, parsed when it is JSON."""
        try:
            resp = self._client.get_template(StackName=stack_name, TemplateStage="Original")
        except ClientError as e:
            if _is_missing_stack(e):
                raise StackNotFoundError(stack_name) from e
            raise

        body = resp["TemplateBody"]
        if isinstance(body, str):
            try:
                return json.loads(body)
            except json.JSONDecodeError:
                return body
        return body

    def get_parameters(self, stack_name: str) -> list[Parameter]:
        """Fetch the deployed parameter set, sorted by key."""
        return sorted(self.describe_stack(stack_name).parameters, key=lambda p: p.key)

    def list_resources(self, stack_name: str) -> list[StackResource]:
        """Fetch every resource managed by a stack."""
        paginator = self._client.get_paginator("list_stack_resources")
        resources = []
        try:
            for page in paginator.paginate(StackName=stack_name):
                for r in page["StackResourceSummaries"]:
                    resources.append(
                        StackResource(
                            logical_id=r["LogicalResourceId"],
                            physical_id=r.get("PhysicalResourceId", ""),
                            resource_type=r["ResourceType"],
                            status=r["ResourceStatus"],
                        )
                    )
        except ClientError as e:
            if _is_missing_stack(e):
                raise StackNotFoundError(stack_name) from e
            raise
        return resources

    def list_exports(self) -> list[StackExport]:
        paginator = self._client.get_paginator("list_exports")
        exports = []
        for page in paginator.paginate():
            for export in page["Exports"]:
                exports.append(
                    StackExport(
                        name=export["Name"],
                        value=export["Value"],
                        exporting_stack_id=export["ExportingStackId"],
                    )
                )
        return exports

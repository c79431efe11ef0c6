"""CLI entrypoint for stackctl."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from functools import cached_property

import click
from botocore.exceptions import BotoCoreError, ClientError

from stackctl.aws.client import CloudFormationClient
from stackctl.differ import StackDiffer
from stackctl.exceptions import (
    MissingStackError,
    StackError,
    StackUsageError,
    UnexpectedArgumentsError,
)
from stackctl.formatter import (
    format_diff,
    format_event,
    format_events,
    format_exports,
    format_resources,
    format_stack,
    format_stacks,
)
from stackctl.lifecycle import StackLifecycle
from stackctl.models import StackContext, StackEvent, StackOptions
from stackctl.naming import resolve_stack, stack_name_from
from stackctl.options import modifier_value, parse_capabilities, split_modifiers
from stackctl.tailer import EventTailer

logger = logging.getLogger(__name__)

USAGE_HINT = "Usage: stackctl {command} {arguments}"
ARGUMENTS = {
    "create": "STACK [TEMPLATE [PARAMS]]",
    "update": "STACK [TEMPLATE [PARAMS]]",
    "diff": "STACK [TEMPLATE [PARAMS]]",
    "recreate": "STACK",
}


@contextmanager
def _reporting(command: str) -> Iterator[None]:
    """Turn stackctl and AWS errors into a one-line message and exit code."""
    try:
        yield
    except StackUsageError as e:
        click.echo(f"Error: {e}", err=True)
        arguments = ARGUMENTS.get(command, "STACK...")
        click.echo(USAGE_HINT.format(command=command, arguments=arguments), err=True)
        sys.exit(1)
    except StackError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except (ClientError, BotoCoreError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted; the stack operation continues in CloudFormation.", err=True)
        sys.exit(130)


def _print_event(event: StackEvent) -> None:
    click.echo(format_event(event))


def _finish(events: list[StackEvent | None]) -> None:
    failed = [e for e in events if e is not None and e.is_failure]
    for e in failed:
        click.echo(f"Error: stack {e.stack_name} finished in {e.status}.", err=True)
    sys.exit(1 if failed else 0)


def _resolve(args: tuple[str, ...], options: StackOptions) -> tuple[StackContext, StackOptions]:
    """Strip modifier tokens from the positional arguments and resolve the stack."""
    options, positional = split_modifiers(args, options)
    if not positional:
        raise MissingStackError()
    if len(positional) > 3:
        raise UnexpectedArgumentsError(positional[3:])
    context = resolve_stack(*positional)
    return context, options


def _stack_names(stacks: tuple[str, ...]) -> list[str]:
    _, positional = split_modifiers(stacks)
    if not positional:
        raise MissingStackError()
    return [stack_name_from(s) for s in positional]


def _modifiers(capabilities: str | None, role_arn: str | None) -> StackOptions:
    return StackOptions(
        capabilities=parse_capabilities(capabilities),
        role_arn=modifier_value(role_arn) if role_arn else None,
    )


class Runtime:
    """Collaborators shared by a command, built on first use."""

    def __init__(self, region: str | None, poll_interval: float):
        self.region = region
        self.poll_interval = poll_interval

    @cached_property
    def client(self) -> CloudFormationClient:
        return CloudFormationClient(region=self.region)

    @cached_property
    def tailer(self) -> EventTailer:
        return EventTailer(self.client, poll_interval=self.poll_interval, on_event=_print_event)

    @cached_property
    def lifecycle(self) -> StackLifecycle:
        return StackLifecycle(self.client, self.tailer)


modifier_options = [
    click.option(
        "--capabilities",
        default=None,
        help="Capabilities to acknowledge, comma separated (e.g. CAPABILITY_NAMED_IAM).",
    ),
    click.option("--role-arn", default=None, help="IAM role CloudFormation assumes."),
]


def with_modifiers(func):
    for option in reversed(modifier_options):
        func = option(func)
    return func


@click.group()
@click.option("--region", envvar="STACKCTL_REGION", default=None, help="AWS region.")
@click.option(
    "--poll-interval",
    envvar="STACKCTL_POLL_INTERVAL",
    type=click.FloatRange(min=0),
    default=1.0,
    show_default=True,
    help="Seconds between event polls while tailing.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log API calls and decisions.")
@click.pass_context
def main(ctx, region, poll_interval, verbose):
    """Create, update, delete, diff and tail CloudFormation stacks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Runtime(region=region, poll_interval=poll_interval)


@main.command()
@click.argument("args", nargs=-1)
@with_modifiers
@click.pass_obj
def create(runtime, args, capabilities, role_arn):
    """Create STACK from STACK.json (or its base template) and tail it."""
    with _reporting("create"):
        context, options = _resolve(args, _modifiers(capabilities, role_arn))
        logger.debug("Modifiers: %s", " ".join(options.as_cli_args()))
        event = runtime.lifecycle.create(context, options)
    _finish([event])


@main.command()
@click.argument("args", nargs=-1)
@with_modifiers
@click.pass_obj
def update(runtime, args, capabilities, role_arn):
    """Update STACK from its template and parameters and tail it."""
    with _reporting("update"):
        context, options = _resolve(args, _modifiers(capabilities, role_arn))
        event = runtime.lifecycle.update(context, options)
        if event is None:
            click.echo(f"No updates to perform on {context.name}.")
    _finish([event])


@main.command()
@click.argument("stacks", nargs=-1)
@click.pass_obj
def delete(runtime, stacks):
    """Delete each STACK in turn and tail it."""
    events = []
    with _reporting("delete"):
        for name in _stack_names(stacks):
            events.append(runtime.lifecycle.delete(name))
    _finish(events)


@main.command()
@click.argument("args", nargs=-1)
@with_modifiers
@click.pass_obj
def recreate(runtime, args, capabilities, role_arn):
    """Delete STACK and create it again from its deployed template and parameters."""
    with _reporting("recreate"):
        options, positional = split_modifiers(args, _modifiers(capabilities, role_arn))
        if not positional:
            raise MissingStackError()
        if len(positional) > 1:
            raise UnexpectedArgumentsError(positional[1:])
        event = runtime.lifecycle.recreate(stack_name_from(positional[0]), options)
    _finish([event])


@main.command()
@click.argument("stacks", nargs=-1)
@click.pass_obj
def tail(runtime, stacks):
    """Tail the events of each STACK until its current operation finishes."""
    events = []
    with _reporting("tail"):
        for name in _stack_names(stacks):
            events.append(runtime.tailer.tail(name))
    _finish(events)


@main.command()
@click.argument("args", nargs=-1)
@click.pass_obj
def diff(runtime, args):
    """Diff the deployed template and parameters of STACK against local files."""
    with _reporting("diff"):
        context, _ = _resolve(args, StackOptions())
        results = StackDiffer(runtime.client).diff(context)
        for result in results:
            click.echo(format_diff(result, context.name))


@main.command()
@click.argument("stacks", nargs=-1)
@click.pass_obj
def show(runtime, stacks):
    """Show status, parameters, tags and outputs of each STACK."""
    with _reporting("show"):
        for name in _stack_names(stacks):
            click.echo(format_stack(runtime.client.describe_stack(name)))


@main.command()
@click.argument("stacks", nargs=-1)
@click.pass_obj
def resources(runtime, stacks):
    """List the physical resources of each STACK."""
    with _reporting("resources"):
        for name in _stack_names(stacks):
            click.echo(format_resources(runtime.client.list_resources(name)))


@main.command()
@click.argument("stacks", nargs=-1)
@click.pass_obj
def events(runtime, stacks):
    """Print the full event history of each STACK without tailing."""
    with _reporting("events"):
        for name in _stack_names(stacks):
            click.echo(format_events(runtime.client.list_events(name)))


@main.command()
@click.pass_obj
def exports(runtime):
    """List the exported outputs in the region."""
    with _reporting("exports"):
        click.echo(format_exports(runtime.client.list_exports()))


@main.command("stacks")
@click.pass_obj
def list_stacks(runtime):
    """List the stacks in the region that have not been deleted."""
    with _reporting("stacks"):
        click.echo(format_stacks(runtime.client.list_stacks()))

"""Command line interface.

Usage examples:
    npma f /var/log/npm/proxy.log
    npma f proxy.log -p status -i '^5' g req --top 10
    cat proxy.log | npma i t
    npma completion zsh
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

import click
from click.shell_completion import get_completion_class
from pydantic import ValidationError

from npma.config import get_settings
from npma.console import print_entries, print_grouped, print_traffic
from npma.errors import NpmaError
from npma.logconfig import configure_logging
from npma.services.aggregation import build_report, total_traffic
from npma.services.filter import Criteria
from npma.services.logparser import LogEntry, LogParameter, LogParser
from npma.services.reader import read_strings_from_file, read_strings_from_stdin

logger = logging.getLogger(__name__)

PROG_NAME = "npma"
COMPLETE_VAR = "_NPMA_COMPLETE"
SHELLS = ["bash", "zsh", "fish"]

EXCLUDE_HELP = "Exclude requests that match this pattern"
INCLUDE_HELP = "Include only requests that match this pattern"

ALIASES = {
    "file": "f",
    "stdin": "i",
    "group": "g",
    "traffic": "t",
}


class AliasedGroup(click.Group):
    """Group that also accepts the long names of its commands."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


class ScanGroup(AliasedGroup):
    """Scan command whose own options may follow its positional arguments.

    Options appearing before the nested command name are moved in front of
    the positionals, so `f PATH -p status g req` parses like
    `f -p status PATH g req`. Everything from the nested command on is left
    untouched.
    """

    def _takes_value(self) -> dict[str, bool]:
        takes_value: dict[str, bool] = {}
        for param in self.params:
            if isinstance(param, click.Option):
                for name in param.opts + param.secondary_opts:
                    takes_value[name] = not param.is_flag and not param.count
        return takes_value

    def reorder_args(self, args: list[str]) -> list[str]:
        takes_value = self._takes_value()
        positional_count = sum(1 for p in self.params if isinstance(p, click.Argument))
        options: list[str] = []
        positionals: list[str] = []
        i = 0
        while i < len(args):
            arg = args[i]
            if arg == "--":
                break
            if arg.startswith("-") and len(arg) > 1:
                options.append(arg)
                if takes_value.get(arg) and i + 1 < len(args):
                    i += 1
                    options.append(args[i])
                i += 1
                continue
            if len(positionals) >= positional_count:
                break
            positionals.append(arg)
            i += 1
        return options + positionals + args[i:]

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        return super().parse_args(ctx, self.reorder_args(args))


@dataclass
class ScanConfiguration:
    criteria: Criteria
    parameter: LogParameter | None


@dataclass
class ScanResult:
    entries: list[LogEntry] = field(default_factory=list)


def _to_parameter(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> LogParameter | None:
    return LogParameter.from_token(value) if value is not None else None


PARAMETER_CHOICE = click.Choice(LogParameter.tokens())


def configure_scan(
    include: str | None, exclude: str | None, parameter: LogParameter | None
) -> ScanConfiguration:
    """Create scan configuration from parsed command line."""
    if parameter is None and (include is not None or exclude is not None):
        raise click.UsageError("--include and --exclude require --parameter")
    return ScanConfiguration(Criteria(include, exclude), parameter)


def scan_options(func):
    func = click.option(
        "-p",
        "--parameter",
        type=PARAMETER_CHOICE,
        callback=_to_parameter,
        help="Filter parameter",
    )(func)
    func = click.option("-i", "--include", metavar="PATTERN", help=INCLUDE_HELP)(func)
    func = click.option("-e", "--exclude", metavar="PATTERN", help=EXCLUDE_HELP)(func)
    return func


def _finish_scan(ctx: click.Context, entries: list[LogEntry]) -> None:
    ctx.obj = ScanResult(entries)
    if ctx.invoked_subcommand is None:
        print_entries(entries)


async def _scan_file(path: Path, config: ScanConfiguration) -> list[LogEntry]:
    settings = get_settings().scan
    lines = await read_strings_from_file(path, settings.encoding)
    parser = LogParser(sentinel=settings.sentinel)
    return await parser.convert(lines, config.criteria, config.parameter)


async def _scan_stdin(config: ScanConfiguration) -> list[LogEntry]:
    parser = LogParser(sentinel=get_settings().scan.sentinel)
    return await parser.convert(read_strings_from_stdin(), config.criteria, config.parameter)


@click.group(cls=AliasedGroup, name=PROG_NAME, no_args_is_help=True)
@click.version_option(package_name="npma", prog_name=PROG_NAME)
def cli() -> None:
    """Nginx proxy manager access log analyzer."""
    try:
        settings = get_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    configure_logging(settings.log)


@cli.group("f", cls=ScanGroup, invoke_without_command=True)
@click.argument("path", type=click.Path(path_type=Path))
@scan_options
@click.pass_context
def scan_file(
    ctx: click.Context,
    path: Path,
    include: str | None,
    exclude: str | None,
    parameter: LogParameter | None,
) -> None:
    """Analyse file specified (alias: file)."""
    config = configure_scan(include, exclude, parameter)
    try:
        entries = asyncio.run(_scan_file(path, config))
    except NpmaError as e:
        logger.debug("Scan of %s failed", path, exc_info=True)
        raise click.ClickException(str(e)) from e
    _finish_scan(ctx, entries)


@cli.group("i", cls=ScanGroup, invoke_without_command=True)
@scan_options
@click.pass_context
def scan_stdin(
    ctx: click.Context,
    include: str | None,
    exclude: str | None,
    parameter: LogParameter | None,
) -> None:
    """Analyse data from standard input (alias: stdin)."""
    config = configure_scan(include, exclude, parameter)
    entries = asyncio.run(_scan_stdin(config))
    _finish_scan(ctx, entries)


@click.command("g")
@click.argument("parameter", type=PARAMETER_CHOICE, callback=_to_parameter)
@click.option(
    "-t",
    "--top",
    type=click.IntRange(min=1),
    default=None,
    help="Output only specified number of grouped items",
)
@click.pass_obj
def group_cmd(result: ScanResult, parameter: LogParameter, top: int | None) -> None:
    """Groups log entries using parameter specified (alias: group).

    After grouping the number of each group items will be displayed.
    """
    limit = top if top is not None else get_settings().scan.default_top
    print_grouped(build_report(result.entries, parameter, limit))


@click.command("t")
@click.pass_obj
def traffic_cmd(result: ScanResult) -> None:
    """Sums all log entries length to calculate all data size passed through proxy (alias: traffic)."""
    print_traffic(total_traffic(result.entries))


for _group in (scan_file, scan_stdin):
    _group.add_command(group_cmd)
    _group.add_command(traffic_cmd)


@cli.command("completion")
@click.argument("shell", type=click.Choice(SHELLS))
def completion(shell: str) -> None:
    """Generate the autocompletion script for the specified shell."""
    comp_cls = get_completion_class(shell)
    if comp_cls is None:
        raise click.ClickException(f"Unsupported shell: {shell}")
    comp = comp_cls(cli, {}, PROG_NAME, COMPLETE_VAR)
    click.echo(comp.source())


def main() -> None:
    cli(prog_name=PROG_NAME)

import sys

import click

from logfacet import __version__
from logfacet.config import LoggingConfig
from logfacet.constants import FAULT_MAPPING, TOOL_USAGE, TOOL_VERSION
from logfacet.levels import Severity, parse_level
from logfacet.logger import LoggerConfigError, LoggerFactory
from logfacet.template import translate

CONTEXT_SETTINGS = dict(auto_envvar_prefix="LOGFACET")

LEVEL_CHOICES = [name.lower() for name in Severity.__members__]


def elog(msg: str, new_line=True, *args):
    """Logs a message to stderr."""
    if args:
        msg %= args
    click.echo(msg, file=sys.stderr, nl=new_line)


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(version=__version__, message=TOOL_VERSION)
@click.pass_context
def cli(context: click.Context, *args, **kwargs):
    """logfacet - leveled, formattable logging"""
    if context.invoked_subcommand is None:
        click.echo(TOOL_VERSION)
        click.echo(TOOL_USAGE)


@cli.command(name="compile")
@click.argument("template")
def compile_command(template: str):
    """Show the render template and time layout a placeholder TEMPLATE compiles to"""
    compiled = translate(template)
    click.echo(f"render: {compiled.render}")
    click.echo(f"time layout: {compiled.time_layout}")


@cli.command()
@click.option("-c", "--config", type=click.Path(dir_okay=False), metavar="", help="YAML configuration file.")
@click.option("-l", "--level", type=click.Choice(LEVEL_CHOICES, case_sensitive=False), default="info",
              show_default=True, metavar="", help="Severity of the message.")
@click.option("--threshold", type=click.Choice(LEVEL_CHOICES, case_sensitive=False), metavar="",
              help="Most verbose level to emit (overrides config).")
@click.option("-f", "--format", "template", metavar="", help="Placeholder template, e.g. '%{lvl} %{message}'.")
@click.option("-m", "--module", metavar="", help="Module name shown by %{module}.")
@click.option("--color/--no-color", default=None, help="Colorize output by severity.")
@click.option("--prefix", metavar="", help="Text put in front of every line.")
@click.argument("message", nargs=-1, required=True)
def emit(config, level, threshold, template, module, color, prefix, message):
    """Emit MESSAGE through the configured logger"""
    overrides = dict(level=threshold, format=template, module=module, prefix=prefix)
    if color is not None:
        overrides["color"] = int(color)
    try:
        LoggingConfig.setup_logging(config_path=config, **overrides)
        logger = LoggerFactory.default()
    except LoggerConfigError as e:
        elog(FAULT_MAPPING["invalid_config"].format(error=e.reason))
        sys.exit(1)
    except OSError as e:
        elog(FAULT_MAPPING["file_open_issue"].format(file_path=e.filename, error=e.strerror))
        sys.exit(1)

    error = logger.log(2, parse_level(level), *message)
    if error is not None:
        sys.exit(1)


if __name__ == "__main__":
    cli()

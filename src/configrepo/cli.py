# ABOUTME: Command-line interface for inspecting and bootstrapping config files
# ABOUTME: Provides path, status, skeleton, and show commands over a ConfigRepository
"""configrepo command-line interface"""

import importlib
import logging
import os
import sys
from typing import Any

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from configrepo.exceptions import ConfigRepoError, HelpRequested, InvalidConfigModelError
from configrepo.logging_config import setup_logging
from configrepo.models import check_model, dump_model
from configrepo.repository import ConfigRepository, create_repository, with_args, with_file_path

logger = logging.getLogger(__name__)

PROG_NAME = "configrepo"

flag_args_argument = click.argument("flag_args", nargs=-1, type=click.UNPROCESSED)


def _fail(message: str) -> None:
    Console(stderr=True).print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    sys.exit(1)


def _instantiate_model(reference: str) -> Any:
    """Import "package.module:ClassName" and build an instance with no arguments."""
    module_name, sep, class_name = reference.partition(":")
    if not sep or not module_name or not class_name:
        raise click.BadParameter("expected the form package.module:ClassName", param_hint="MODEL")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="MODEL")

    model_class = getattr(module, class_name, None)
    if model_class is None:
        raise click.BadParameter(f"{module_name} has no attribute {class_name}", param_hint="MODEL")

    try:
        model = model_class()
        check_model(model)
    except InvalidConfigModelError as e:
        raise click.BadParameter(str(e), param_hint="MODEL")
    except Exception as e:
        raise click.BadParameter(f"cannot instantiate {reference}: {e}", param_hint="MODEL")
    return model


@click.pass_context
def _repository(ctx, flag_args: tuple[str, ...]) -> ConfigRepository:
    options = [with_args([PROG_NAME, *flag_args])]
    if ctx.obj.get("file_path"):
        options.append(with_file_path(ctx.obj["file_path"]))

    try:
        return create_repository(*options)
    except HelpRequested:
        sys.exit(0)
    except ConfigRepoError as e:
        _fail(str(e))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--path", "file_path", default=None, help="Explicit config file path (skips derivation)")
@click.pass_context
def cli(ctx, debug, file_path):
    """configrepo - flag-resolved JSON config files

    Flags for path resolution go after "--", for example:

        configrepo path -- -configDir cfg/ -environment test
    """
    load_dotenv()

    ctx.ensure_object(dict)
    ctx.obj["file_path"] = file_path

    log_level = "DEBUG" if debug else os.environ.get("CONFIGREPO_LOG_LEVEL", "INFO")
    setup_logging(log_level)


@cli.command()
@flag_args_argument
def path(flag_args):
    """Print the resolved config file path."""
    repo = _repository(flag_args)
    console = Console()
    if repo.file_path:
        console.print(escape(repo.file_path), soft_wrap=True)
    else:
        console.print("[yellow](no path resolved)[/yellow]")


@cli.command()
@click.argument("model")
@flag_args_argument
def status(model, flag_args):
    """Report whether the config file for MODEL is missing or empty."""
    instance = _instantiate_model(model)
    repo = _repository(flag_args)

    try:
        empty = repo.is_empty(instance)
    except (ConfigRepoError, OSError) as e:
        _fail(str(e))

    console = Console()
    console.print(f"Path: {escape(repo.file_path)}", soft_wrap=True)
    if empty:
        console.print("Status: [yellow]empty[/yellow]")
    else:
        console.print("Status: [green]present[/green]")


@cli.command()
@click.argument("model")
@flag_args_argument
def skeleton(model, flag_args):
    """Write a skeleton config file with MODEL's default values."""
    instance = _instantiate_model(model)
    repo = _repository(flag_args)

    try:
        repo.write_skeleton(instance)
    except (ConfigRepoError, OSError, ValueError, TypeError) as e:
        _fail(str(e))

    Console().print(f"[green]✓[/green] Wrote skeleton to {escape(repo.file_path)}", soft_wrap=True)


@cli.command()
@click.argument("model")
@flag_args_argument
def show(model, flag_args):
    """Load the config file into MODEL and print the result as JSON."""
    instance = _instantiate_model(model)
    repo = _repository(flag_args)

    try:
        repo.load(instance)
    except (ConfigRepoError, OSError, ValueError) as e:
        _fail(str(e))

    Console().print_json(data=dump_model(instance))


if __name__ == "__main__":
    cli()

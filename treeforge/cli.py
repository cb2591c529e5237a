# treeforge/cli.py
import json
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger

from .services.logging import setup_logging
from .config.loader import get_config
from .core.action_parser import parse_actions
from .core.id_strategies import get_available_strategies, get_id_strategy
from .core.models import ActionStatus, Entry
from .core.rendering import render_tree
from .core.serialization import action_to_dict, dump_tree, load_tree
from .core.step_processor import process_actions, sync_content
from .core.token_counter import tree_token_total
from . import __version__

app = typer.Typer(help="TreeForge CLI - Materialize generator build actions into a virtual file tree.")

def version_callback(value: bool):
    if value:
        print(f"TreeForge CLI Version: {__version__}")
        raise typer.Exit()

@app.callback()
def main_options(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True, help="Show version and exit."),
):
    """ Main callback to set up logging """
    log_level = "DEBUG" if verbose else "INFO"
    setup_logging(level=log_level, verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {path}: {e}")
        raise typer.Exit(code=1)

def _read_tree(path: Optional[Path]) -> List[Entry]:
    if path is None or not path.exists():
        if path is not None:
            logger.info(f"Tree file {path} not found, starting from an empty tree.")
        return []
    try:
        return load_tree(_read_text(path))
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Invalid tree JSON in {path}: {e}")
        raise typer.Exit(code=1)


@app.command()
def parse(
    artifact: Path = typer.Argument(..., help="File holding the generator's artifact text.", exists=True, dir_okay=False, readable=True),
    as_json: bool = typer.Option(False, "--json", help="Print actions as JSON."),
):
    """Lists the actions parsed from an artifact."""
    config = get_config()
    actions = parse_actions(_read_text(artifact), config.artifact_tag, config.action_tag)

    if as_json:
        typer.echo(json.dumps([action_to_dict(action) for action in actions], indent=config.indent))
        return
    for action in actions:
        path_note = f" [{action.path}]" if action.path else ""
        typer.echo(f"{action.id:>3} {action.kind.value:<13} {action.title}{path_note}")


@app.command()
def build(
    artifact: Path = typer.Argument(..., help="File holding the generator's artifact text.", exists=True, dir_okay=False, readable=True),
    tree: Optional[Path] = typer.Option(None, "--tree", "-t", help="Existing tree JSON to build on (missing file = empty tree).", dir_okay=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Where to write the resulting tree JSON (default: stdout).", dir_okay=False),
    sync: Optional[bool] = typer.Option(None, "--sync/--no-sync", help="Copy action code into existing files (default from config)."),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s", help="Id strategy name (default from config)."),
    show: bool = typer.Option(False, "--show", help="Print the resulting tree instead of its JSON when no output file is given."),
):
    """
    Parses an artifact and applies its create actions to a tree.
    """
    config = get_config()
    strategy_name = strategy or config.id_strategy
    try:
        id_strategy = get_id_strategy(strategy_name)
    except KeyError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

    actions = parse_actions(_read_text(artifact), config.artifact_tag, config.action_tag)
    current_tree = _read_tree(tree)
    logger.info(f"Applying {len(actions)} actions to a tree of {len(current_tree)} top-level entries.")

    result = process_actions(actions, current_tree, id_strategy)
    new_tree = result.updated_tree
    do_sync = config.sync_content if sync is None else sync
    if do_sync:
        new_tree = sync_content(result.updated_actions, new_tree)

    completed = sum(1 for a in result.updated_actions if a.status == ActionStatus.COMPLETED)
    pending = len(result.updated_actions) - completed

    if output is not None:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(dump_tree(new_tree, indent=config.indent), encoding="utf-8")
        except OSError as e:
            logger.exception(f"Error writing output file: {e}")
            raise typer.Exit(code=1)
        logger.success(f"Tree written to: {output}")
    elif show:
        typer.echo(render_tree(new_tree, show_tokens=config.show_tokens, encoding_name=config.token_encoding))
    else:
        typer.echo(dump_tree(new_tree, indent=config.indent))

    typer.echo(f"{completed} completed, {pending} pending.", err=True)
    if config.show_tokens:
        typer.echo(f"Total content tokens: {tree_token_total(new_tree, config.token_encoding)}", err=True)


@app.command()
def show(
    tree: Path = typer.Argument(..., help="Tree JSON file.", exists=True, dir_okay=False, readable=True),
    tokens: bool = typer.Option(False, "--tokens", help="Show per-file token counts."),
):
    """Renders a stored tree."""
    config = get_config()
    entries = _read_tree(tree)
    show_tokens = tokens or config.show_tokens
    typer.echo(render_tree(entries, show_tokens=show_tokens, encoding_name=config.token_encoding))
    if show_tokens:
        typer.echo(f"Total: {tree_token_total(entries, config.token_encoding)} tokens")


@app.command()
def strategies():
    """Lists registered id strategies."""
    default = get_config().id_strategy
    for strategy_class in get_available_strategies():
        marker = " (default)" if strategy_class.name == default else ""
        typer.echo(f"{strategy_class.name}{marker}")


if __name__ == "__main__":
    app()

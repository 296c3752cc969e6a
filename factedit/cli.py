"""
CLI interface for editing facts.

Usage:
    factedit add -f Front=Paris -f Back=France -t "geography"
    factedit show <id>
    factedit edit <id> -f Front=paris -T geography -n capitals
    factedit list
    factedit tags
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .config import EditorConfig, load_or_create_config
from .decision import EditOutcome, outcome
from .errors import FactEditError, FactNotFoundError, ReadOnlySessionError, log_exception
from .fact_store import FactStore
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .session import FactEditSession
from .tags import TagUniverse
from .types import Fact


# Set FACTEDIT_VERBOSE=1 to enable debug mode via environment
if os.environ.get("FACTEDIT_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_store_override: Optional[Path] = None
_ops_handler: Optional[logging.Handler] = None


def _store_callback(value: Optional[Path]):
    global _store_override
    _store_override = value


app = typer.Typer(
    name="factedit",
    help="Edit the fields and tags of stored facts.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    store: Annotated[Optional[Path], typer.Option(
        "--store", "-s",
        envvar="FACTEDIT_STORE_PATH",
        help="Store directory (default: ~/.factedit)",
        callback=_store_callback,
    )] = None,
):
    """Edit the fields and tags of stored facts."""


def _open_store() -> tuple[EditorConfig, FactStore]:
    global _ops_handler
    try:
        config = load_or_create_config(_store_override)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if _ops_handler is not None:
        logging.getLogger("factedit").removeHandler(_ops_handler)
        _ops_handler.close()
    _ops_handler = configure_ops_log(config.path)
    return config, FactStore(config.store_path)


def _get_fact(store: FactStore, id: str) -> Fact:
    fact = store.get(id)
    if fact is None:
        typer.echo(f"Error: {FactNotFoundError(id)}", err=True)
        raise typer.Exit(1)
    return fact


def _parse_field_assignments(values: Optional[list[str]]) -> list[tuple[str, str]]:
    """Parse NAME=VALUE options, keeping order. Values may be empty."""
    pairs = []
    for item in values or []:
        if "=" not in item:
            typer.echo(f"Error: Invalid field format '{item}'. Use NAME=VALUE", err=True)
            raise typer.Exit(1)
        name, value = item.split("=", 1)
        pairs.append((name.strip(), value))
    return pairs


def _fact_to_dict(fact: Fact) -> dict:
    return {
        "id": fact.id,
        "fields": {f.name: f.value for f in fact.fields},
        "tags": fact.tags,
    }


def render_fact(fact: Fact, as_json: bool = False) -> str:
    """Render a fact for display."""
    if as_json:
        return json.dumps(_fact_to_dict(fact), ensure_ascii=False, indent=2)
    width = max((len(f.name) for f in fact.fields), default=0)
    lines = [f"id: {fact.id}"]
    for f in fact.fields:
        lines.append(f"{f.name.ljust(width)}: {f.value}")
    lines.append(f"tags: {fact.tags}")
    return "\n".join(lines)


@app.command()
def add(
    field: Annotated[Optional[list[str]], typer.Option(
        "--field", "-f",
        help="Field as NAME=VALUE (repeatable, in display order)"
    )] = None,
    tags: Annotated[str, typer.Option(
        "--tags", "-t",
        help="Tag string, e.g. \"math, history\""
    )] = "",
    id: Annotated[Optional[str], typer.Option(
        "--id",
        help="Custom fact identifier"
    )] = None,
):
    """Add a fact."""
    pairs = _parse_field_assignments(field)
    if not pairs:
        typer.echo("Error: A fact needs at least one --field", err=True)
        raise typer.Exit(1)
    _, store = _open_store()
    try:
        fact = store.add(pairs, tags=tags, id=id)
    except Exception as e:
        log_path = log_exception(e, "factedit add")
        typer.echo(f"Error: {e} (details: {log_path})", err=True)
        raise typer.Exit(1)
    finally:
        store.close()
    typer.echo(fact.id)


@app.command()
def show(
    id: Annotated[str, typer.Argument(help="Fact identifier")],
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON"
    )] = False,
):
    """Show a fact's fields and tags."""
    _, store = _open_store()
    try:
        fact = _get_fact(store, id)
    finally:
        store.close()
    typer.echo(render_fact(fact, as_json=output_json))


@app.command("tags")
def list_tags(
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON"
    )] = False,
):
    """List every tag known to the store."""
    _, store = _open_store()
    try:
        tags = store.all_tags()
    finally:
        store.close()
    if output_json:
        typer.echo(json.dumps(tags, ensure_ascii=False))
    else:
        for tag in tags:
            typer.echo(tag)


@app.command("list")
def list_facts(
    limit: Annotated[Optional[int], typer.Option(
        "--limit", "-l",
        help="Maximum number of facts to list"
    )] = None,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON"
    )] = False,
):
    """List facts, most recently updated first."""
    _, store = _open_store()
    try:
        facts = [store.get(fact_id) for fact_id in store.list_ids(limit=limit)]
    finally:
        store.close()
    facts = [f for f in facts if f is not None]
    if output_json:
        typer.echo(json.dumps([_fact_to_dict(f) for f in facts], ensure_ascii=False))
        return
    for fact in facts:
        first = fact.fields[0].value if fact.fields else ""
        typer.echo(f"{fact.id}  {first}  [{fact.tags}]")


@app.command()
def delete(
    id: Annotated[str, typer.Argument(help="Fact identifier")],
):
    """Delete a fact."""
    _, store = _open_store()
    try:
        deleted = store.delete(id)
    finally:
        store.close()
    if not deleted:
        typer.echo(f"Error: {FactNotFoundError(id)}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Deleted {id}")


@app.command()
def edit(
    id: Annotated[str, typer.Argument(help="Fact identifier")],
    field: Annotated[Optional[list[str]], typer.Option(
        "--field", "-f",
        help="New field value as NAME=VALUE (repeatable)"
    )] = None,
    toggle: Annotated[Optional[list[str]], typer.Option(
        "--toggle", "-T",
        help="Select or deselect a known tag (repeatable)"
    )] = None,
    new_tag: Annotated[Optional[list[str]], typer.Option(
        "--new-tag", "-n",
        help="Create a tag and attach it (repeatable)"
    )] = None,
    tags: Annotated[Optional[str], typer.Option(
        "--tags", "-t",
        help="Replace the tag string verbatim"
    )] = None,
):
    """
    Edit a fact's fields and tags.

    Prints "modified" and saves when something changed, otherwise prints
    "unchanged" and writes nothing.
    """
    assignments = _parse_field_assignments(field)
    config, store = _open_store()
    try:
        fact = _get_fact(store, id)
        session = FactEditSession(
            fact,
            TagUniverse(config.new_tag_label),
            read_only=config.fix_arabic,
        )

        for name, value in assignments:
            try:
                session.set_field(name, value)
            except KeyError:
                typer.echo(f"Error: Fact {id} has no field '{name}'", err=True)
                raise typer.Exit(1)

        if tags is not None:
            session.set_tags(tags)

        if toggle or new_tag:
            selection = session.open_tags(store.all_tags())
            for tag in toggle or []:
                index = selection.index_of(tag)
                if index is None:
                    typer.echo(f"Error: Unknown tag '{tag}'. Use --new-tag to create it", err=True)
                    raise typer.Exit(1)
                session.toggle_tag(index)
            for tag in new_tag or []:
                if not session.add_new_tag(tag):
                    typer.echo(f"Error: Invalid tag '{tag}'", err=True)
                    raise typer.Exit(1)
            session.confirm_tags()

        try:
            modified = session.commit()
        except ReadOnlySessionError as e:
            session.discard()
            if assignments or toggle or new_tag or tags is not None:
                typer.echo(f"Error: {e} (fix_arabic is enabled)", err=True)
                raise typer.Exit(1)
            modified = False

        if outcome(modified) is EditOutcome.COMMIT:
            store.save(fact)
            typer.echo("modified")
        else:
            typer.echo("unchanged")
    except FactEditError as e:
        log_path = log_exception(e, "factedit edit")
        typer.echo(f"Error: {e} (details: {log_path})", err=True)
        raise typer.Exit(1)
    finally:
        store.close()


def main():
    app()


if __name__ == "__main__":
    main()

import logging
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from jargon.glossary.handle import GlossaryHandle
from jargon.glossary.resolver import AmbiguousNamespaceError, LookupOutcome, lookup
from jargon.glossary.store import JargonError
from jargon.rules.config import Config, deep_merge, load_config, load_defaults
from jargon.rules.glossary import compile_glossary, load_glossary
from jargon.rules.known import record_known_term
from jargon.scanner import scan_document

app = typer.Typer(
    name="jargon",
    help="jargon - explain domain jargon found in your documents",
    add_completion=False,
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage configuration")
known_app = typer.Typer(help="Manage terms you already know")
glossary_app = typer.Typer(help="Inspect the glossary")
app.add_typer(config_app, name="config")
app.add_typer(known_app, name="known")
app.add_typer(glossary_app, name="glossary")

console = Console()

CONFIG_DIR = Path.home() / ".jargon"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

ROOTS_HELP = "Directory holding .jargon.yml / .jargon.known.yml (repeatable, default: current directory)"


def ensure_config_dir():
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def _roots(roots: Optional[List[Path]]) -> List[Path]:
    return list(roots) if roots else [Path.cwd()]


def _load_handle(roots: List[Path], config: Config) -> GlossaryHandle:
    try:
        return GlossaryHandle(load_glossary(roots, config))
    except JargonError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show log output"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def scan(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Files to scan"),
    roots: Optional[List[Path]] = typer.Option(None, "-r", "--root", help=ROOTS_HELP),
):
    """
    Annotate the jargon terms found in FILES.
    """
    config = load_config()
    handle = _load_handle(_roots(roots), config)

    total = 0
    for file in files:
        text = file.read_text(encoding="utf-8")
        try:
            result = scan_document(text, str(file.resolve()), handle, config)
        except AmbiguousNamespaceError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)

        if not result.annotations:
            console.print(f"[dim]{file}: no jargon found[/dim]")
            continue

        table = Table(title=str(file))
        table.add_column("Line:Col", style="dim")
        table.add_column("Term", style="cyan")
        table.add_column("Namespace", style="magenta")
        table.add_column("Explanation")
        for ann in result.annotations:
            table.add_row(
                f"{ann.start_position.line + 1}:{ann.start_position.character + 1}",
                text[ann.start : ann.end],
                ann.namespace,
                escape(ann.message) or "-",
            )
        console.print(table)
        total += len(result.annotations)

    console.print(f"[green]{total} jargon term(s) found in {len(files)} file(s)[/green]")


@app.command("lookup")
def lookup_word(
    word: str = typer.Argument(..., help="Word to look up"),
    path: str = typer.Option("", "--path", "-p", help="Document path used to pick the namespace"),
    roots: Optional[List[Path]] = typer.Option(None, "-r", "--root", help=ROOTS_HELP),
):
    """
    Look up a single word as if it appeared in the document at PATH.
    """
    config = load_config()
    handle = _load_handle(_roots(roots), config)

    try:
        outcome, term, ns = lookup(handle.store, word, path)
    except AmbiguousNamespaceError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    if outcome is LookupOutcome.NOT_FOUND:
        console.print(f"[yellow]'{word}' is not in namespace '{ns.name}'[/yellow]")
        raise typer.Exit(code=1)
    if outcome is LookupOutcome.SUPPRESSED:
        console.print(f"[dim]'{term.name}' is marked as known in '{ns.name}'[/dim]")
        return

    body = []
    if term.aka:
        body.append(f"Also known as: [cyan]{', '.join(term.aka)}[/cyan]")
    if term.description is not None:
        body.append(escape(term.description))
    console.print(
        Panel.fit(
            "\n\n".join(body) or "[dim]No description[/dim]",
            title=f"{escape(term.name)} ({escape(ns.name)})",
        )
    )


@known_app.command("add")
def known_add(
    namespace: str = typer.Argument(..., help="Namespace the term belongs to"),
    term: str = typer.Argument(..., help="Term to stop annotating"),
    root: Optional[Path] = typer.Option(None, "-r", "--root", help="Directory holding .jargon.known.yml"),
):
    """Mark a term as known so it is no longer annotated."""
    config = load_config()
    root = root or Path.cwd()

    try:
        handle = GlossaryHandle(compile_glossary([root], config))
    except JargonError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)
    if not handle.mark_known(namespace, term):
        console.print(f"[yellow]'{term}' is already known in '{namespace}'[/yellow]")
        return

    known_path = record_known_term(root, namespace, term, config)
    console.print(
        f"[green]Jargon won't underline '{term}' for you anymore in this context.[/green] "
        f"If you change your mind, you can delete it from {known_path}."
    )


@known_app.command("list")
def known_list(
    roots: Optional[List[Path]] = typer.Option(None, "-r", "--root", help=ROOTS_HELP),
):
    """List the terms marked as known."""
    config = load_config()
    handle = _load_handle(_roots(roots), config)

    known = handle.store.known_lists()
    if not known:
        console.print("[dim]No known terms[/dim]")
        return
    for ns_name, names in known.items():
        console.print(f"[magenta]{ns_name}[/magenta]: {', '.join(names)}")


@glossary_app.command("list")
def glossary_list(
    roots: Optional[List[Path]] = typer.Option(None, "-r", "--root", help=ROOTS_HELP),
):
    """Show namespaces and their terms."""
    config = load_config()
    handle = _load_handle(_roots(roots), config)

    table = Table(title="Glossary")
    table.add_column("Namespace", style="magenta")
    table.add_column("Terms", justify="right")
    table.add_column("Known", justify="right")
    table.add_column("Names", style="cyan")
    for ns in handle.store.namespaces:
        if not ns.terms and not ns.known_terms:
            continue
        table.add_row(
            ns.name,
            str(len(ns.terms)),
            str(len(ns.known_terms)),
            ", ".join(t.name for t in ns.terms if not t.is_alias),
        )
    console.print(table)


@config_app.command("show")
def config_show():
    """Show current configuration."""
    config = load_config()
    console.print(config.model_dump())


@config_app.command("set")
def config_set(key: str, value: str):
    """
    Set a configuration value (dot-separated).
    Example: jargon config set scan.severity warning
    """
    ensure_config_dir()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "r") as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    keys = key.split(".")
    current = data
    for k in keys[:-1]:
        if k not in current:
            current[k] = {}
        current = current[k]
        if not isinstance(current, dict):
            console.print(f"[red]Error: {k} is not a dictionary[/red]")
            raise typer.Exit(1)

    # YAML scalar rules give booleans and numbers their type; a field that
    # wants a string gets the raw text instead
    try:
        typed = yaml.safe_load(value)
    except yaml.YAMLError:
        typed = value
    candidates = [value]
    if typed is not None and not isinstance(typed, (dict, list)) and typed != value:
        candidates.insert(0, typed)

    error: Optional[ValidationError] = None
    for val in candidates:
        current[keys[-1]] = val
        try:
            Config(**deep_merge(load_defaults(), data))
        except ValidationError as e:
            error = error or e
            continue
        break
    else:
        console.print(f"[red]Error: invalid value for {key}[/red]")
        for err in error.errors():
            console.print(f"- {escape(err['msg'])}", style="dim")
        raise typer.Exit(1)

    with open(CONFIG_FILE, "w") as f:
        yaml.dump(data, f, sort_keys=False)

    console.print(f"[green]Updated {key} = {escape(str(val))}[/green]")


def main():
    app()


if __name__ == "__main__":
    main()

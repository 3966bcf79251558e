"""Command-line interface for browsing the lexicon."""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import typer
from dotenv import load_dotenv

from composition_root import LexiconContext, bootstrap_lexicon
from config.settings import Settings
from domain.errors import LexiconError

# --- Typer App ---
app = typer.Typer(
    help="Browse the MLS lexicon on a resource API server.",
    add_completion=False,
)

LEMMA_COLUMNS = ("hasLemmaText", "hasStartDate", "hasEndDate")


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, help="Settings file (YAML or JSON)."),
    email: Optional[str] = typer.Option(None, help="Log in with this email before running the command."),
    password: Optional[str] = typer.Option(None, envvar="LEXICON_PASSWORD", help="Password for --email."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    """Load environment and settings shared by all commands."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"config": config, "email": email, "password": password}


def _run(ctx: typer.Context, action: Callable[[LexiconContext], Awaitable[Any]]) -> None:
    """Bootstrap the client, optionally log in, run the action and print JSON."""
    options: Dict[str, Any] = ctx.obj or {}

    async def runner() -> Any:
        settings = Settings.from_env(options.get("config"))
        async with bootstrap_lexicon(settings) as lexicon:
            if options.get("email"):
                result = await lexicon.session.login(options["email"], options.get("password") or "")
                if not result.success:
                    raise LexiconError(f"Login failed: {result.error}")
            return await action(lexicon)

    try:
        output = asyncio.run(runner())
    except LexiconError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(output, indent=2, ensure_ascii=False))


# --- CLI Commands ---


@app.command()
def resource(ctx: typer.Context, iri: str):
    """Show all properties of a resource."""
    async def action(lexicon: LexiconContext):
        return (await lexicon.service.get_resource(iri)).to_dict()
    _run(ctx, action)


@app.command()
def lemma(ctx: typer.Context, iri: str):
    """Show a lemma as a flat property map."""
    async def action(lexicon: LexiconContext):
        view = await lexicon.service.get_lemma(iri)
        data = view.to_dict()
        data["editable"] = lexicon.session.can_edit(view.permission)
        return data
    _run(ctx, action)


@app.command()
def resinfo(
    ctx: typer.Context,
    class_name: str = typer.Argument(..., help="Class IRI, or a local name in the MLS ontology (e.g. Lemma)."),
    ontology: Optional[str] = typer.Option(None, help="Ontology IRI (defaults to the MLS ontology)."),
):
    """Describe the properties of a resource class."""
    async def action(lexicon: LexiconContext):
        onto_iri = ontology or lexicon.settings.mls_ontology.rstrip("#")
        class_iri = class_name if "://" in class_name else lexicon.service.mls(class_name)
        descriptor = await lexicon.service.get_resinfo(onto_iri, class_iri)
        return descriptor.model_dump(mode="json")
    _run(ctx, action)


def _lemma_fields(lexicon: LexiconContext):
    return ["id", "label"] + [lexicon.service.mls(name) for name in LEMMA_COLUMNS]


@app.command()
def lemmata(
    ctx: typer.Context,
    start: str = typer.Option("A", help="First character of the lemma text."),
    page: int = typer.Option(0, help="Result page (25 hits per page)."),
):
    """List lemmata alphabetically."""
    async def action(lexicon: LexiconContext):
        params = {"start": start, "page": str(page)}
        total = await lexicon.service.search_count("lemmata_query", params)
        rows = await lexicon.service.search("lemmata_query", params, _lemma_fields(lexicon))
        return {"total": total, "page": page, "rows": rows}
    _run(ctx, action)


@app.command()
def search(
    ctx: typer.Context,
    term: str,
    lexicon_iri: Optional[str] = typer.Option(None, "--lexicon", help="Restrict to lemmata of one lexicon."),
    page: int = typer.Option(0, help="Result page."),
):
    """Search lemmata by text."""
    async def action(lexicon: LexiconContext):
        params = {"searchterm": term, "page": str(page)}
        if lexicon_iri:
            params["lexicon_iri"] = lexicon_iri
        total = await lexicon.service.search_count("lemmata_search", params)
        rows = await lexicon.service.search("lemmata_search", params, _lemma_fields(lexicon))
        return {"total": total, "page": page, "rows": rows}
    _run(ctx, action)


@app.command()
def node(ctx: typer.Context, iri: str):
    """Show a single list node."""
    async def action(lexicon: LexiconContext):
        return (await lexicon.service.get_list_node(iri)).to_dict()
    _run(ctx, action)


@app.command("list")
def list_(ctx: typer.Context, iri: str):
    """Show a complete list."""
    async def action(lexicon: LexiconContext):
        return (await lexicon.service.get_list(iri)).to_dict()
    _run(ctx, action)


if __name__ == "__main__":
    app()

"""
Commande CLI d'inspection du cache (inspect).

Affiche l'entree stockee pour un chemin de requete ou une cle d'element,
avec son age, sa fraicheur, son format et l'element tel que vu par un client.
"""

import asyncio
import json
from datetime import datetime
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from trakt_proxy.container import Container
from trakt_proxy.core.entities.cache import CacheEntry, utc_now
from trakt_proxy.services.normalizer import normalize
from trakt_proxy.services.router import primary_key

console = Console()


def parse_query(pairs: list[str]) -> dict[str, str]:
    """Convertit des options "cle=valeur" en dictionnaire de query."""
    query: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"format attendu cle=valeur: {pair}")
        query[key] = value
    return query


def resolve_key(target: str, query: dict[str, str]) -> str:
    """Un chemin ("/movies/1") donne une cle primaire, sinon la cible est la cle."""
    if target.startswith("/"):
        return primary_key(target, query)
    return target


def render_entry(entry: CacheEntry, ttl_hours: float, now: datetime) -> Table:
    """Construit le tableau de synthese d'une entree."""
    normalized = normalize(entry.payload)
    age = entry.age_hours(now)

    table = Table(title=entry.key, show_header=False)
    table.add_column("Champ", style="cyan")
    table.add_column("Valeur")
    table.add_row("Cree le", str(entry.created_at) if entry.created_at else "-")
    table.add_row("Mis a jour le", str(entry.updated_at) if entry.updated_at else "-")
    table.add_row("Age", f"{age:.1f} h" if age is not None else "inconnu")
    fresh = entry.is_fresh(now, ttl_hours)
    table.add_row("Etat", "[green]frais[/green]" if fresh else "[red]perime[/red]")
    table.add_row("Format", normalized.shape.value)
    table.add_row("Images", "oui" if normalized.has_images else "non")
    return table


def inspect(
    target: Annotated[
        str,
        typer.Argument(help="Chemin Trakt (/movies/1) ou cle d'element (movie:1)"),
    ],
    query: Annotated[
        Optional[list[str]],
        typer.Option("--query", "-q", help="Parametre de requete cle=valeur (repetable)"),
    ] = None,
) -> None:
    """
    Affiche l'entree de cache d'une requete ou d'un element.

    Exemples:
      trakt-proxy inspect /movies/trending
      trakt-proxy inspect /search/movie -q query=tron
      trakt-proxy inspect movie:12601
    """
    asyncio.run(_inspect_async(target, parse_query(query or [])))


async def _inspect_async(target: str, query: dict[str, str]) -> None:
    """Implementation async de la commande inspect."""
    container = Container()
    settings = container.config()
    store = container.cache_store()

    if not await store.connect():
        console.print("[red]Cache indisponible[/red]")
        raise typer.Exit(code=1)

    try:
        key = resolve_key(target, query)
        entry = await store.peek(key)
    finally:
        await store.close()

    if entry is None:
        console.print(f"[yellow]Aucune entree pour {key}[/yellow]")
        raise typer.Exit(code=1)

    console.print(render_entry(entry, settings.cache_ttl_hours, utc_now()))
    console.print_json(json.dumps(normalize(entry.payload).item, default=str))

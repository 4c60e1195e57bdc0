"""
Point d'entrée CLI de Trakt Proxy.

Configure le logging et fournit les commandes CLI (serveur, inspection du cache).
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.cache_commands import inspect
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="trakt-proxy",
    help="Proxy cache-aside pour l'API Trakt",
)
container = Container()

app.command()(inspect)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration Trakt Proxy")
    typer.echo(f"API Trakt : {config.base_url} (v{config.api_version})")
    typer.echo(f"Clé client : {'configurée' if config.trakt_enabled else 'absente'}")
    typer.echo(f"Cache : {config.cache_backend}")
    if config.cache_backend == "mongo":
        typer.echo(f"Base MongoDB : {config.mongo_database}")
    else:
        typer.echo(f"Répertoire du cache : {config.cache_dir}")
    typer.echo(f"Durée de fraîcheur : {config.cache_ttl_hours:g} h")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Trakt Proxy v{__version__}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur proxy."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    # log_config=None : uvicorn garde les handlers loguru installés par main()
    uvicorn.run(
        "trakt_proxy.web.app:app", host=host, port=port, reload=reload, log_config=None
    )


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.info("Démarrage de Trakt Proxy", version=__version__)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()

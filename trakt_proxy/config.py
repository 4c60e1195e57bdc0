"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe TRAKT_PROXY_,
et peut optionnellement être fournie via un fichier .env.

La clé client Trakt est optionnelle au démarrage, mais toute requête proxy
échoue avec une ConfigurationError tant qu'elle n'est pas définie.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de trakt_proxy/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class ConfigurationError(Exception):
    """Levée quand une requête ne peut pas être servie faute de configuration."""


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe TRAKT_PROXY_.
    Exemple : TRAKT_PROXY_CLIENT_ID=xxxx

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAKT_PROXY_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # API Trakt
    client_id: Optional[str] = Field(default=None)
    base_url: str = Field(default="https://api.trakt.tv")
    api_version: str = Field(default="2")
    upstream_timeout: Optional[float] = Field(default=None, gt=0)
    retry_max_attempts: int = Field(default=3, ge=1)

    # Cache
    cache_backend: Literal["disk", "mongo"] = Field(default="disk")
    cache_dir: Path = Field(default=Path(".cache/trakt"))
    mongo_uri: str = Field(default="mongodb://localhost:27017")
    mongo_database: str = Field(default="trakt_proxy")
    cache_ttl_hours: float = Field(default=24.0, gt=0)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/trakt-proxy.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Supprime les / finaux pour pouvoir concaténer les chemins."""
        return v.rstrip("/")

    @property
    def trakt_enabled(self) -> bool:
        """Vérifie si la clé client Trakt est configurée."""
        return bool(self.client_id)

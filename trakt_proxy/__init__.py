"""
Trakt Proxy - Proxy cache-aside devant l'API de metadonnees Trakt.

Ce package relaie les requetes vers Trakt et conserve les reponses dans
un magasin de documents pour eviter les appels repetes.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports)
- services/ : Couche application (routage, normalisation, enrichissement, orchestration)
- adapters/ : Couche infrastructure (client Trakt, magasins de cache, CLI)
- web/ : Application FastAPI exposant le proxy
"""

__version__ = "0.1.0"

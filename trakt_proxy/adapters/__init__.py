"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Client HTTP vers l'API Trakt (httpx + retry tenacity)
- cache/ : Magasins de cache (diskcache local, MongoDB)
- cli/ : Interface ligne de commande (Typer)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

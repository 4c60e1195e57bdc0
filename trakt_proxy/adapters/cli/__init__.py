"""Commandes CLI de Trakt Proxy."""

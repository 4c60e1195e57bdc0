"""Horloge controlable pour les tests de fraicheur du cache."""

from datetime import datetime, timedelta


class FakeClock:
    """Horloge dont le temps n'avance que sur demande."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)

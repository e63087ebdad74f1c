from __future__ import annotations

from .errors import NameTakenError
from .models import Player, RankedPlayer, Role


def normalize_name(name: str) -> str:
    return name.strip().upper()


class ReconnectionCache:
    """Scores of guessers who dropped mid-game, keyed by normalized name."""

    def __init__(self) -> None:
        self._scores: dict[str, int] = {}

    def save(self, name: str, score: int) -> None:
        self._scores[normalize_name(name)] = score

    def pop(self, name: str) -> int | None:
        return self._scores.pop(normalize_name(name), None)

    def clear(self) -> None:
        self._scores.clear()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._scores

    def __len__(self) -> int:
        return len(self._scores)


class PlayerRegistry:
    """Live players keyed by connection id, in join order."""

    def __init__(self, cache: ReconnectionCache, admin_name: str = "ADMIN") -> None:
        self._cache = cache
        self._admin_key = normalize_name(admin_name)
        self._players: dict[str, Player] = {}

    def is_admin_name(self, name: str) -> bool:
        return normalize_name(name) == self._admin_key

    def is_name_taken(self, name: str, exclude_connection_id: str | None = None) -> bool:
        key = normalize_name(name)
        for cid, p in self._players.items():
            if cid == exclude_connection_id or p.is_admin:
                continue
            if normalize_name(p.name) == key:
                return True
        return False

    def register(self, connection_id: str, raw_name: str) -> Player:
        """Create the player for a connection.

        A guesser whose name is in the reconnection cache starts with the
        saved score and the entry is consumed. Joining again from the same
        connection under the same name keeps the existing record; callers
        retire the old record first when the name changes. Raises
        NameTakenError when a guesser name collides case-insensitively with
        another live guesser.
        """
        name = raw_name.strip()
        role = Role.ADMIN if self.is_admin_name(name) else Role.GUESSER

        existing = self._players.get(connection_id)
        if existing is not None and normalize_name(existing.name) == normalize_name(name):
            return existing

        restored = 0
        if role is Role.GUESSER:
            if self.is_name_taken(name, exclude_connection_id=connection_id):
                raise NameTakenError(name)
            restored = self._cache.pop(name) or 0

        player = Player(connection_id=connection_id, name=name, score=restored, role=role)
        self._players[connection_id] = player
        return player

    def unregister(self, connection_id: str) -> Player | None:
        return self._players.pop(connection_id, None)

    def get(self, connection_id: str) -> Player | None:
        return self._players.get(connection_id)

    def players(self) -> list[Player]:
        return list(self._players.values())

    def guessers(self) -> list[Player]:
        return [p for p in self._players.values() if not p.is_admin]

    def guesser_count(self) -> int:
        return len(self.guessers())

    def ranked_guessers(self) -> list[RankedPlayer]:
        # sorted() is stable, so ties keep join order.
        ordered = sorted(self.guessers(), key=lambda p: p.score, reverse=True)
        return [RankedPlayer(name=p.name, score=p.score, rank=i + 1) for i, p in enumerate(ordered)]

    def reset_scores(self) -> None:
        for p in self._players.values():
            p.score = 0

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._players

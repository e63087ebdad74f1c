from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Phase(str, Enum):
    LOBBY = "lobby"
    PLAYING = "playing"
    FINISHED = "finished"


class Role(str, Enum):
    GUESSER = "guesser"
    ADMIN = "admin"


@dataclass(frozen=True)
class Round:
    word: str
    images: tuple[str, ...]


@dataclass
class Player:
    connection_id: str
    name: str
    score: int = 0
    role: Role = Role.GUESSER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class RankedPlayer:
    name: str
    score: int
    rank: int

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score, "rank": self.rank}


@dataclass(frozen=True)
class CorrectAnswer:
    name: str
    points: int

    def to_dict(self) -> dict:
        return {"name": self.name, "points": self.points}


@dataclass(frozen=True)
class ChatEvent:
    name: str
    text: str
    correct: bool = False
    system: bool = False
    reveal: bool = False
    points: int | None = None

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "text": self.text,
            "correct": self.correct,
            "system": self.system,
            "reveal": self.reveal,
        }
        if self.points is not None:
            d["points"] = self.points
        return d


@dataclass
class GameState:
    phase: Phase = Phase.LOBBY
    current_round: int = -1
    revealed: bool = False
    correct_order: list[CorrectAnswer] = field(default_factory=list)
    chat_log: list[ChatEvent] = field(default_factory=list)

from __future__ import annotations


class GameError(Exception):
    """Base class for errors raised by the game layer."""


class NameTakenError(GameError):
    def __init__(self, name: str) -> None:
        super().__init__(f"name already taken: {name}")
        self.name = name


class InvalidQuestionsError(GameError):
    pass

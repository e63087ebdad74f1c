from __future__ import annotations

from typing import Sequence

from .models import GameState, Phase, Round
from .registry import PlayerRegistry


def admin_button_state(state: GameState) -> dict[str, bool]:
    playing = state.phase is Phase.PLAYING
    return {
        "start": state.phase is Phase.LOBBY,
        "reveal": playing and not state.revealed,
        "next": playing,
        "reset": True,
    }


def public_state(
    state: GameState,
    registry: PlayerRegistry,
    rounds: Sequence[Round],
    timer_seconds: int = 0,
    chat_limit: int = 100,
) -> dict:
    """Build the ``game:state`` payload sent to every client.

    The secret word only appears once revealed; ``wordLength`` is always
    present so clients can draw the hint boxes. ``nextImages`` lists the
    following round's images while a round is being played, for prefetching.
    """
    idx = state.current_round
    question = rounds[idx] if 0 <= idx < len(rounds) else None
    playing = state.phase is Phase.PLAYING

    next_images: list[str] = []
    if playing and 0 <= idx + 1 < len(rounds):
        next_images = list(rounds[idx + 1].images)

    chat = state.chat_log[-chat_limit:] if chat_limit > 0 else []

    return {
        "phase": state.phase.value,
        "currentRound": idx + 1,
        "totalRounds": len(rounds),
        "players": [p.to_dict() for p in registry.ranked_guessers()],
        "images": list(question.images) if question and playing else [],
        "word": None,
        "wordLength": len(question.word) if question else 0,
        "revealedWord": question.word if question and state.revealed else None,
        "chatMessages": [m.to_dict() for m in chat],
        "timer": timer_seconds,
        "revealed": state.revealed,
        "correctOrder": [c.to_dict() for c in state.correct_order],
        "nextImages": next_images,
        "adminBtnState": admin_button_state(state),
    }

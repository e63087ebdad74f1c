from __future__ import annotations

import functools
import logging
from threading import RLock
from typing import Any, Callable

from .errors import NameTakenError
from .models import ChatEvent, CorrectAnswer, GameState, Phase, Player, Round
from .projection import public_state
from .registry import PlayerRegistry, ReconnectionCache, normalize_name
from .timer import RoundTimer


logger = logging.getLogger(__name__)

MASK_CHAR = "✱"

ICON_ANNOUNCE = "\U0001F4E2"
ICON_CORRECT = "✅"
ICON_ROUND = "\U0001F3AE"
ICON_GAME_OVER = "\U0001F3C6"
ICON_REVEAL = "\U0001F4A1"
ICON_TIMEOUT = "⏰"


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def points_for_position(guesser_count: int, position: int) -> int:
    """Points for the ``position``-th (1-based) correct guess of a round."""
    return max(1, guesser_count - position + 1)


def _admin_action(method: Callable[..., bool]) -> Callable[..., bool]:
    """Run ``method`` under the game lock only for admin connections.

    Anything else is ignored and reported as "no change".
    """

    @functools.wraps(method)
    def wrapper(self: "GameService", connection_id: str, *args: Any, **kwargs: Any) -> bool:
        with self._lock:
            player = self.registry.get(connection_id)
            if player is None or not player.is_admin:
                logger.debug("Ignored %s from non-admin %s", method.__name__, connection_id)
                return False
            return method(self, connection_id, *args, **kwargs)

    return wrapper


class GameService:
    """The single authoritative game.

    Every public method takes the game lock for its whole run, so client
    events and timer callbacks never interleave. Mutating methods return True
    when something observable changed and the caller should broadcast.
    """

    def __init__(
        self,
        rounds: list[Round],
        start_background_task: Callable[..., Any],
        sleep: Callable[[float], Any],
        round_duration_sec: int = 60,
        admin_name: str = "ADMIN",
        chat_history_limit: int = 100,
        chat_log_cap: int = 0,
    ) -> None:
        self._lock = RLock()
        self.rounds = list(rounds)
        self.round_duration_sec = max(0, round_duration_sec)
        self.chat_history_limit = chat_history_limit
        self.chat_log_cap = chat_log_cap

        self.state = GameState()
        self.cache = ReconnectionCache()
        self.registry = PlayerRegistry(self.cache, admin_name=admin_name)

        # Transport hooks, wired up by the socket layer.
        self.on_tick: Callable[[int], None] = lambda seconds: None
        self.on_state_change: Callable[[], None] = lambda: None

        self.timer = RoundTimer(
            self._lock,
            on_tick=self._handle_tick,
            on_expire=self._handle_expire,
            start_background_task=start_background_task,
            sleep=sleep,
        )

    # ----- queries -----

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    def current_question(self) -> Round | None:
        idx = self.state.current_round
        if 0 <= idx < len(self.rounds):
            return self.rounds[idx]
        return None

    def snapshot(self) -> dict:
        with self._lock:
            return public_state(
                self.state,
                self.registry,
                self.rounds,
                timer_seconds=self.timer.remaining,
                chat_limit=self.chat_history_limit,
            )

    # ----- helpers -----

    def _push_chat(self, event: ChatEvent) -> None:
        log = self.state.chat_log
        log.append(event)
        if self.chat_log_cap > 0 and len(log) > self.chat_log_cap:
            del log[: len(log) - self.chat_log_cap]

    def _system(self, icon: str, text: str, **flags: Any) -> None:
        self._push_chat(ChatEvent(name=icon, text=text, system=True, **flags))

    def _begin_round(self) -> None:
        self.state.phase = Phase.PLAYING
        self.state.correct_order = []
        self.state.revealed = False
        self._system(ICON_ROUND, f"Round {self.state.current_round + 1} has started! Guess the word!")
        logger.info("Round %d/%d started", self.state.current_round + 1, self.total_rounds)
        self.timer.start(self.round_duration_sec)

    def _do_reveal(self, icon: str, prefix: str) -> bool:
        question = self.current_question()
        if question is None or self.state.revealed:
            return False
        self.state.revealed = True
        self.timer.stop()
        self._system(icon, f"{prefix}{question.word}", reveal=True)
        return True

    def _handle_tick(self, seconds: int) -> None:
        self.on_tick(seconds)

    def _handle_expire(self) -> None:
        if self.expire():
            self.on_state_change()

    # ----- events -----

    def join(self, connection_id: str, raw_name: Any) -> Player | None:
        """Register a connection under a display name.

        Returns None for a blank name. Raises NameTakenError on a collision.
        """
        if not isinstance(raw_name, str) or not raw_name.strip():
            return None

        name = raw_name.strip()
        with self._lock:
            previous = self.registry.get(connection_id)
            if previous is not None:
                if normalize_name(previous.name) == normalize_name(name):
                    return self.registry.register(connection_id, name)
                # Renaming: the old identity leaves like any other departure.
                if not self.registry.is_admin_name(name) and self.registry.is_name_taken(
                    name, exclude_connection_id=connection_id
                ):
                    raise NameTakenError(name)
                self._retire(connection_id)

            player = self.registry.register(connection_id, name)
            if player.is_admin:
                logger.info("Admin joined (%s)", connection_id)
                return player

            suffix = ""
            if player.score > 0:
                suffix = f" (reconnected, {player.score} pts restored!)"
                logger.info("Joined: %s (reconnected, score %d)", player.name, player.score)
            else:
                logger.info("Joined: %s", player.name)
            self._system(ICON_ANNOUNCE, f"{player.name} has joined the game!{suffix}")
            return player

    def chat(self, connection_id: str, text: Any) -> bool:
        if not isinstance(text, str):
            return False
        trimmed = text.strip()
        if not trimmed:
            return False

        with self._lock:
            player = self.registry.get(connection_id)
            if player is None or player.is_admin:
                return False

            state = self.state
            question = self.current_question()
            correct = False
            if (
                state.phase is Phase.PLAYING
                and question is not None
                and not state.revealed
                and all(c.name != player.name for c in state.correct_order)
                and trimmed.upper() == question.word.upper()
            ):
                correct = True
                position = len(state.correct_order) + 1
                points = points_for_position(self.registry.guesser_count(), position)
                player.score += points
                state.correct_order.append(CorrectAnswer(name=player.name, points=points))
                self._system(
                    ICON_CORRECT,
                    f"{player.name} got it correct! (+{points} pts, {ordinal(position)} place)",
                    correct=True,
                    points=points,
                )
                logger.info("%s guessed round %d (+%d)", player.name, state.current_round + 1, points)

            if correct:
                self._push_chat(ChatEvent(name=player.name, text=MASK_CHAR * len(trimmed), correct=True))
            else:
                self._push_chat(ChatEvent(name=player.name, text=trimmed))
            return True

    @_admin_action
    def start(self, connection_id: str) -> bool:
        if self.state.phase is not Phase.LOBBY:
            logger.debug("Ignored start in phase %s", self.state.phase.value)
            return False
        if not self.rounds:
            logger.warning("Cannot start: no rounds loaded")
            return False

        self.state.current_round = 0
        self._begin_round()
        return True

    @_admin_action
    def next_round(self, connection_id: str) -> bool:
        state = self.state
        if state.phase is not Phase.PLAYING:
            logger.debug("Ignored next in phase %s", state.phase.value)
            return False

        self.timer.stop()
        state.current_round += 1
        state.correct_order = []
        state.revealed = False

        if state.current_round >= len(self.rounds):
            state.phase = Phase.FINISHED
            self._system(ICON_GAME_OVER, "Game Over! Final scores are in!")
            logger.info("Game finished")
        else:
            self._begin_round()
        return True

    @_admin_action
    def reveal(self, connection_id: str) -> bool:
        if self.state.revealed:
            logger.debug("Ignored reveal: already revealed")
            return False
        return self._do_reveal(ICON_REVEAL, "The answer was: ")

    @_admin_action
    def reset(self, connection_id: str) -> bool:
        self.timer.stop()
        state = self.state
        state.phase = Phase.LOBBY
        state.current_round = -1
        state.correct_order = []
        state.chat_log = []
        state.revealed = False
        self.registry.reset_scores()
        self.cache.clear()
        logger.info("Game reset")
        return True

    def expire(self) -> bool:
        """Reveal the current round because its timer ran out."""
        with self._lock:
            return self._do_reveal(ICON_TIMEOUT, "Time's up! The answer was: ")

    def disconnect(self, connection_id: str) -> Player | None:
        with self._lock:
            return self._retire(connection_id)

    def _retire(self, connection_id: str) -> Player | None:
        player = self.registry.unregister(connection_id)
        if player is None or player.is_admin:
            return player

        if player.score > 0:
            self.cache.save(player.name, player.score)
        self._system(ICON_ANNOUNCE, f"{player.name} disconnected.")
        return player

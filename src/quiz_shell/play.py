"""Play mode: ask every stored quiz once, in random order.

The session state is an immutable :class:`GameState` value threaded through
the turn loop; every transition produces a new value. A game is won by
answering everything, lost on the first wrong answer.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, replace

from .commands import CommandContext, answers_match, command_pipeline
from .store import Quiz

__all__ = ["Phase", "GameState", "play_cmd"]

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    LOADING = "loading"
    AWAITING_ANSWER = "awaiting_answer"
    WON = "won"
    LOST = "lost"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.WON, Phase.LOST, Phase.FAILED)


@dataclass(frozen=True)
class GameState:
    remaining_ids: frozenset[int] = frozenset()
    score: int = 0
    phase: Phase = Phase.LOADING
    asked: tuple[int, ...] = ()

    def ask(self, quiz_id: int) -> "GameState":
        return replace(
            self,
            remaining_ids=self.remaining_ids - {quiz_id},
            phase=Phase.AWAITING_ANSWER,
            asked=self.asked + (quiz_id,),
        )

    def discard(self, quiz_id: int) -> "GameState":
        return replace(self, remaining_ids=self.remaining_ids - {quiz_id})


async def play_cmd(
    ctx: CommandContext,
    rng: random.Random | None = None,
) -> GameState:
    """Run one game and return its final state.

    Loading or lookup failures end the game in :attr:`Phase.FAILED`. The
    prompt is re-issued exactly once whatever the outcome.
    """

    rng = rng or random.Random()
    state = GameState()
    with command_pipeline(ctx, "play"):
        try:
            quizzes = await ctx.repository.find_all()
            state = replace(
                state, remaining_ids=frozenset(quiz.id for quiz in quizzes)
            )
            logger.info(
                "Game started", extra={"questions": len(state.remaining_ids)}
            )
            while not state.phase.is_terminal:
                state = await _play_turn(ctx, state, rng)
        except Exception:
            state = replace(state, phase=Phase.FAILED)
            raise
        finally:
            logger.info(
                "Game finished",
                extra={"phase": state.phase.value, "score": state.score},
            )
    return state


async def _play_turn(
    ctx: CommandContext, state: GameState, rng: random.Random
) -> GameState:
    if not state.remaining_ids:
        ctx.renderer.log(
            "Congratulations, you answered every question!", "green"
        )
        ctx.renderer.log("Score:")
        ctx.renderer.biglog(state.score, "magenta")
        return replace(state, phase=Phase.WON)

    quiz, state = await _draw(ctx, state, rng)
    if quiz is None:
        return state

    state = state.ask(quiz.id)
    answer = await ctx.prompter.ask(f"{quiz.question}? ")
    if answers_match(answer, quiz.answer):
        state = replace(state, score=state.score + 1)
        ctx.renderer.biglog("CORRECT", "green")
        ctx.renderer.log(f"Score: {state.score}")
        return state

    ctx.renderer.biglog("INCORRECT", "red")
    ctx.renderer.log("Game over. Score:")
    ctx.renderer.biglog(state.score, "red")
    return replace(state, phase=Phase.LOST)


async def _draw(
    ctx: CommandContext, state: GameState, rng: random.Random
) -> tuple[Quiz | None, GameState]:
    """Pick a pending quiz, retrying until one still resolves.

    Ids deleted since the game started are dropped from the pool; if that
    empties it the caller's next turn ends the game.
    """

    while state.remaining_ids:
        candidate = rng.choice(sorted(state.remaining_ids))
        quiz = await ctx.repository.find_by_id(candidate)
        if quiz is not None:
            return quiz, state
        logger.debug("Quiz %s vanished mid-game; redrawing", candidate)
        state = state.discard(candidate)
    return None, state

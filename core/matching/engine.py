"""
Matching Game - Pair State Machine

A round shows a bounded window of vocabulary pairs: phonetic cards on the
left, native cards on the right. The learner selects one card per side; a
selection on both sides is resolved as a match or a mismatch.

Round Logic:
- Up to visible_pairs_target pairs are on the board, the rest wait in a queue
- While the queue is non-empty, a matched pair leaves the board and the
  window is topped up from the queue (newcomers start face-down)
- Once the queue is empty, matched cards stay on the board as a tally
- A mismatch flips both cards to WRONG; a deferred action reverts them
- The round is finished once every pair is matched; a deferred action then
  fires the completion signal

Card states: IDLE -> SELECTED -> (MATCHED | IDLE), IDLE/SELECTED -> WRONG -> IDLE
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from core.config import COMPLETION_DELAY, VISIBLE_PAIRS_TARGET, WRONG_REVERT_DELAY
from core.matching.deferred import DeferredActions, ScheduledAction
from core.schemas import VocabularyTriple
from core.vocabulary.normalize import normalize_triples
from core.vocabulary.sources import VocabularySource

logger = logging.getLogger(__name__)


class CardSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class CardState(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    MATCHED = "matched"
    WRONG = "wrong"


@dataclass(eq=False)
class Card:
    """One card on the board. Compared by identity."""
    pair_id: str
    text: str
    side: CardSide
    state: CardState = CardState.IDLE
    has_audio: bool = False


@dataclass(frozen=True)
class RoundSummary:
    total_pairs: int
    attempts: int

    @property
    def mistakes(self) -> int:
        return max(0, self.attempts - self.total_pairs)


CompletionCallback = Callable[[RoundSummary], None]


def cards_for(triple: VocabularyTriple) -> tuple[Card, Card]:
    pair_id = triple.pair_id
    return (
        Card(pair_id=pair_id, text=triple.phonetic, side=CardSide.LEFT, has_audio=True),
        Card(pair_id=pair_id, text=triple.native, side=CardSide.RIGHT),
    )


class MatchingRound:
    """
    State of one playthrough.

    Args:
        triples: Normalized pool for the round
        scheduler: Where delayed transitions are recorded
        rng: Random source for shuffling
        visible_pairs_target: Max unmatched pairs on the board
        wrong_revert_delay: Seconds before a mismatch reverts
        completion_delay: Seconds between the last match and on_complete
        on_complete: Called with the round summary when the completion fires
    """

    def __init__(
        self,
        triples: Sequence[VocabularyTriple],
        scheduler: DeferredActions,
        rng: random.Random,
        visible_pairs_target: int = VISIBLE_PAIRS_TARGET,
        wrong_revert_delay: float = WRONG_REVERT_DELAY,
        completion_delay: float = COMPLETION_DELAY,
        on_complete: Optional[CompletionCallback] = None
    ):
        self.scheduler = scheduler
        self.rng = rng
        self.visible_pairs_target = max(1, visible_pairs_target)
        self.wrong_revert_delay = wrong_revert_delay
        self.completion_delay = completion_delay
        self.on_complete = on_complete

        self.left: list[Card] = []
        self.right: list[Card] = []
        self.queue: list[VocabularyTriple] = []
        self.matched_pair_ids: set[str] = set()
        self.introduced_pair_ids: set[str] = set()
        self.revealed: dict[str, bool] = {}
        self.attempts = 0
        self.total_pairs = 0
        self.selected_left: Optional[int] = None
        self.selected_right: Optional[int] = None
        self.completed = False

        self._pending_reveal: list[str] = []
        self._revert: Optional[ScheduledAction] = None
        self._completion: Optional[ScheduledAction] = None

        self._seed(list(triples))

    def _seed(self, triples: list[VocabularyTriple]) -> None:
        # One pair per pair id; distinct natives can still collide on native|phonetic
        seen: set[str] = set()
        pool = []
        for triple in triples:
            if triple.pair_id not in seen:
                seen.add(triple.pair_id)
                pool.append(triple)
        if not pool:
            return
        self.rng.shuffle(pool)
        self.total_pairs = len(pool)

        seed_count = min(self.visible_pairs_target, len(pool))
        self.queue = pool[seed_count:]
        for triple in pool[:seed_count]:
            self._place(triple)
            self.revealed[triple.pair_id] = True
        self.rng.shuffle(self.left)
        self.rng.shuffle(self.right)

    def _place(self, triple: VocabularyTriple) -> None:
        left, right = cards_for(triple)
        self.left.append(left)
        self.right.append(right)
        self.introduced_pair_ids.add(triple.pair_id)

    # ---- Derived state ----

    @property
    def is_empty(self) -> bool:
        return self.total_pairs == 0

    @property
    def is_finished(self) -> bool:
        return self.total_pairs > 0 and len(self.matched_pair_ids) >= self.total_pairs

    @property
    def is_busy(self) -> bool:
        """True while a mismatch is waiting to revert."""
        return self._revert is not None

    def visible_pair_ids(self) -> set[str]:
        """Pair ids on the board that are not matched yet."""
        return {c.pair_id for c in self.left} - self.matched_pair_ids

    def visible_pairs_count(self) -> int:
        return len(self.visible_pair_ids())

    def is_face_up(self, card: Card) -> bool:
        return self.revealed.get(card.pair_id, False)

    def display_hint(self, card: Card) -> Optional[str]:
        """
        Visual hint for the presentation layer, derived from card state.
        """
        if not self.is_face_up(card):
            return "back"
        if card.state == CardState.SELECTED:
            return "pulse"
        if card.state == CardState.WRONG:
            return "shake"
        if card.state == CardState.MATCHED:
            return "dim"
        return None

    def summary(self) -> RoundSummary:
        return RoundSummary(total_pairs=self.total_pairs, attempts=self.attempts)

    # ---- Selection ----

    def tap_left(self, index: int) -> None:
        self._tap(CardSide.LEFT, index)

    def tap_right(self, index: int) -> None:
        self._tap(CardSide.RIGHT, index)

    def _cards(self, side: CardSide) -> list[Card]:
        return self.left if side == CardSide.LEFT else self.right

    def _selection(self, side: CardSide) -> Optional[int]:
        return self.selected_left if side == CardSide.LEFT else self.selected_right

    def _set_selection(self, side: CardSide, index: Optional[int]) -> None:
        if side == CardSide.LEFT:
            self.selected_left = index
        else:
            self.selected_right = index

    def _tap(self, side: CardSide, index: int) -> None:
        if self.is_finished or self.is_busy:
            return
        cards = self._cards(side)
        if not 0 <= index < len(cards):
            return
        card = cards[index]
        if card.state == CardState.MATCHED or not self.is_face_up(card):
            return

        previous = self._selection(side)
        if previous is not None and 0 <= previous < len(cards):
            cards[previous].state = CardState.IDLE
        selected = None if previous == index else index
        self._set_selection(side, selected)
        if selected is not None:
            cards[selected].state = CardState.SELECTED

        self.try_resolve()

    # ---- Resolution ----

    def try_resolve(self) -> None:
        """
        Resolve the current pair of selections. Ignored unless both sides
        hold a selection and no mismatch is waiting to revert.
        """
        if self.is_busy:
            return
        li, ri = self.selected_left, self.selected_right
        if li is None or ri is None:
            return
        if not (0 <= li < len(self.left) and 0 <= ri < len(self.right)):
            return

        self.attempts += 1
        left, right = self.left[li], self.right[ri]

        if left.pair_id != right.pair_id:
            left.state = CardState.WRONG
            right.state = CardState.WRONG
            self._revert = self.scheduler.schedule(
                self.wrong_revert_delay,
                lambda: self._revert_wrong(left, right),
                name="revert_wrong",
            )
            return

        pair_id = left.pair_id
        left.state = CardState.MATCHED
        right.state = CardState.MATCHED
        self.matched_pair_ids.add(pair_id)
        self.selected_left = None
        self.selected_right = None

        if self.queue:
            self.left = [c for c in self.left if c.pair_id != pair_id]
            self.right = [c for c in self.right if c.pair_id != pair_id]
            self.revealed.pop(pair_id, None)
            self.introduce_next_pair_if_needed()

        if self.is_finished:
            logger.info("Round finished: %d pairs in %d attempts", self.total_pairs, self.attempts)
            self._completion = self.scheduler.schedule(
                self.completion_delay,
                self._signal_complete,
                name="complete",
            )

    def _revert_wrong(self, left: Card, right: Card) -> None:
        for card in (left, right):
            if card.state == CardState.WRONG:
                card.state = CardState.IDLE
        self.selected_left = None
        self.selected_right = None
        self._revert = None

    def _signal_complete(self) -> None:
        self.completed = True
        self._completion = None
        if self.on_complete is not None:
            self.on_complete(self.summary())

    # ---- Introduction ----

    def introduce_next_pair_if_needed(self) -> list[str]:
        """
        Top up the board from the queue.

        Returns:
            Pair ids introduced (face-down until reveal_pending)
        """
        if not self.queue:
            return []
        need = self.visible_pairs_target - self.visible_pairs_count()
        if need <= 0:
            return []

        take = min(need, len(self.queue))
        newcomers = self.queue[:take]
        del self.queue[:take]
        for triple in newcomers:
            self._place(triple)
            self.revealed[triple.pair_id] = False
            self._pending_reveal.append(triple.pair_id)
        self._shuffle_sides()

        introduced = [t.pair_id for t in newcomers]
        logger.debug("Introduced %d pair(s), %d queued", len(introduced), len(self.queue))
        return introduced

    @property
    def pending_reveal(self) -> list[str]:
        return list(self._pending_reveal)

    def reveal_pending(self) -> list[str]:
        """
        Flip introduced cards face-up and reshuffle the board.
        """
        revealed = [pid for pid in self._pending_reveal if pid in self.revealed]
        for pair_id in revealed:
            self.revealed[pair_id] = True
        self._pending_reveal.clear()
        if revealed:
            self._shuffle_sides()
        return revealed

    def _shuffle_sides(self) -> None:
        # Selections follow their cards.
        left = self.left[self.selected_left] if self.selected_left is not None else None
        right = self.right[self.selected_right] if self.selected_right is not None else None
        self.rng.shuffle(self.left)
        self.rng.shuffle(self.right)
        if left is not None:
            self.selected_left = self.left.index(left)
        if right is not None:
            self.selected_right = self.right.index(right)

    def cancel_pending(self) -> None:
        self.scheduler.cancel(self._revert)
        self.scheduler.cancel(self._completion)
        self._revert = None
        self._completion = None


class MatchingGame:
    """
    Builds and replaces matching rounds for a screen/session.

    Args:
        source: Vocabulary source for (course, lesson) pools
        scheduler: Deferred actions shared with the host
        rng: Random source for shuffling
    """

    def __init__(
        self,
        source: Optional[VocabularySource] = None,
        scheduler: Optional[DeferredActions] = None,
        rng: Optional[random.Random] = None,
        visible_pairs_target: int = VISIBLE_PAIRS_TARGET,
        wrong_revert_delay: float = WRONG_REVERT_DELAY,
        completion_delay: float = COMPLETION_DELAY,
        on_complete: Optional[CompletionCallback] = None
    ):
        self.source = source
        self.scheduler = scheduler or DeferredActions()
        self.rng = rng or random.Random()
        self.visible_pairs_target = visible_pairs_target
        self.wrong_revert_delay = wrong_revert_delay
        self.completion_delay = completion_delay
        self.on_complete = on_complete
        self.round: Optional[MatchingRound] = None
        self._round_key: Optional[tuple[str, str]] = None

    def build_round(self, course_id: str, lesson_id: str, force: bool = False) -> MatchingRound:
        """
        Build a round for a lesson from the learner's mastered vocabulary.

        An existing non-empty round for the same lesson is kept unless force
        is set. Replacing a round cancels its pending delayed actions.
        """
        key = (course_id, lesson_id)
        if not force and self.round is not None and self._round_key == key and not self.round.is_empty:
            return self.round

        raw = self.source.triples_for_lesson(course_id, lesson_id) if self.source else []
        self.build_round_from_pool(raw)
        self._round_key = key
        logger.info(
            "Built round for %s/%s: %d pairs, %d visible",
            course_id, lesson_id, self.round.total_pairs, self.round.visible_pairs_count()
        )
        return self.round

    def build_round_from_pool(self, triples: Sequence[VocabularyTriple]) -> MatchingRound:
        """
        Build a round from an explicit pool, e.g. a task's bound triples.
        Always replaces the current round.
        """
        if self.round is not None:
            self.round.cancel_pending()
        self.round = MatchingRound(
            normalize_triples(triples),
            scheduler=self.scheduler,
            rng=self.rng,
            visible_pairs_target=self.visible_pairs_target,
            wrong_revert_delay=self.wrong_revert_delay,
            completion_delay=self.completion_delay,
            on_complete=self.on_complete,
        )
        self._round_key = None
        return self.round

    @property
    def is_finished(self) -> bool:
        return self.round is not None and self.round.is_finished

    def tap_left(self, index: int) -> None:
        if self.round is not None:
            self.round.tap_left(index)

    def tap_right(self, index: int) -> None:
        if self.round is not None:
            self.round.tap_right(index)

"""
Unit tests for the matching-pairs game engine.
Run: python -m pytest tests/test_matching_engine.py -v
"""

import random

import pytest

from core.matching import CardSide, CardState, MatchingGame, MatchingRound
from core.schemas import VocabularyTriple
from core.vocabulary import StaticVocabularySource


def index_of(cards, pair_id):
    return next(i for i, c in enumerate(cards) if c.pair_id == pair_id)


def match(round_, pair_id):
    round_.tap_left(index_of(round_.left, pair_id))
    round_.tap_right(index_of(round_.right, pair_id))


def face_up_unmatched(round_):
    return sorted(
        c.pair_id for c in round_.left
        if round_.is_face_up(c) and c.state != CardState.MATCHED
    )


def play_out(round_):
    """Match every pair, revealing newcomers after each match."""
    while not round_.is_finished:
        match(round_, face_up_unmatched(round_)[0])
        round_.reveal_pending()


@pytest.fixture
def game(scheduler, rng):
    summaries = []
    game = MatchingGame(scheduler=scheduler, rng=rng, on_complete=summaries.append)
    game.summaries = summaries
    return game


class TestSeeding:

    def test_small_pool_shows_everything(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(3))
        assert len(round_.left) == len(round_.right) == 3
        assert round_.queue == []
        assert round_.visible_pairs_count() == 3
        assert all(round_.is_face_up(c) for c in round_.left + round_.right)
        assert round_.selected_left is None and round_.selected_right is None

    def test_large_pool_fills_window_and_queues_rest(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(8))
        assert round_.total_pairs == 8
        assert round_.visible_pairs_count() == 5
        assert len(round_.queue) == 3
        assert round_.introduced_pair_ids == {c.pair_id for c in round_.left}

    def test_card_faces(self, game):
        triple = VocabularyTriple(native="rice", script="ข้าว", phonetic="khao")
        round_ = game.build_round_from_pool([triple])
        left, right = round_.left[0], round_.right[0]
        assert left.pair_id == right.pair_id == "rice|khao"
        assert (left.text, left.side, left.has_audio) == ("khao", CardSide.LEFT, True)
        assert (right.text, right.side, right.has_audio) == ("rice", CardSide.RIGHT, False)

    def test_pool_is_normalized(self, game):
        raw = [
            VocabularyTriple(native=" water ", phonetic=""),
            VocabularyTriple(native="Water", phonetic="nam"),
            VocabularyTriple(native=""),
        ]
        round_ = game.build_round_from_pool(raw)
        assert round_.total_pairs == 1
        assert round_.left[0].text == "water"

    def test_colliding_pair_ids_keep_one_pair(self, scheduler, rng, clock):
        # Distinct natives, same native|phonetic key
        triples = [
            VocabularyTriple(native="a|b", phonetic="c"),
            VocabularyTriple(native="a", phonetic="b|c"),
        ]
        summaries = []
        round_ = MatchingRound(triples, scheduler=scheduler, rng=rng, on_complete=summaries.append)
        assert round_.total_pairs == 1
        assert len(round_.left) == len(round_.right) == 1

        round_.tap_left(0)
        round_.tap_right(0)
        assert round_.is_finished

        clock.advance(2)
        scheduler.run_due()
        assert summaries[0].total_pairs == 1

    def test_empty_pool(self, game):
        round_ = game.build_round_from_pool([])
        assert round_.is_empty
        assert not round_.is_finished
        assert round_.left == [] and round_.right == []
        round_.tap_left(0)
        assert round_.attempts == 0


class TestSelection:

    def test_toggle_off_same_card(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(3))
        round_.tap_left(1)
        assert round_.selected_left == 1
        assert round_.left[1].state == CardState.SELECTED
        round_.tap_left(1)
        assert round_.selected_left is None
        assert round_.left[1].state == CardState.IDLE

    def test_reselect_moves_selection(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(3))
        round_.tap_right(0)
        round_.tap_right(2)
        assert round_.selected_right == 2
        assert round_.right[0].state == CardState.IDLE
        assert round_.right[2].state == CardState.SELECTED
        assert round_.attempts == 0

    def test_out_of_range_taps_ignored(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(3))
        round_.tap_left(-1)
        round_.tap_right(3)
        assert round_.selected_left is None and round_.selected_right is None

    def test_matched_cards_ignore_taps(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(3))
        pair_id = round_.left[0].pair_id
        match(round_, pair_id)
        round_.tap_left(index_of(round_.left, pair_id))
        assert round_.selected_left is None
        assert round_.attempts == 1

    def test_display_hints(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(3))
        assert round_.display_hint(round_.left[0]) is None
        round_.tap_left(0)
        assert round_.display_hint(round_.left[0]) == "pulse"


class TestResolution:

    def test_match(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(3))
        pair_id = round_.left[0].pair_id
        match(round_, pair_id)

        assert round_.attempts == 1
        assert pair_id in round_.matched_pair_ids
        assert round_.left[index_of(round_.left, pair_id)].state == CardState.MATCHED
        assert round_.right[index_of(round_.right, pair_id)].state == CardState.MATCHED
        assert round_.selected_left is None and round_.selected_right is None
        assert round_.display_hint(round_.left[index_of(round_.left, pair_id)]) == "dim"

    def test_mismatch_reverts_after_delay(self, game, make_triples, clock, scheduler):
        round_ = game.build_round_from_pool(make_triples(3))
        first, second = face_up_unmatched(round_)[:2]
        li, ri = index_of(round_.left, first), index_of(round_.right, second)
        round_.tap_left(li)
        round_.tap_right(ri)

        assert round_.attempts == 1
        assert round_.left[li].state == CardState.WRONG
        assert round_.right[ri].state == CardState.WRONG
        assert round_.display_hint(round_.left[li]) == "shake"
        assert round_.is_busy

        clock.advance(0.1)
        scheduler.run_due()
        assert round_.left[li].state == CardState.WRONG

        clock.advance(0.2)
        scheduler.run_due()
        assert round_.left[li].state == CardState.IDLE
        assert round_.right[ri].state == CardState.IDLE
        assert round_.selected_left is None and round_.selected_right is None
        assert not round_.is_busy
        assert round_.matched_pair_ids == set()

    def test_taps_ignored_while_revert_pending(self, game, make_triples, clock, scheduler):
        round_ = game.build_round_from_pool(make_triples(3))
        first, second = face_up_unmatched(round_)[:2]
        round_.tap_left(index_of(round_.left, first))
        round_.tap_right(index_of(round_.right, second))

        match(round_, first)
        assert round_.attempts == 1
        assert first not in round_.matched_pair_ids

        clock.advance(0.3)
        scheduler.run_due()
        match(round_, first)
        assert round_.attempts == 2
        assert first in round_.matched_pair_ids

    def test_resolve_ignored_while_revert_pending(self, game, make_triples, clock, scheduler):
        round_ = game.build_round_from_pool(make_triples(3))
        first, second = face_up_unmatched(round_)[:2]
        round_.tap_left(index_of(round_.left, first))
        round_.tap_right(index_of(round_.right, second))

        round_.try_resolve()
        round_.try_resolve()
        assert round_.attempts == 1
        assert len(scheduler.pending) == 1

        clock.advance(0.3)
        scheduler.run_due()
        assert not round_.is_busy
        assert scheduler.pending == []

    def test_one_attempt_per_resolution(self, game, make_triples, clock, scheduler):
        round_ = game.build_round_from_pool(make_triples(3))
        ids = face_up_unmatched(round_)
        round_.tap_left(index_of(round_.left, ids[0]))
        round_.tap_right(index_of(round_.right, ids[1]))
        clock.advance(1)
        scheduler.run_due()
        play_out(round_)

        assert round_.attempts == 4
        assert round_.summary().mistakes == 1


class TestWindow:

    def test_matched_pair_is_replaced_from_queue(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(8))
        pair_id = face_up_unmatched(round_)[0]
        match(round_, pair_id)

        assert pair_id not in {c.pair_id for c in round_.left + round_.right}
        assert round_.visible_pairs_count() == 5
        assert len(round_.queue) == 2
        assert len(round_.pending_reveal) == 1

        newcomer = round_.pending_reveal[0]
        card = round_.left[index_of(round_.left, newcomer)]
        assert not round_.is_face_up(card)
        assert round_.display_hint(card) == "back"

    def test_face_down_cards_ignore_taps(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(8))
        match(round_, face_up_unmatched(round_)[0])
        newcomer = round_.pending_reveal[0]

        round_.tap_left(index_of(round_.left, newcomer))
        assert round_.selected_left is None

        assert round_.reveal_pending() == [newcomer]
        round_.tap_left(index_of(round_.left, newcomer))
        assert round_.left[round_.selected_left].pair_id == newcomer

    def test_selection_follows_card_on_reveal(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(8))
        match(round_, face_up_unmatched(round_)[0])
        kept = face_up_unmatched(round_)[0]
        round_.tap_right(index_of(round_.right, kept))

        round_.reveal_pending()
        assert round_.right[round_.selected_right].pair_id == kept
        assert round_.right[round_.selected_right].state == CardState.SELECTED

    def test_window_invariants_through_a_round(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(8))
        assert round_.visible_pairs_count() == 5
        visible_after_match = []
        while not round_.is_finished:
            queued = len(round_.queue)
            introduced = len(round_.introduced_pair_ids)
            assert round_.matched_pair_ids <= round_.introduced_pair_ids
            match(round_, face_up_unmatched(round_)[0])
            visible_after_match.append(round_.visible_pairs_count())
            expected_new = 1 if queued else 0
            assert len(round_.introduced_pair_ids) - introduced == expected_new
            assert len(round_.pending_reveal) == expected_new
            round_.reveal_pending()

        assert visible_after_match == [5, 5, 5, 4, 3, 2, 1, 0]
        assert round_.matched_pair_ids == round_.introduced_pair_ids
        assert round_.queue == []
        assert round_.attempts == 8
        # The final window stays on the board as a tally
        assert len(round_.left) == 5
        assert all(c.state == CardState.MATCHED for c in round_.left + round_.right)

    @pytest.mark.parametrize("seed", range(5))
    def test_random_play_keeps_invariants(self, make_triples, clock, scheduler, seed):
        gen = random.Random(seed)
        round_ = MatchingRound(make_triples(11), scheduler=scheduler, rng=random.Random(seed))
        for _ in range(400):
            if round_.is_finished:
                break
            side = gen.choice([round_.tap_left, round_.tap_right])
            side(gen.randrange(-1, len(round_.left) + 1))
            clock.advance(gen.choice([0.0, 0.1, 0.3]))
            scheduler.run_due()
            round_.reveal_pending()
            assert round_.visible_pairs_count() <= 5
            assert round_.matched_pair_ids <= round_.introduced_pair_ids
            assert round_.attempts >= len(round_.matched_pair_ids)


class TestCompletion:

    def test_completion_fires_after_delay(self, game, make_triples, clock, scheduler):
        round_ = game.build_round_from_pool(make_triples(3))
        play_out(round_)

        assert round_.is_finished
        assert game.is_finished
        assert not round_.completed
        assert game.summaries == []

        clock.advance(1.0)
        scheduler.run_due()
        assert game.summaries == []

        clock.advance(0.3)
        scheduler.run_due()
        assert round_.completed
        assert len(game.summaries) == 1
        assert game.summaries[0].total_pairs == 3
        assert game.summaries[0].attempts == 3
        assert game.summaries[0].mistakes == 0

    def test_taps_ignored_after_finish(self, game, make_triples):
        round_ = game.build_round_from_pool(make_triples(3))
        play_out(round_)
        round_.tap_left(0)
        assert round_.selected_left is None
        assert round_.attempts == 3


class TestMatchingGame:

    def test_build_round_reuses_existing(self, scheduler, rng, make_triples):
        source = StaticVocabularySource({"l1": make_triples(4)})
        game = MatchingGame(source=source, scheduler=scheduler, rng=rng)
        first = game.build_round("c", "l1")
        assert game.build_round("c", "l1") is first
        assert game.build_round("c", "l1", force=True) is not first

    def test_different_lesson_builds_new_round(self, scheduler, rng, make_triples):
        source = StaticVocabularySource({"l1": make_triples(4), "l2": make_triples(3, "x")})
        game = MatchingGame(source=source, scheduler=scheduler, rng=rng)
        first = game.build_round("c", "l1")
        second = game.build_round("c", "l2")
        assert second is not first
        assert second.total_pairs == 3

    def test_empty_round_is_rebuilt(self, scheduler, rng):
        game = MatchingGame(source=StaticVocabularySource({}), scheduler=scheduler, rng=rng)
        first = game.build_round("c", "l1")
        assert first.is_empty
        assert game.build_round("c", "l1") is not first

    def test_rebuild_cancels_pending_actions(self, scheduler, rng, clock, make_triples):
        summaries = []
        source = StaticVocabularySource({"l1": make_triples(3)})
        game = MatchingGame(source=source, scheduler=scheduler, rng=rng, on_complete=summaries.append)
        play_out(game.build_round("c", "l1"))
        assert scheduler.pending

        game.build_round("c", "l1", force=True)
        assert scheduler.pending == []
        clock.advance(5)
        scheduler.run_due()
        assert summaries == []

    def test_game_taps_delegate_to_round(self, game, make_triples):
        game.tap_left(0)
        round_ = game.build_round_from_pool(make_triples(3))
        game.tap_left(2)
        assert round_.selected_left == 2

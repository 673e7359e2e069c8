"""Test board generation and the Q-needs-U repair."""

import random
from collections import Counter

import pytest

from wordchain.board import Board, Position, is_adjacent, is_valid_path
from wordchain.letters import ConstrainedSampler, LetterSampler
from wordchain.solver.generator import generate_board, has_u_neighbor, make_sampler, repair_q_tiles


class TestBoard:
    """Test the Board container."""

    def test_from_rows_and_indexing(self, scenario_board):
        assert scenario_board.size == 4
        assert scenario_board[0, 0] == "C"
        assert scenario_board[Position(3, 3)] == "H"
        assert scenario_board[5] == "A"
        assert scenario_board.rows() == ["CATS", "RATE", "ATES", "BATH"]

    def test_rejects_non_square(self):
        with pytest.raises(ValueError):
            Board.from_rows(["ABC", "DE"])

    def test_copy_is_independent(self, scenario_board):
        copy = scenario_board.copy()
        copy[0, 0] = "Z"
        assert scenario_board[0, 0] == "C"
        assert copy != scenario_board

    def test_neighbors(self, scenario_board):
        assert len(scenario_board.neighbors(Position(0, 0))) == 3
        assert len(scenario_board.neighbors(Position(1, 1))) == 8
        assert set(scenario_board.diagonal_neighbors(Position(0, 0))) == {Position(1, 1)}
        assert len(scenario_board.diagonal_neighbors(Position(1, 1))) == 4

    def test_word_at(self, scenario_board):
        path = [Position(1, 0), Position(1, 1), Position(1, 2), Position(1, 3)]
        assert scenario_board.word_at(path) == "rate"

    def test_position_keys(self):
        assert Position(2, 3).key == "2,3"
        assert Position.from_key("2,3") == Position(2, 3)
        with pytest.raises(ValueError):
            Position.from_key("2;3")


class TestPathRules:
    """Test adjacency and path validity."""

    def test_adjacency(self):
        assert is_adjacent(Position(0, 0), Position(1, 1))
        assert is_adjacent(Position(2, 2), Position(2, 1))
        assert not is_adjacent(Position(0, 0), Position(0, 2))
        assert not is_adjacent(Position(1, 1), Position(1, 1))

    def test_valid_path(self):
        assert is_valid_path([Position(0, 0), Position(0, 1), Position(1, 2)])
        assert not is_valid_path([Position(0, 0), Position(0, 1), Position(0, 0)])
        assert not is_valid_path([Position(0, 0), Position(2, 2)])


class TestGenerateBoard:
    """Test random board generation."""

    def test_seeded_boards_are_reproducible(self):
        assert generate_board(4, seed="2024-01-01") == generate_board(4, seed="2024-01-01")
        assert generate_board(4, seed="2024-01-01") != generate_board(4, seed="2024-01-02")

    def test_board_shape(self):
        board = generate_board(5, seed="shape")
        assert board.size == 5
        assert all(ch.isupper() and ch.isalpha() for ch in str(board))

    def test_constrained_boards_respect_cap(self):
        for i in range(50):
            board = generate_board(5, sampler=make_sampler(seed=f"cap-{i}", constrained=True))
            assert max(board.letter_counts().values()) <= 4

    def test_constrained_boards_have_no_lonely_q(self):
        for i in range(100):
            board = generate_board(4, sampler=make_sampler(seed=f"q-{i}", constrained=True))
            for pos in board.positions():
                if board[pos] == "Q":
                    assert has_u_neighbor(board, *pos)

    def test_sampler_counts_reset_between_boards(self):
        sampler = ConstrainedSampler(random.Random(0))
        for _ in range(10):
            board = generate_board(4, sampler=sampler)
            assert +sampler.counts == board.letter_counts()

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            generate_board(0)

    def test_unconstrained_sampler(self):
        board = generate_board(4, sampler=LetterSampler(random.Random(1)))
        assert board.size == 4


class TestRepairQTiles:
    """Test the local Q repair pass."""

    def test_lonely_q_is_replaced(self):
        board = Board.from_rows(["QABC", "DEFG", "HIJK", "LMNO"])
        sampler = ConstrainedSampler(random.Random(0), counts=board.letter_counts())
        assert repair_q_tiles(board, sampler) == 1
        assert board[0, 0] != "Q"
        assert sampler.counts["Q"] == 0

    def test_q_next_to_u_is_kept(self):
        board = Board.from_rows(["QUBC", "DEFG", "HIJK", "LMNO"])
        sampler = ConstrainedSampler(random.Random(0), counts=board.letter_counts())
        assert repair_q_tiles(board, sampler) == 0
        assert board[0, 0] == "Q"

    def test_replacement_respects_cap(self):
        board = Board.from_rows(["QEEE", "EAAA", "ATTT", "TOOO"])
        counts = Counter(board.letter_counts())
        sampler = ConstrainedSampler(random.Random(1), max_count=4, counts=counts)
        repair_q_tiles(board, sampler)
        assert max(board.letter_counts().values()) <= 4

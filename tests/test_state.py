"""Test round snapshots."""

import json

import pytest

from wordchain.benchmarks import compute_benchmarks
from wordchain.board import Position
from wordchain.game.machine import Begin, Extend, Submit, apply, new_round
from wordchain.game.special import SpecialGrid, SpecialTile, SpecialTileType
from wordchain.game.state import Phase, RoundState


@pytest.fixture
def played_state(chain_board, ctx) -> RoundState:
    special = SpecialGrid(4)
    special[2, 2] = SpecialTile(SpecialTileType.MULTIPLIER, 3, 2)
    state = new_round(
        chain_board, ctx, special=special, seed="2024-06-01", move_limit=15,
        benchmarks=compute_benchmarks(3, 12), discoverable_words=3,
    )
    for action in [Begin((0, 0)), Extend((0, 1)), Extend((0, 2)), Submit()]:
        state = apply(state, action, ctx).state
    return state


class TestSnapshot:
    """Test to_dict/from_dict."""

    def test_round_trip(self, played_state):
        data = json.loads(json.dumps(played_state.to_dict()))
        assert RoundState.from_dict(data) == played_state

    def test_contents(self, played_state):
        data = played_state.to_dict()
        assert data["used_words"] == ["cat"]
        assert data["chain_tiles"] == ["0,0", "0,1", "0,2"]
        assert data["history"] == [{"word": "cat", "path": ["0,0", "0,1", "0,2"], "score": 9}]
        assert data["special"][2][2] == {"type": "multiplier", "expiry": 2, "value": 2}
        assert data["move_limit"] == 15

    def test_path_is_not_saved(self, played_state, ctx):
        building = apply(played_state, Begin((0, 2)), ctx).state
        assert building.phase == Phase.BUILDING
        restored = RoundState.from_dict(building.to_dict())
        assert restored.phase == Phase.IDLE
        assert restored.path == ()

    def test_bad_version(self, played_state):
        data = played_state.to_dict()
        data["version"] = 99
        with pytest.raises(ValueError):
            RoundState.from_dict(data)

    def test_missing_field(self, played_state):
        data = played_state.to_dict()
        del data["history"]
        with pytest.raises(ValueError):
            RoundState.from_dict(data)

    def test_size_mismatch(self, played_state):
        data = played_state.to_dict()
        data["special"] = SpecialGrid(3).to_rows()
        with pytest.raises(ValueError):
            RoundState.from_dict(data)

    def test_chain_tile_off_board(self, played_state):
        data = played_state.to_dict()
        data["chain_tiles"] = ["9,9"]
        with pytest.raises(ValueError):
            RoundState.from_dict(data)

    def test_moves_left(self, played_state):
        assert played_state.moves == 1
        assert played_state.moves_left == 14
        assert RoundState.new(played_state.board).moves_left is None
        assert played_state.chain_tiles == {Position(0, 0), Position(0, 1), Position(0, 2)}

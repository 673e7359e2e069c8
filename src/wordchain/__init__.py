"""Word Chain puzzle engine.

Generates letter grids that are rich in discoverable words, and runs a tile-path word game on
them: each word is drawn as a path of adjacent tiles, and every word after the first must
reuse at least one tile of the previous word.
"""

import argparse
import sys
from time import time

from wordchain.errors import SubmissionError, WordChainError, WordNotFound
from wordchain.game.machine import (
    ActivateScoreMultiplier,
    AddExtraMoves,
    Begin,
    CancelWildcard,
    ClearPath,
    Extend,
    Outcome,
    ResolveWildcard,
    Submit,
    UseHammer,
)
from wordchain.game.special import SpecialTileType
from wordchain.game.state import Phase, RoundState
from wordchain.session import GameSession
from wordchain.solver.config import config as engine_config
from wordchain.solver.prober import probe_board
from wordchain.solver.utils import analyze_board
from wordchain.util import format_path, int_comma, parse_path, time_str
from wordchain.wordlist import DictionaryIndex

SPECIAL_MARKS = {
    SpecialTileType.NONE: " ",
    SpecialTileType.STONE: "#",
    SpecialTileType.WILD: "?",
    SpecialTileType.XFACTOR: "x",
    SpecialTileType.MULTIPLIER: "*",
    SpecialTileType.SHUFFLE: "~",
}

HELP = """\
Enter a path as row,col pairs, e.g. "0,0 0,1 1,1".
Commands: hint, hammer, x<factor> (score multiplier), more (extra moves),
          ?<letter> (resolve a wild tile), cancel, help, quit."""


def print_round(state: RoundState, out=None) -> None:
    """Print the board (with special tile marks) and the round status."""
    out = out or sys.stdout
    for row in range(state.board.size):
        cells = []
        for col in range(state.board.size):
            tile = state.special[row, col]
            cells.append(f"{state.board[row, col]}{SPECIAL_MARKS[tile.type]}")
        print(" ".join(cells), file=out)
    moves = f"{state.moves}" if state.move_limit is None else f"{state.moves}/{state.move_limit}"
    print(f"Score: {int_comma(state.score)}  Streak: {state.streak}  Moves: {moves}", file=out)
    if state.chain_tiles:
        print(f"Chain: {format_path(sorted(state.chain_tiles))}", file=out)


def report(outcome: Outcome, out=None) -> None:
    out = out or sys.stdout
    error = outcome.error
    if isinstance(error, SubmissionError) and not error.user_visible:
        return
    if error is not None:
        print(f"Rejected: {error}", file=out)
        if isinstance(error, WordNotFound) and error.suggestions:
            print(f"Did you mean: {', '.join(error.suggestions)}?", file=out)
        return
    if outcome.committed is not None:
        print(f"{outcome.committed.word.upper()}: +{outcome.committed.score}", file=out)
    elif outcome.state.phase == Phase.WILDCARD_PENDING:
        print("Which letter is the wild tile? Answer with ?<letter>.", file=out)


def play_path(session: GameSession, text: str) -> Outcome:
    """Draw and submit a path typed as ``r,c`` keys."""
    path = parse_path(text)
    if not path:
        raise ValueError("Empty path.")
    session.dispatch(ClearPath())
    outcome = session.dispatch(Begin(path[0]))
    for pos in path[1:]:
        if outcome.error is not None:
            session.dispatch(ClearPath())
            return outcome
        outcome = session.dispatch(Extend(pos))
    if outcome.error is not None:
        session.dispatch(ClearPath())
        return outcome
    return session.dispatch(Submit())


def play(session: GameSession, out=None) -> None:
    """Interactive read-eval loop over stdin."""
    out = out or sys.stdout
    print(HELP, file=out)
    while True:
        state = session.require_state()
        print("", file=out)
        print_round(state, out)
        if state.game_over:
            print(f"Game over. Final score {int_comma(state.score)}, grade: {state.grade}", file=out)
            return
        try:
            line = input("> ").strip()
        except EOFError:
            return
        try:
            if line in ("q", "quit"):
                return
            if line == "help":
                print(HELP, file=out)
            elif line == "hint":
                for word, path in session.hints().items():
                    print(f"  {word.upper():<10} {format_path(path)}", file=out)
            elif line == "hammer":
                report(session.dispatch(UseHammer()), out)
            elif line == "more":
                report(session.dispatch(AddExtraMoves()), out)
            elif line == "cancel":
                report(session.dispatch(CancelWildcard()), out)
            elif line.startswith("x"):
                report(session.dispatch(ActivateScoreMultiplier(float(line[1:] or 2))), out)
            elif line.startswith("?"):
                report(session.dispatch(ResolveWildcard(line[1:])), out)
            elif line:
                report(play_path(session, line), out)
        except (ValueError, WordChainError) as e:
            print(f"Error: {e}", file=out)


def main() -> None:
    """Main entry point for the word chain engine."""
    parser = argparse.ArgumentParser(description="Word chain board generator and game")
    parser.add_argument("--words", type=str, help="Path to a newline-delimited word list")
    parser.add_argument("--seed", type=str, help="Seed for a reproducible board")
    parser.add_argument("--daily", action="store_true", help="Play today's daily challenge")
    parser.add_argument("--size", type=int, help="Grid size")
    parser.add_argument("--min-words", type=int, help="Minimum discoverable words")
    parser.add_argument("--strict", action="store_true", help="Fail instead of best effort")
    parser.add_argument("--play", action="store_true", help="Play interactively")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report progress")
    args = parser.parse_args()

    overrides: dict = {}
    if args.words:
        overrides["word_list_path"] = args.words
    if args.size:
        overrides["grid_size"] = args.size
    if args.min_words:
        overrides["min_words"] = args.min_words
    if args.strict:
        overrides["strict_generation"] = True
    if args.verbose:
        overrides["verbose"] = True
    settings = engine_config.model_copy(update=overrides)

    start = time()
    try:
        dictionary = DictionaryIndex.from_file(settings.word_list_path)
    except WordChainError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Dictionary: {int_comma(len(dictionary))} words")

    with GameSession(dictionary, settings=settings) as session:
        try:
            state = session.start_round(seed=args.seed, daily=args.daily).result()
        except (ValueError, WordChainError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Board generated in {time_str(time() - start)}")
        if state.seed:
            print(f"Seed: {state.seed}")

        if args.play:
            play(session)
            return

        state.board.print()
        analysis = analyze_board(state.board)
        print(
            f"Vowels: {analysis.vowel_ratio:.0%}  Common letters: {analysis.common_letter_ratio:.0%}  "
            f"Unique letters: {analysis.unique_letters}  Connectivity: {analysis.connectivity_score:.1f}"
        )
        probe = probe_board(state.board, dictionary, max_nodes=None)
        print(f"Discoverable words: {int_comma(probe.word_count)}")
        for word in sorted(probe.words, key=lambda w: (-len(w), w)):
            print(f"  {word.upper():<12} {format_path(probe.paths[word])}")
        if state.benchmarks is not None:
            b = state.benchmarks
            print(
                f"Benchmarks ({b.rating}): bronze {b.bronze}, silver {b.silver}, "
                f"gold {b.gold}, platinum {b.platinum}"
            )

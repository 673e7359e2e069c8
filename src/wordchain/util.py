"""Formatting and parsing helpers for the command-line interface."""

from wordchain.board import Position


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a string formatted as "HH:MM:SS.ss"."""
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    """Format an integer with commas as thousands separators."""
    return f"{n:,}"


def parse_path(text: str) -> list[Position]:
    """Parse a path typed as whitespace-separated ``r,c`` keys, e.g. ``"0,0 0,1 1,1"``.

    Raises:
        ValueError: If a key is not of the form ``r,c``.
    """
    return [Position.from_key(key) for key in text.split()]


def format_path(path: tuple[Position, ...] | list[Position]) -> str:
    return " ".join(pos.key for pos in path)

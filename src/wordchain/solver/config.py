"""Word chain engine configuration."""

from typing import Literal

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class EngineConfig(BaseSettings):
    """Configuration settings for board generation, search and gameplay."""

    word_list_path: str = "words.txt"
    """Newline-delimited word list used as the dictionary source."""

    grid_size: int = 4
    """Side length of the (square) letter grid. Default: 4."""

    min_words: int = 12
    """Minimum number of discoverable words for a board to be accepted. Default: 12."""

    vowel_ratio_min: float = 0.35
    """Lower bound of the target vowel ratio band used when mutating boards."""

    vowel_ratio_max: float = 0.55
    """Upper bound of the target vowel ratio band used when mutating boards."""

    respawn_count: int = 3
    """Number of least-used tiles overwritten per mutation round. Default: 3."""

    mutation_rounds: int = 4
    """Mutation rounds per candidate board before discarding it. Default: 4."""

    max_attempts: int = 8
    """Maximum number of fresh candidate boards to generate. Default: 8."""

    probe_node_budget: int | None = 30_000
    """Maximum number of search nodes visited by a single probe. None means unbounded."""

    terminal_node_budget: int | None = 250_000
    """Maximum number of search nodes visited by the game-over check. None means unbounded."""

    max_letter_count: int = 4
    """Maximum occurrences of any single letter on a constrained board. Default: 4."""

    sampler_max_retries: int = 12
    """Re-sampling attempts before the constrained sampler falls back to the least-used letter."""

    constrained_generation: bool = True
    """Whether to enforce the per-letter cap and the Q-needs-U repair when generating boards."""

    strict_generation: bool = False
    """Raise GenerationFailed instead of returning a best-effort board. Default: False."""

    special_tiles_enabled: bool = True
    """Whether special tiles may spawn during play. Default: True."""

    special_tile_score_threshold: int | None = None
    """Score at which special tiles start spawning.

    If None (default), the round's bronze benchmark is used, falling back to
    `special_tile_fallback_threshold` when no benchmarks are known.
    """

    special_tile_fallback_threshold: int = 150
    """Spawn threshold used when neither an explicit threshold nor benchmarks are known."""

    special_tile_spawn_chance: float = 0.3
    """Probability that a commit past the threshold spawns new special tiles."""

    special_tile_max_spawn: int = 3
    """Maximum number of special tiles spawned by a single commit (at least 1)."""

    special_tile_min_expiry: int = 1
    """Minimum lifetime of a spawned special tile, in committed words."""

    special_tile_max_expiry: int = 5
    """Maximum lifetime of a spawned special tile, in committed words."""

    multiplier_values: tuple[int, ...] = (2, 3, 4)
    """Values a multiplier tile may carry."""

    special_tile_weights: dict[str, float] = {
        "stone": 0.15,
        "wild": 0.05,
        "xfactor": 0.08,
        "multiplier": 0.12,
        "shuffle": 0.05,
    }
    """Relative spawn weights of each special tile type."""

    wildcard_strategy: Literal["auto", "explicit"] = "auto"
    """How a wild tile's letter is resolved: tried automatically, or supplied by the player."""

    daily_timezone: str = "America/New_York"
    """Timezone used to derive the daily seed date."""

    daily_min_moves: int = 12
    """Lower bound (inclusive) of the seeded daily move limit."""

    daily_max_moves: int = 18
    """Upper bound (inclusive) of the seeded daily move limit."""

    extra_moves_amount: int = 3
    """Moves added by the extra-moves consumable."""

    hint_min_words: int = 3
    """Minimum number of words revealed by a hint."""

    hint_max_words: int = 5
    """Maximum number of words revealed by a hint."""

    verbose: bool = False
    """Print progress reports during dictionary loading and board generation."""

    model_config = SettingsConfigDict(
        env_prefix="WORDCHAIN_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="forbid",
    )


config = EngineConfig()

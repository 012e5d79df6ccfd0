"""Terminal dimensions value object."""

from dataclasses import dataclass

# PTY window size limits (TIOCSWINSZ takes unsigned shorts)
MIN_COLS = 1
MAX_COLS = 1000
MIN_ROWS = 1
MAX_ROWS = 500

DEFAULT_COLS = 80
DEFAULT_ROWS = 24


@dataclass(frozen=True, slots=True)
class TerminalDimensions:
    """Terminal window size (value object)."""

    cols: int
    rows: int

    def __post_init__(self) -> None:
        if not MIN_COLS <= self.cols <= MAX_COLS:
            raise ValueError(f"cols must be between {MIN_COLS} and {MAX_COLS}, got {self.cols}")
        if not MIN_ROWS <= self.rows <= MAX_ROWS:
            raise ValueError(f"rows must be between {MIN_ROWS} and {MAX_ROWS}, got {self.rows}")

    @classmethod
    def default(cls) -> "TerminalDimensions":
        return cls(cols=DEFAULT_COLS, rows=DEFAULT_ROWS)

    @classmethod
    def clamped(cls, cols: int, rows: int) -> "TerminalDimensions":
        """Create dimensions, clamping values into the valid range."""
        return cls(
            cols=max(MIN_COLS, min(MAX_COLS, cols)),
            rows=max(MIN_ROWS, min(MAX_ROWS, rows)),
        )

    def resize(self, cols: int, rows: int) -> "TerminalDimensions":
        """Return new dimensions (immutable)."""
        return TerminalDimensions(cols=cols, rows=rows)

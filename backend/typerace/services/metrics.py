import math

# Standard "characters per word" convention for WPM
CHARS_PER_WORD = 5


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def speed(correct_chars, elapsed_seconds) -> int:
    """Words per minute for ``correct_chars`` typed over ``elapsed_seconds``.

    Zero elapsed time yields 0 instead of a division fault.
    """
    if elapsed_seconds == 0:
        return 0
    return round_half_up((correct_chars / CHARS_PER_WORD) / (elapsed_seconds / 60))


def accuracy_pct(correct_chars, total_chars) -> int:
    """Share of reported characters that were correct, as a percentage.

    Not clamped: callers reporting ``correct_chars > total_chars`` get more
    than 100.
    """
    if total_chars == 0:
        return 0
    return round_half_up(correct_chars / total_chars * 100)


def progress_pct(position, text_length) -> int:
    """Cursor position as a percentage of the passage length, unclamped."""
    if text_length <= 0:
        return 0
    return round_half_up(position / text_length * 100)

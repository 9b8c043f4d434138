"""
Pig Dice - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""


def validate_die_value(value: int, faces: int = 6) -> int:
    """
    Validate a single die face.

    Args:
        value: Face value to validate
        faces: Number of faces on the die

    Returns:
        Validated value

    Raises:
        ValueError: If the value is not an integer in 1..faces
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Die value must be an integer, got {type(value).__name__}.")

    if not (1 <= value <= faces):
        raise ValueError(f"Invalid die value {value}. Must be between 1 and {faces}.")

    return value


def validate_score(score: int, allow_negative: bool = False) -> int:
    """
    Validate a score value.

    Args:
        score: Score to validate
        allow_negative: Whether negative scores are allowed

    Returns:
        Validated score

    Raises:
        ValueError: If score is invalid
    """
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"Score must be an integer, got {type(score).__name__}.")

    if not allow_negative and score < 0:
        raise ValueError(f"Score cannot be negative, got {score}.")

    return score


def validate_target_score(score: int) -> int:
    """Validate the winning score. Must be a positive integer."""
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"Target score must be an integer, got {type(score).__name__}.")

    if score <= 0:
        raise ValueError(f"Target score must be positive, got {score}.")

    return score


def validate_hold_threshold(threshold: int) -> int:
    """Validate the scripted opponent's hold threshold (0 or more)."""
    if isinstance(threshold, bool) or not isinstance(threshold, int):
        raise ValueError(
            f"Hold threshold must be an integer, got {type(threshold).__name__}."
        )

    if threshold < 0:
        raise ValueError(f"Hold threshold cannot be negative, got {threshold}.")

    return threshold


def validate_delay(seconds: float) -> float:
    """Validate a pacing delay in seconds."""
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        raise ValueError(f"Delay must be a number, got {type(seconds).__name__}.")

    if seconds < 0:
        raise ValueError(f"Delay cannot be negative, got {seconds}.")

    return float(seconds)

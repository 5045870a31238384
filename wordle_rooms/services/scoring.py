"""
Scoring Engine

Position-aware letter scoring with correct duplicate-letter handling.
"""

from typing import List, Optional

from ..models.game import Verdict


def score(guess: str, secret: str) -> List[Verdict]:
    """
    Implements the two-pass Wordle letter evaluation algorithm.

    Exact position matches are marked first and consume their secret letter,
    so a letter is never reported as correct or present more often than it
    occurs in the secret.

    Args:
        guess: The guessed word
        secret: The word being guessed

    Returns:
        List[Verdict]: One verdict per letter position

    Raises:
        ValueError: If the words differ in length
    """
    guess_chars: List[Optional[str]] = list(guess.lower())
    secret_chars: List[Optional[str]] = list(secret.lower())

    if len(guess_chars) != len(secret_chars):
        raise ValueError(f"Cannot score '{guess}' against a {len(secret_chars)}-letter word")

    result: List[Optional[Verdict]] = [None] * len(guess_chars)

    # First pass: exact matches
    for i, letter in enumerate(guess_chars):
        if letter == secret_chars[i]:
            result[i] = Verdict.CORRECT
            secret_chars[i] = None
            guess_chars[i] = None

    # Second pass: present letters consume one remaining occurrence
    for i, letter in enumerate(guess_chars):
        if letter is None:
            continue
        if letter in secret_chars:
            result[i] = Verdict.PRESENT
            secret_chars[secret_chars.index(letter)] = None
        else:
            result[i] = Verdict.ABSENT

    return [verdict for verdict in result if verdict is not None]


def is_winning(verdicts: List[Verdict]) -> bool:
    return bool(verdicts) and all(verdict is Verdict.CORRECT for verdict in verdicts)

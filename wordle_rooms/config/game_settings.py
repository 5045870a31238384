"""
Game Configuration Constants Module

This module defines the game rules and the two word dictionaries:
the target words a round's secret is drawn from, and the larger set of
acceptable guesses. Every target word must also be an acceptable guess.
"""

import json
import os
from typing import FrozenSet, List, Final

WORD_LENGTH: Final[int] = 5
"""
Number of letters in every secret word and every guess.
"""

MAX_ATTEMPTS: Final[int] = 6
"""
Maximum number of guess attempts allowed per player per round.
"""

MAX_PLAYERS: Final[int] = 5
"""
Maximum number of connected players in one room.
"""


def _load_word_list(file_name: str) -> List[str]:
    """
    Load a word list from a JSON file stored beside this module.

    Args:
        file_name: JSON file containing an array of words

    Returns:
        List[str]: List of lowercase 5-letter words

    Raises:
        FileNotFoundError: If the JSON file is not found
        ValueError: If the file is malformed, empty or contains invalid words
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, file_name)

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_name}: {e}")

    if not isinstance(word_list, list):
        raise ValueError(f"{file_name} must contain an array of words")

    if not word_list:
        raise ValueError(f"Word list {file_name} cannot be empty")

    lowercase_words = [word.strip().lower() for word in word_list]

    for word in lowercase_words:
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word '{word}' in {file_name} is not {WORD_LENGTH} characters long")
        if not word.isalpha():
            raise ValueError(f"Word '{word}' in {file_name} contains non-alphabetic characters")

    return lowercase_words


# Possible secrets
TARGET_WORDS: Final[List[str]] = _load_word_list('target_words.json')

# Acceptable guesses; always includes every target word
VALID_GUESSES: Final[FrozenSet[str]] = frozenset(_load_word_list('valid_guesses.json')) | frozenset(TARGET_WORDS)


def validate_word_lists(target_words=None, valid_guesses=None) -> bool:
    """
    Validates the integrity and consistency of the two dictionaries.

    This function performs validation to ensure:
    1. Neither list is empty
    2. Every word is exactly 5 lowercase letters
    3. Target words contain no duplicates
    4. Every target word is also an acceptable guess

    Returns:
        bool: True if the word lists pass all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    targets = list(TARGET_WORDS if target_words is None else target_words)
    guesses = set(VALID_GUESSES if valid_guesses is None else valid_guesses)

    if not targets:
        raise ValueError("Target word list cannot be empty")
    if not guesses:
        raise ValueError("Valid guess list cannot be empty")

    for index, word in enumerate(targets):
        if len(word) != WORD_LENGTH or not word.isalpha():
            raise ValueError(f"Target word at index {index} '{word}' is not {WORD_LENGTH} letters")
        if not word.islower():
            raise ValueError(f"Target word at index {index} '{word}' is not in lowercase format")

    if len(targets) != len(set(targets)):
        duplicates = sorted({word for word in targets if targets.count(word) > 1})
        raise ValueError(f"Duplicate words found in target list: {duplicates}")

    missing = sorted(set(targets) - guesses)
    if missing:
        raise ValueError(f"Target words missing from valid guesses: {missing}")

    return True


def get_word_statistics() -> dict:
    """
    Returns basic statistics about the loaded dictionaries.
    """
    letter_frequency = {}
    for word in TARGET_WORDS:
        for char in word:
            letter_frequency[char] = letter_frequency.get(char, 0) + 1

    return {
        "target_words": len(TARGET_WORDS),
        "valid_guesses": len(VALID_GUESSES),
        "most_common_letters": sorted(letter_frequency.items(), key=lambda x: x[1], reverse=True)[:5]
    }

"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules and word dictionaries (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    TARGET_WORDS, VALID_GUESSES, WORD_LENGTH, MAX_ATTEMPTS, MAX_PLAYERS,
    validate_word_lists, get_word_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'TARGET_WORDS', 'VALID_GUESSES', 'WORD_LENGTH', 'MAX_ATTEMPTS', 'MAX_PLAYERS',
    'validate_word_lists', 'get_word_statistics'
]

"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5002))

    # Room Settings
    MAX_PLAYERS = int(os.getenv('MAX_PLAYERS', 5))
    MAX_ATTEMPTS = int(os.getenv('MAX_ATTEMPTS', 6))
    PLAYER_GRACE_SECONDS = int(os.getenv('PLAYER_GRACE_SECONDS', 10 * 60))
    ROOM_IDLE_SECONDS = int(os.getenv('ROOM_IDLE_SECONDS', 30 * 60))
    RESTART_LATCH_SECONDS = float(os.getenv('RESTART_LATCH_SECONDS', 5))
    CLEANUP_INTERVAL_SECONDS = int(os.getenv('CLEANUP_INTERVAL_SECONDS', 60))
    CHAT_MAX_LENGTH = int(os.getenv('CHAT_MAX_LENGTH', 100))
    MASTER_RESET_DISCONNECT_DELAY = float(os.getenv('MASTER_RESET_DISCONNECT_DELAY', 1.5))

    # Persistence Settings
    SNAPSHOT_PATH = os.getenv('SNAPSHOT_PATH', 'game-rooms.json')

    # Commentary Settings
    COMMENTARY_AI_ENABLED = os.getenv('COMMENTARY_AI_ENABLED', 'False').lower() == 'true'
    COMMENTARY_AI_CHANCE = float(os.getenv('COMMENTARY_AI_CHANCE', 0.2))
    COMMENTARY_API_KEY = os.getenv('COMMENTARY_API_KEY')
    COMMENTARY_API_URL = os.getenv('COMMENTARY_API_URL', 'https://api.moonshot.cn/v1/chat/completions')
    COMMENTARY_MODEL = os.getenv('COMMENTARY_MODEL', 'moonshot-v1-8k')
    COMMENTARY_TIMEOUT_SECONDS = float(os.getenv('COMMENTARY_TIMEOUT_SECONDS', 5))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    COMMENTARY_AI_ENABLED = False
    MASTER_RESET_DISCONNECT_DELAY = 0


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

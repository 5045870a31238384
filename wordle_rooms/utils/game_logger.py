"""
Game Logger Module for the Room Server

This module provides structured logging for player actions, server
responses and room events, keyed by connection id and room id.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config


class GameLogger:
    """
    Centralized logging system for the room server.

    Features:
    - Player action tracking by connection id
    - Server response logging
    - Room event logging
    - JSON structured logs for easy parsing
    """

    # Keys never written to the log while a round may still be running
    SENSITIVE_KEYS = ('secret',)

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file handler."""
        logger = logging.getLogger('wordle_rooms')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        # Create log file with date
        log_file = self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

        # File handler for detailed logs
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )

        file_handler.setFormatter(file_formatter)
        console_handler.setFormatter(console_formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          source: Optional[str],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'source': source,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        source: Optional[str],
                        action: str,
                        room_id: Optional[str] = None,
                        **kwargs):
        """
        Log player actions with full context.

        Args:
            source: Connection id or remote address of the caller
            action: Type of action (e.g., 'join_room', 'make_guess')
            room_id: Room identifier if applicable
            **kwargs: Additional details to log
        """
        details = {'room_id': room_id, **kwargs}
        self.logger.info(self._create_log_entry('USER_ACTION', action, source, details))

    def log_server_response(self,
                            source: Optional[str],
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            room_id: Optional[str] = None,
                            **kwargs):
        """
        Log server responses with full context.

        Args:
            source: Connection id or remote address of the caller
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to the client
            room_id: Room identifier if applicable
            **kwargs: Additional details to log
        """
        details = {
            'room_id': room_id,
            'success': success,
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, source, details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.warning(log_message)

    def log_game_event(self,
                       room_id: Optional[str],
                       event: str,
                       **kwargs):
        """
        Log room events (joins, wins, losses, restarts, evictions).

        Args:
            room_id: Room identifier
            event: Type of room event (e.g., 'round_won', 'player_kicked')
            **kwargs: Additional event details
        """
        details = {'room_id': room_id, **kwargs}
        self.logger.info(self._create_log_entry('GAME_EVENT', event, 'system', details))

    def log_error(self,
                  source: Optional[str],
                  error: Exception,
                  action: str,
                  room_id: Optional[str] = None):
        """
        Log errors with full context.

        Args:
            source: Connection id or remote address of the caller
            error: Exception that occurred
            action: Action that was being performed
            room_id: Room identifier if applicable
        """
        details = {
            'room_id': room_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }
        self.logger.error(self._create_log_entry('ERROR', action, source, details))

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Remove secrets and condense room states before logging."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = {key: value for key, value in data.items() if key not in self.SENSITIVE_KEYS}

        if 'state' in sanitized and isinstance(sanitized['state'], dict):
            state = sanitized['state']
            sanitized['state'] = {
                'room_id': state.get('room_id'),
                'game_active': state.get('game_active'),
                'winner': state.get('winner'),
                'player_count': state.get('player_count')
            }

        return sanitized


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)

"""
Commentary Service

Short flavor lines broadcast after guesses. Lines come from a static pool,
or, when configured, from an OpenAI-compatible chat completion endpoint.
"""

import random
from typing import Dict, List, Optional

import requests

from ..models.game import Verdict
from ..utils.game_logger import game_logger


COMMENTARY_POOL: Dict[str, List[str]] = {
    'invalidWord': [
        "Bold spelling. The dictionary respectfully disagrees.",
        "That word must be from a parallel universe.",
        "Points for confidence, none for existence.",
    ],
    'closeGuess': [
        "The answer can hear you knocking.",
        "Warmer. Definitely warmer.",
        "A few letters are pulling their weight.",
    ],
    'firstCorrect': [
        "First green tile of the round. It begins.",
        "One letter locked in. Four to go.",
    ],
    'multipleCorrect': [
        "Those tiles are looking awfully green.",
        "Somebody has been practicing.",
    ],
    'lastAttempt': [
        "Final guess. No pressure. Well, some pressure.",
        "One row left. Choose wisely.",
    ],
    'gameWon': [
        "Victory! Somebody buy that player a dictionary.",
        "Nailed it. The rest of the room is taking notes.",
    ],
    'gameLost': [
        "Six tries, zero mercy. There is always next round.",
        "The word wins this time.",
    ],
    'noProgress': [
        "All gray. A bold strategy of elimination.",
        "Well, now you know what it is not.",
    ],
}

_PROMPTS: Dict[str, str] = {
    'invalidWord': "Player {player_name} tried an invalid word on attempt {attempts}. Make a witty comment about their spelling creativity.",
    'closeGuess': "Player {player_name} made a close guess with some correct letters on attempt {attempts}. Comment on their progress.",
    'firstCorrect': "Player {player_name} got their first letter in the right position on attempt {attempts}. Celebrate this milestone.",
    'gameWon': "Player {player_name} won the game in {attempts} attempts out of {total_players} players. Make a victory comment.",
    'lastAttempt': "Player {player_name} is on their final attempt ({attempts}/6). Create tension without giving hints.",
    'gameLost': "Player {player_name} failed to guess the word in 6 attempts. Console them humorously.",
    'multipleCorrect': "Player {player_name} got multiple letters right on attempt {attempts}. Comment on their improving skills.",
    'noProgress': "Player {player_name} on attempt {attempts} with little progress. Make an encouraging but cheeky remark.",
}

_SYSTEM_PROMPT = (
    "You are a witty, cheeky game commentator for a multiplayer Wordle game. "
    "Provide short, entertaining commentary (max 15 words) without revealing "
    "the answer or giving hints. Be playful and engaging."
)


def analyze_situation(record, verdicts: List[Verdict]) -> str:
    """
    Classify the player's latest guess for commentary.

    Args:
        record: PlayerRecord after the guess was recorded
        verdicts: Verdicts of that guess
    """
    if record.won:
        return 'gameWon'
    if record.attempts >= record.max_attempts:
        return 'gameLost'
    if record.attempts == record.max_attempts - 1:
        return 'lastAttempt'

    greens = sum(1 for verdict in verdicts if verdict is Verdict.CORRECT)
    yellows = sum(1 for verdict in verdicts if verdict is Verdict.PRESENT)

    if greens == 0 and yellows == 0:
        return 'noProgress'
    if greens == 1 and record.attempts == 1:
        return 'firstCorrect'
    if greens >= 2 or (greens >= 1 and yellows >= 2):
        return 'multipleCorrect'
    if greens >= 1 or yellows >= 2:
        return 'closeGuess'
    return 'noProgress'


class CommentaryService:
    """Picks a commentary line, optionally asking a remote model first."""

    def __init__(self,
                 ai_enabled: bool = False,
                 api_key: Optional[str] = None,
                 api_url: Optional[str] = None,
                 model: Optional[str] = None,
                 ai_chance: float = 0.2,
                 timeout: float = 5.0,
                 rng: Optional[random.Random] = None,
                 session: Optional[requests.Session] = None):
        self.ai_enabled = ai_enabled and bool(api_key) and bool(api_url)
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.ai_chance = ai_chance
        self.timeout = timeout
        self._rng = rng or random.Random()
        self._session = session or requests.Session()

    def generate(self, situation: str, context: Dict) -> Optional[Dict[str, str]]:
        """
        Returns a ``{'message', 'style'}`` dict, or None when there is
        nothing to say for the situation.
        """
        if self.ai_enabled and self._rng.random() < self.ai_chance:
            message = self.generate_ai(situation, context)
            if message:
                return {'message': message, 'style': 'ai'}

        lines = COMMENTARY_POOL.get(situation)
        if not lines:
            return None
        return {'message': self._rng.choice(lines), 'style': 'sarcastic'}

    def build_prompt(self, situation: str, context: Dict) -> str:
        values = {
            'player_name': context.get('player_name', 'Someone'),
            'attempts': context.get('attempts', 0),
            'total_players': context.get('total_players', 1),
        }
        template = _PROMPTS.get(situation, "Comment on player {player_name}'s gameplay on attempt {attempts}.")
        return template.format(**values)

    def generate_ai(self, situation: str, context: Dict) -> Optional[str]:
        """Ask the remote model for a line. Any failure yields None."""
        payload = {
            'model': self.model,
            'messages': [
                {'role': 'system', 'content': _SYSTEM_PROMPT},
                {'role': 'user', 'content': self.build_prompt(situation, context)}
            ],
            'temperature': 0.8,
            'max_tokens': 50
        }
        try:
            r = self._session.post(
                self.api_url,
                headers={'Authorization': f'Bearer {self.api_key}'},
                json=payload,
                timeout=self.timeout,
            )
            r.raise_for_status()
            choices = r.json().get('choices') or []
            if not choices:
                game_logger.logger.warning("No AI commentary in response")
                return None
            return choices[0]['message']['content'].strip() or None
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            game_logger.logger.warning(f"AI commentary request failed: {e}")
            return None


# Global service instance
_commentary_service = None


def get_commentary_service() -> Optional[CommentaryService]:
    """Get the global commentary service instance."""
    return _commentary_service


def initialize_commentary_service(config_class) -> CommentaryService:
    """Initialize the global commentary service instance from a config class."""
    global _commentary_service
    _commentary_service = CommentaryService(
        ai_enabled=config_class.COMMENTARY_AI_ENABLED,
        api_key=config_class.COMMENTARY_API_KEY,
        api_url=config_class.COMMENTARY_API_URL,
        model=config_class.COMMENTARY_MODEL,
        ai_chance=config_class.COMMENTARY_AI_CHANCE,
        timeout=config_class.COMMENTARY_TIMEOUT_SECONDS
    )
    return _commentary_service

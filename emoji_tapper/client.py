"""HTTP client for the leaderboard endpoints.

Every call is bounded by a timeout and surfaces failure to the caller as
:class:`LeaderboardClientError`; nothing is retried. Game code that only
wants to record a finished game should use :meth:`submit_result`, which
never raises.
"""

import logging

import requests

from emoji_tapper.services.games.modes import GameMode


logger = logging.getLogger(__name__)

DEFAULT_GAME = 'Emoji Tapper'
DEFAULT_PLATFORM = 'Python'
# (connect, read) seconds
DEFAULT_TIMEOUT = (30.0, 60.0)


class LeaderboardClientError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class LeaderboardClient:
    def __init__(self, base_url, game=DEFAULT_GAME, platform=DEFAULT_PLATFORM, timeout=DEFAULT_TIMEOUT,
                 session=None):
        self.base_url = base_url.rstrip('/')
        self.game = game
        self.platform = platform
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config, platform=None):
        return cls(
            config.get('LEADERBOARD_BASE_URL', 'http://localhost:5000'),
            game=config.get('LEADERBOARD_GAME_NAME', DEFAULT_GAME),
            platform=platform or config.get('LEADERBOARD_PLATFORM', DEFAULT_PLATFORM),
            timeout=(
                float(config.get('LEADERBOARD_REQUEST_TIMEOUT_SEC', DEFAULT_TIMEOUT[0])),
                float(config.get('LEADERBOARD_RESOURCE_TIMEOUT_SEC', DEFAULT_TIMEOUT[1])),
            ),
        )

    def _board(self, mode):
        return {
            'game': self.game,
            'mode': GameMode.from_value(mode).value,
            'platform': self.platform,
        }

    def _request(self, method, endpoint, expected_status, **kwargs):
        url = f"{self.base_url}/{endpoint}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise LeaderboardClientError(f"{endpoint} request failed: {exc}") from exc
        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        if resp.status_code != expected_status or not payload.get('success'):
            message = payload.get('error') or f"{endpoint} failed with HTTP {resp.status_code}"
            raise LeaderboardClientError(message, status_code=resp.status_code)
        return payload

    def submit_score(self, mode, player, score) -> str:
        body = dict(self._board(mode), player=player, score=score)
        return self._request('POST', 'submitScore', 201, json=body)['id']

    def get_top_scores(self, mode, period='all_time', limit=10):
        params = dict(self._board(mode), period=period, limit=limit)
        return self._request('GET', 'getTopScores', 200, params=params)['scores']

    def get_player_best(self, mode, player):
        params = dict(self._board(mode), player=player)
        return self._request('GET', 'getPlayerBest', 200, params=params).get('playerBest')

    def get_leaderboard_stats(self, mode):
        return self._request('GET', 'getLeaderboardStats', 200, params=self._board(mode))['stats']

    def submit_result(self, result, player) -> bool:
        """Fire-and-forget submission of a finished game."""
        try:
            score_id = self.submit_score(result.mode, player, result.score)
        except LeaderboardClientError as exc:
            logger.warning(f"[score-submit-failed] mode={result.mode} player={player} error={exc}")
            return False
        logger.info(f"[score-submitted] id={score_id} mode={result.mode} player={player} score={result.score}")
        return True

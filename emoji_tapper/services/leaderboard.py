"""Leaderboard domain logic over the append-only ``highscores`` table.

Functions here are request-scoped: they take plain values, talk to the
database through ``db.session`` and never keep state between calls.
Validation problems raise :class:`ValidationError`; anything else is left
to propagate so the HTTP layer can turn it into a 500.
"""

import calendar
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func

from emoji_tapper import db
from emoji_tapper.models import HighScore, utcnow


logger = logging.getLogger(__name__)

PERIOD_DAY = 'day'
PERIOD_WEEK = 'week'
PERIOD_MONTH = 'month'
PERIOD_ALL_TIME = 'all_time'
PERIODS = (PERIOD_DAY, PERIOD_WEEK, PERIOD_MONTH, PERIOD_ALL_TIME)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Largest value a 32-bit Integer column holds on every backend
MAX_SCORE = 2 ** 31 - 1

FIELD_LIMITS = {
    'game': ('Game name', 100),
    'mode': ('Game mode', 50),
    'platform': ('Platform', 50),
    'player': ('Player name', 50),
}


class ValidationError(ValueError):
    """Bad caller input; maps to HTTP 400."""


def validate_submission(data) -> dict:
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    cleaned = {}
    for key, (label, max_len) in FIELD_LIMITS.items():
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f'{label} is required and must be a non-empty string')
        if len(value) > max_len:
            raise ValidationError(f'{label} must be {max_len} characters or less')
        cleaned[key] = value.strip()
    score = data.get('score')
    # bool is an int subclass; True is not a score
    if isinstance(score, bool) or not isinstance(score, int) or score < 0:
        raise ValidationError('Score must be a non-negative integer')
    if score > MAX_SCORE:
        raise ValidationError(f'Score must be {MAX_SCORE} or less')
    cleaned['score'] = score
    return cleaned


def require_params(params: dict, *names) -> dict:
    values = {name: (params.get(name) or '').strip() for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        joined = ', '.join(names)
        raise ValidationError(f'{joined} parameters are required')
    return values


def parse_period(value: Optional[str]) -> str:
    period = (value or PERIOD_ALL_TIME).strip()
    if period not in PERIODS:
        raise ValidationError('Invalid period. Must be one of: day, week, month, all_time')
    return period


def parse_limit(value) -> int:
    if value is None or value == '':
        return DEFAULT_LIMIT
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError('Limit must be an integer')
    if limit < 1 or limit > MAX_LIMIT:
        raise ValidationError(f'Limit must be between 1 and {MAX_LIMIT}')
    return limit


def _months_back(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Start of a leaderboard window as naive UTC, or None for all time.

    Windows are anchored to local midnight: today, seven days ago, or the
    same day one calendar month ago.
    """
    if period == PERIOD_ALL_TIME:
        return None
    local_now = (now or datetime.now(timezone.utc)).astimezone()
    if period == PERIOD_DAY:
        start = local_now
    elif period == PERIOD_WEEK:
        start = local_now - timedelta(days=7)
    elif period == PERIOD_MONTH:
        start = _months_back(local_now, 1)
    else:
        raise ValidationError('Invalid period. Must be one of: day, week, month, all_time')
    start = start.replace(hour=0, minute=0, second=0, microsecond=0)
    return start.astimezone(timezone.utc).replace(tzinfo=None)


def _board_query(game: str, mode: str, platform: str):
    return HighScore.query.filter_by(game=game, mode=mode, platform=platform)


def submit_score(data) -> HighScore:
    fields = validate_submission(data)
    entry = HighScore(submitted_at=utcnow(), **fields)
    db.session.add(entry)
    db.session.commit()
    logger.info(f"[score-submit] id={entry.id} game={entry.game} mode={entry.mode} platform={entry.platform} "
                f"player={entry.player} score={entry.score}")
    return entry


def get_top_scores(game: str, mode: str, platform: str, period: str = PERIOD_ALL_TIME, limit: int = DEFAULT_LIMIT):
    query = _board_query(game, mode, platform)
    start = period_start(period)
    if start is not None:
        query = query.filter(HighScore.submitted_at >= start)
    # Secondary keys keep ties in a stable order between calls
    query = query.order_by(HighScore.score.desc(), HighScore.submitted_at.asc(), HighScore.id.asc())
    return query.limit(limit).all()


def get_player_best(game: str, mode: str, platform: str, player: str) -> Optional[HighScore]:
    return (
        _board_query(game, mode, platform)
        .filter_by(player=player)
        .order_by(HighScore.score.desc(), HighScore.submitted_at.asc(), HighScore.id.asc())
        .first()
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_leaderboard_stats(game: str, mode: str, platform: str) -> dict:
    total, unique_players, highest, average = (
        db.session.query(
            func.count(HighScore.id),
            func.count(func.distinct(HighScore.player)),
            func.max(HighScore.score),
            func.avg(HighScore.score),
        )
        .filter(HighScore.game == game, HighScore.mode == mode, HighScore.platform == platform)
        .one()
    )
    if not total:
        return {'totalScores': 0, 'uniquePlayers': 0, 'highestScore': 0, 'averageScore': 0}
    return {
        'totalScores': int(total),
        'uniquePlayers': int(unique_players or 0),
        'highestScore': int(highest or 0),
        'averageScore': _round_half_up(float(average or 0)),
    }

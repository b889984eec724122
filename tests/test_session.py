import pytest

from emoji_tapper.services.games import (
    ClassicGameEngine,
    EngineObserver,
    GameMode,
    GameSession,
    PenguinBallEngine,
    create_engine,
)
from emoji_tapper.services.games.levels import FrenzyLevel, get_level


def test_game_mode_lookup():
    assert GameMode.from_value('Classic') is GameMode.CLASSIC
    assert GameMode.from_value('Penguin Ball') is GameMode.PENGUIN_BALL
    assert GameMode.from_value('PENGUIN_BALL') is GameMode.PENGUIN_BALL
    assert GameMode.from_value('penguin_ball') is GameMode.PENGUIN_BALL
    assert GameMode.from_value(GameMode.CLASSIC) is GameMode.CLASSIC
    assert GameMode.PENGUIN_BALL.storage_key == 'PenguinBall'
    with pytest.raises(ValueError):
        GameMode.from_value('Snake')


def test_get_level():
    assert get_level('frenzy') == FrenzyLevel()
    assert get_level(' Basic ').name == 'Basic'
    with pytest.raises(KeyError):
        get_level('impossible')


def test_create_engine_per_mode(store, scheduler):
    classic = create_engine('Classic', store, scheduler=scheduler, level='selective')
    assert isinstance(classic, ClassicGameEngine)
    assert classic.level.name == 'Selective'
    penguin = create_engine(GameMode.PENGUIN_BALL, store, scheduler=scheduler, max_rounds=10)
    assert isinstance(penguin, PenguinBallEngine)
    assert penguin.max_rounds == 10


def test_mode_switch_refused_during_game(store, scheduler):
    session = GameSession(store, scheduler=scheduler)
    session.start()
    assert not session.select_mode(GameMode.PENGUIN_BALL)
    assert session.mode is GameMode.CLASSIC


def test_mode_switch_discards_engine(store, scheduler, rng):
    session = GameSession(store, scheduler=scheduler, rng=rng, max_rounds=2)
    old = session.engine
    assert session.select_mode('Penguin Ball')
    assert session.engine is not old
    assert session.mode is GameMode.PENGUIN_BALL
    assert session.engine.max_rounds == 2
    session.start()
    assert scheduler.pending() == 1
    session.close()
    assert scheduler.pending() == 0
    assert not session.is_active


def test_session_tracks_result_and_forwards_events(store, scheduler):
    class Forwarded(EngineObserver):
        def __init__(self):
            self.changed = 0
            self.ended = []

        def on_entities_changed(self, engine):
            self.changed += 1

        def on_game_ended(self, engine, result):
            self.ended.append(result)

    forwarded = Forwarded()
    session = GameSession(store, scheduler=scheduler, observer=forwarded)
    session.start()
    assert forwarded.changed == 1
    tapped = session.engine.entities[0]
    session.tap(tapped.id)
    scheduler.advance(30.0)
    assert not session.is_active
    assert len(forwarded.ended) == 1
    assert session.last_result.score == 1
    assert session.is_new_high_score


def test_broken_observer_does_not_break_engine(store, scheduler):
    class Broken(EngineObserver):
        def on_entities_changed(self, engine):
            raise RuntimeError('boom')

    session = GameSession(store, scheduler=scheduler, observer=Broken())
    session.start()
    assert session.is_active
    assert len(session.engine.entities) == 1

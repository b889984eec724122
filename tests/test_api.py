from datetime import timedelta

from emoji_tapper import db
from emoji_tapper.models import HighScore, utcnow


BOARD = {'game': 'Emoji Tapper', 'mode': 'Classic', 'platform': 'iOS'}


def _submit(client, player, score, **overrides):
    body = dict(BOARD, player=player, score=score)
    body.update(overrides)
    return client.post('/submitScore', json=body)


def _insert(player, score, age=timedelta(0), **overrides):
    fields = dict(BOARD, player=player, score=score)
    fields.update(overrides)
    entry = HighScore(submitted_at=utcnow() - age, **fields)
    db.session.add(entry)
    db.session.commit()
    return entry


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    data = res.get_json()
    assert {m['name'] for m in data['modes']} == {'Classic', 'Penguin Ball'}


def test_submit_score(client):
    res = _submit(client, 'Josh', 115)
    assert res.status_code == 201
    data = res.get_json()
    assert data['success'] is True
    stored = db.session.get(HighScore, data['id'])
    assert stored.player == 'Josh'
    assert stored.score == 115


def test_submit_trims_and_keeps_duplicates(client):
    assert _submit(client, '  Alice ', 10).status_code == 201
    assert _submit(client, 'Alice', 10).status_code == 201
    assert HighScore.query.filter_by(player='Alice').count() == 2


def test_submit_rejects_negative_score(client):
    res = _submit(client, 'Mallory', -5)
    assert res.status_code == 400
    data = res.get_json()
    assert data['success'] is False
    assert 'non-negative integer' in data['error']
    assert HighScore.query.count() == 0


def test_submit_validation(client):
    assert _submit(client, 'Bob', 1.5).status_code == 400
    assert _submit(client, 'Bob', True).status_code == 400
    assert _submit(client, 'Bob', '10').status_code == 400
    assert _submit(client, 'x' * 51, 10).status_code == 400
    assert _submit(client, 'Bob', 10, mode='m' * 51).status_code == 400
    assert _submit(client, 'Bob', 10, game='').status_code == 400
    assert _submit(client, '   ', 10).status_code == 400
    body = dict(BOARD, score=10)
    assert client.post('/submitScore', json=body).status_code == 400
    assert client.post('/submitScore', data='nope', content_type='text/plain').status_code == 400
    assert HighScore.query.count() == 0
    assert _submit(client, 'x' * 50, 0).status_code == 201


def test_submit_rejects_oversized_score(client):
    res = _submit(client, 'Mallory', 2 ** 70)
    assert res.status_code == 400
    assert res.get_json()['success'] is False
    assert HighScore.query.count() == 0


def test_top_scores_order_and_limit(client):
    for player, score in [('Josh', 115), ('Alice', 98), ('Bob', 87), ('Carol', 123), ('David', 76)]:
        _submit(client, player, score)
    _submit(client, 'Eve', 500, platform='macOS')
    res = client.get('/getTopScores', query_string=dict(BOARD, limit=3))
    assert res.status_code == 200
    data = res.get_json()
    assert data['success'] is True
    assert [s['player'] for s in data['scores']] == ['Carol', 'Josh', 'Alice']
    assert data['count'] == 3
    assert data['period'] == 'all_time'
    assert data['platform'] == 'iOS'
    assert data['scores'][0]['datetime'].endswith('Z')


def test_top_scores_are_stable(client):
    for player in ['A', 'B', 'C', 'D']:
        _submit(client, player, 50)
    _submit(client, 'E', 60)
    first = client.get('/getTopScores', query_string=BOARD).get_json()['scores']
    second = client.get('/getTopScores', query_string=BOARD).get_json()['scores']
    assert first == second
    assert first[0]['player'] == 'E'


def test_top_scores_period_filter(client):
    _insert('Today', 10)
    _insert('ThreeDays', 20, age=timedelta(days=3))
    _insert('TwentyDays', 30, age=timedelta(days=20))
    _insert('Ancient', 40, age=timedelta(days=90))

    def players(period):
        res = client.get('/getTopScores', query_string=dict(BOARD, period=period))
        return {s['player'] for s in res.get_json()['scores']}

    assert players('day') == {'Today'}
    assert players('week') == {'Today', 'ThreeDays'}
    assert players('month') == {'Today', 'ThreeDays', 'TwentyDays'}
    assert players('all_time') == {'Today', 'ThreeDays', 'TwentyDays', 'Ancient'}


def test_top_scores_bad_params(client):
    assert client.get('/getTopScores', query_string={'game': 'Emoji Tapper'}).status_code == 400
    assert client.get('/getTopScores', query_string=dict(BOARD, period='year')).status_code == 400
    for limit in ('0', '101', 'abc'):
        res = client.get('/getTopScores', query_string=dict(BOARD, limit=limit))
        assert res.status_code == 400
        assert res.get_json()['success'] is False
    assert client.get('/getTopScores', query_string=dict(BOARD, limit='100')).status_code == 200


def test_player_best(client):
    _submit(client, 'Josh', 40)
    _submit(client, 'Josh', 90)
    _submit(client, 'Josh', 60)
    _submit(client, 'Josh', 999, mode='Penguin Ball')
    res = client.get('/getPlayerBest', query_string=dict(BOARD, player='Josh'))
    assert res.status_code == 200
    assert res.get_json()['playerBest']['score'] == 90

    res = client.get('/getPlayerBest', query_string=dict(BOARD, player='Nobody'))
    data = res.get_json()
    assert data['success'] is True
    assert data['playerBest'] is None

    assert client.get('/getPlayerBest', query_string=BOARD).status_code == 400


def test_stats_on_empty_board(client):
    res = client.get('/getLeaderboardStats', query_string=BOARD)
    assert res.status_code == 200
    stats = res.get_json()['stats']
    assert stats == dict(BOARD, totalScores=0, uniquePlayers=0, highestScore=0, averageScore=0)


def test_stats(client):
    _submit(client, 'Josh', 10)
    _submit(client, 'Josh', 20)
    _submit(client, 'Alice', 25)
    _submit(client, 'Zed', 1000, platform='watchOS')
    stats = client.get('/getLeaderboardStats', query_string=BOARD).get_json()['stats']
    assert stats['totalScores'] == 3
    assert stats['uniquePlayers'] == 2
    assert stats['highestScore'] == 25
    assert stats['averageScore'] == 18


def test_stats_average_rounds_half_up(client):
    _submit(client, 'A', 1)
    _submit(client, 'B', 2)
    stats = client.get('/getLeaderboardStats', query_string=BOARD).get_json()['stats']
    assert stats['averageScore'] == 2


def test_preflight_and_cors(client):
    res = client.options('/submitScore', headers={
        'Origin': 'http://example.com',
        'Access-Control-Request-Method': 'POST',
    })
    assert res.status_code == 204
    assert res.headers.get('Access-Control-Allow-Origin') in ('*', 'http://example.com')
    res = client.get('/getTopScores', query_string=BOARD, headers={'Origin': 'http://example.com'})
    assert res.headers.get('Access-Control-Allow-Origin') in ('*', 'http://example.com')


def test_wrong_method(client):
    res = client.get('/submitScore')
    assert res.status_code == 405
    assert res.get_json() == {'success': False, 'error': 'Method not allowed'}
    assert client.post('/getTopScores', json={}).status_code == 405
    assert client.delete('/getPlayerBest').status_code == 405
    assert client.put('/getLeaderboardStats').status_code == 405


def test_storage_failure_is_opaque(client, monkeypatch):
    from emoji_tapper.services import leaderboard as svc

    def boom(*args, **kwargs):
        raise RuntimeError('database unavailable')

    monkeypatch.setattr(svc, 'get_leaderboard_stats', boom)
    res = client.get('/getLeaderboardStats', query_string=BOARD)
    assert res.status_code == 500
    assert res.get_json() == {'success': False, 'error': 'Internal server error'}

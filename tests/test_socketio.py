from emoji_tapper import socketio_events


def _received(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def _ctx():
    # Newest session opened on /ws
    return [ctx for ctx in socketio_events._sessions.values() if ctx['observer'].namespace == '/ws'][-1]


def test_connect_opens_session(sio_client):
    assert sio_client.is_connected('/ws')
    connected = _received(sio_client, 'connected')
    assert connected
    state = connected[0]['state']
    assert state['mode'] == 'Classic'
    assert state['is_active'] is False


def test_classic_game_over_socket(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('start_game', {'player': 'Josh'}, namespace='/ws')
    states = _received(sio_client, 'state_update')
    assert states[-1]['is_active'] is True
    assert len(states[-1]['entities']) == 1

    sio_client.emit('tap', {'entity_id': states[-1]['entities'][0]['id']}, namespace='/ws')
    assert _received(sio_client, 'state_update')[-1]['score'] == 1

    # Mode is locked while a game runs
    sio_client.emit('select_mode', {'mode': 'Penguin Ball'}, namespace='/ws')
    errors = _received(sio_client, 'error')
    assert errors and 'in progress' in errors[0]['message']

    _ctx()['scheduler'].advance(30)
    ended = _received(sio_client, 'game_ended')
    assert len(ended) == 1
    assert ended[0]['mode'] == 'Classic'

    sio_client.emit('get_state', namespace='/ws')
    assert _received(sio_client, 'state_update')[-1]['is_active'] is False


def test_tap_requires_entity_id(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('tap', {}, namespace='/ws')
    assert _received(sio_client, 'error')[0]['message'] == 'entity_id is required'


def test_unknown_mode_and_level(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('select_mode', {'mode': 'Snake'}, namespace='/ws')
    assert _received(sio_client, 'error')
    sio_client.emit('set_level', {'level': 'Impossible'}, namespace='/ws')
    assert 'Unknown level' in _received(sio_client, 'error')[0]['message']
    sio_client.emit('set_level', {'level': 'Frenzy'}, namespace='/ws')
    assert _received(sio_client, 'state_update')[-1]['level'] == 'Frenzy'


def test_penguin_ball_round_flow(sio_client):
    sio_client.emit('select_mode', {'mode': 'Penguin Ball'}, namespace='/ws')
    sio_client.emit('start_game', namespace='/ws')
    state = _received(sio_client, 'state_update')[-1]
    assert state['mode'] == 'Penguin Ball'
    assert state['current_round'] == 1
    assert state['total_entities'] >= 80

    penguin = next(e for e in state['entities'] if e['kind'] == 'penguin')
    sio_client.emit('tap', {'entity_id': penguin['id']}, namespace='/ws')
    state = _received(sio_client, 'state_update')[-1]
    assert state['is_round_complete'] is True
    assert state['round_scores'] == [state['score']]

    # Nothing is removed while the round waits for the player
    _ctx()['scheduler'].advance(10)
    sio_client.get_received('/ws')

    sio_client.emit('proceed', namespace='/ws')
    state = _received(sio_client, 'state_update')[-1]
    assert state['current_round'] == 2
    assert state['is_round_complete'] is False


def test_disconnect_closes_session(flask_app, sio_client):
    sio_client.emit('start_game', namespace='/ws')
    ctx = _ctx()
    sio_client.disconnect(namespace='/ws')
    assert ctx not in socketio_events._sessions.values()
    assert ctx['session'].engine.is_active is False


def test_display_area_must_be_finite(sio_client):
    sio_client.emit('select_mode', {'mode': 'Penguin Ball'}, namespace='/ws')
    sio_client.get_received('/ws')
    for area in ('inf', 'nan', 'abc'):
        sio_client.emit('set_display_area', {'area': area}, namespace='/ws')
        assert _received(sio_client, 'error')
    sio_client.emit('start_game', namespace='/ws')
    state = _received(sio_client, 'state_update')[-1]
    assert state['current_round'] == 1
    assert state['total_entities'] == 80

def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_room_state_when_empty(client):
    res = client.get('/api/room/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['phase'] == 'waiting_for_players'
    assert state['turn'] == 'X'
    assert state['winner'] is None
    assert state['winLine'] == []
    assert state['timer'] == 3
    assert state['players'] == {'X': False, 'O': False}
    assert len(state['board']) == 400


def test_room_state_follows_sockets(client, sio_client):
    state = client.get('/api/room/state').get_json()
    assert state['players'] == {'X': True, 'O': False}
    assert state['spectators'] == 0

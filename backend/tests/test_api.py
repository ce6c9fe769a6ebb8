def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['rooms'] == 0


def test_room_state(client, flask_app):
    registry = flask_app.extensions['rooms']
    code, _ = registry.create_room('sid-a')

    res = client.get(f'/api/rooms/{code.lower()}')
    assert res.status_code == 200
    state = res.get_json()
    assert state['code'] == code
    assert state['status'] == 'waiting'
    assert state['players'] == {'X': True, 'O': False}
    assert client.get('/').get_json()['rooms'] == 1


def test_room_state_not_found(client):
    res = client.get('/api/rooms/NOPE00')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Room not found'}


def test_rooms_cli(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['rooms'])
    assert 'No live rooms.' in result.output

    code, _ = flask_app.extensions['rooms'].create_room('sid-a')
    result = runner.invoke(args=['rooms'])
    assert code in result.output
    assert 'waiting' in result.output

import json
import os

from countdown_board.models import now_ms
from countdown_board.services.countdowns import board


def test_index_renders_shell(client):
    res = client.get('/')
    assert res.status_code == 200
    assert b'Test Board' in res.data


def test_health_reports_counts(client, frozen_clock):
    now = frozen_clock['now']
    board.registry.add(0, 0, 30, ('Alice', '#ff0000'), now=now)
    board.registry.add(1, 0, 10, ('Alice', '#ff0000'), now=now - 20_000)
    res = client.get('/health')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'ok'
    assert data['countdowns'] == {'active': 1, 'total': 2}
    assert data['users'] == 0
    assert data['uptimeSeconds'] >= 0


def test_health_counts_connected_sessions(client, sio_client):
    data = client.get('/health').get_json()
    assert data['users'] == 1


def test_liveness_probe(client):
    data = client.get('/test').get_json()
    assert 'timestamp' in data


def test_list_and_get_countdowns(client, frozen_clock):
    item = board.add_countdown(2, 3, 0, 30, creator={'name': 'Alice', 'color': '#ff0000'})
    listed = client.get('/api/countdowns').get_json()
    assert [c['id'] for c in listed] == [item.id]
    assert listed[0]['endTime'] == frozen_clock['now'] + 30_000

    res = client.get(f'/api/countdowns/{item.id}')
    assert res.status_code == 200
    assert res.get_json()['remainingMs'] == 30_000

    res = client.get('/api/countdowns/999')
    assert res.status_code == 404
    assert 'error' in res.get_json()


def test_snapshot_loaded_at_startup(make_app, snapshot_path):
    now = now_ms()
    with open(snapshot_path, 'w') as fh:
        json.dump({
            'countdowns': [
                {'id': 4, 'x': 0, 'y': 0, 'endTime': now + 600_000, 'createdAt': now,
                 'createdBy': 'Alice', 'createdByColor': '#ff0000'},
                {'id': 5, 'x': 1, 'y': 0, 'endTime': now - 3_600_000, 'createdAt': now - 3_700_000,
                 'createdBy': 'Bob', 'createdByColor': '#00ff00'},
            ],
            'nextId': 2,
        }, fh)
    app = make_app()
    client = app.test_client()
    listed = client.get('/api/countdowns').get_json()
    assert [c['id'] for c in listed] == [4]
    assert board.registry.next_id == 6


def test_board_reset_command(flask_app, snapshot_path):
    board.add_countdown(0, 0, 1, 0)
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['board-reset'])
    assert result.exit_code == 0
    assert len(board.registry) == 0
    with open(snapshot_path) as fh:
        assert json.load(fh)['countdowns'] == []


def test_board_status_command(flask_app):
    board.add_countdown(0, 0, 1, 0, creator={'name': 'Alice'})
    result = flask_app.test_cli_runner().invoke(args=['board-status'])
    assert result.exit_code == 0
    assert '1 active / 1 stored countdowns' in result.output


def test_board_status_leaves_snapshot_untouched(flask_app, snapshot_path):
    result = flask_app.test_cli_runner().invoke(args=['board-status'])
    assert result.exit_code == 0
    assert 'No snapshot' in result.output
    assert board.flush_if_dirty() is False
    assert not os.path.exists(snapshot_path)


def test_failed_save_is_retried_on_exit_flush(flask_app, snapshot_path, tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('x')
    board.store.path = str(blocker / 'data.json')
    board.add_countdown(0, 0, 1, 0)

    board.store.path = snapshot_path
    assert board.flush_if_dirty() is True
    with open(snapshot_path) as fh:
        assert len(json.load(fh)['countdowns']) == 1
    assert board.flush_if_dirty() is False

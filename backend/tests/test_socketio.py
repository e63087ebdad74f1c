import time

import pytest

from conftest import TestConfig
from fourpics.server import create_app


def events(received, name):
    return [pkt['args'][0] for pkt in received if pkt['name'] == name]


def last_state(sio_client):
    states = events(sio_client.get_received(), 'game:state')
    assert states, 'expected a game:state broadcast'
    return states[-1]


def join(connect, name):
    c = connect()
    c.emit('join', name)
    return c


def test_connect_receives_current_state(connect):
    c = connect()
    assert c.is_connected()
    states = events(c.get_received(), 'game:state')
    assert states and states[0]['phase'] == 'lobby'


def test_join_replies_and_broadcasts(connect):
    watcher = connect()
    watcher.get_received()

    alice = join(connect, 'Alice')
    received = alice.get_received()
    assert events(received, 'joined') == [{'name': 'Alice', 'isAdmin': False}]

    state = last_state(watcher)
    assert state['players'] == [{'name': 'Alice', 'score': 0, 'rank': 1}]
    assert state['chatMessages'][-1]['text'] == 'Alice has joined the game!'


def test_admin_join(connect):
    admin = join(connect, 'admin')
    received = admin.get_received()
    assert events(received, 'joined') == [{'name': 'admin', 'isAdmin': True}]
    assert events(received, 'game:state')[-1]['players'] == []


def test_name_taken_only_notifies_offender(connect):
    alice = join(connect, 'Alice')
    alice.get_received()

    impostor = join(connect, 'ALICE')
    received = impostor.get_received()
    assert events(received, 'join:error') == ['That name is already taken! Try a different one.']
    assert events(received, 'joined') == []
    assert events(alice.get_received(), 'game:state') == []


def test_blank_join_is_ignored(connect):
    c = connect()
    c.get_received()
    c.emit('join', '   ')
    assert c.get_received() == []


def test_non_admin_actions_are_silently_ignored(connect):
    alice = join(connect, 'Alice')
    alice.get_received()
    for event in ('admin:start', 'admin:next', 'admin:reveal', 'admin:reset'):
        alice.emit(event)
    assert alice.get_received() == []


def test_full_round_flow(connect):
    admin = join(connect, 'ADMIN')
    g1 = join(connect, 'Guesser1')
    g2 = join(connect, 'Guesser2')
    g3 = join(connect, 'Guesser3')
    for c in (admin, g1, g2, g3):
        c.get_received()

    admin.emit('admin:start')
    state = last_state(g1)
    assert state['phase'] == 'playing'
    assert state['images'] == ['a1.jpg', 'a2.jpg', 'a3.jpg', 'a4.jpg']
    assert state['revealedWord'] is None
    assert state['wordLength'] == 5

    g2.emit('chat', 'apple')
    g1.emit('chat', 'Apple')
    state = last_state(g3)
    assert state['correctOrder'] == [
        {'name': 'Guesser2', 'points': 3},
        {'name': 'Guesser1', 'points': 2},
    ]
    assert [(p['name'], p['score']) for p in state['players']] == [
        ('Guesser2', 3),
        ('Guesser1', 2),
        ('Guesser3', 0),
    ]
    assert all('apple' not in m['text'].lower() for m in state['chatMessages'] if not m['system'])

    admin.emit('admin:reveal')
    state = last_state(g3)
    assert state['revealed'] is True
    assert state['revealedWord'] == 'Apple'

    admin.emit('admin:next')
    admin.emit('admin:next')
    admin.emit('admin:next')
    state = last_state(g3)
    assert state['phase'] == 'finished'
    assert state['chatMessages'][-1]['text'] == 'Game Over! Final scores are in!'

    admin.emit('admin:reset')
    state = last_state(g3)
    assert state['phase'] == 'lobby'
    assert state['chatMessages'] == []
    assert all(p['score'] == 0 for p in state['players'])


def test_disconnect_and_reconnect_restores_score(connect, flask_app):
    admin = join(connect, 'ADMIN')
    bob = join(connect, 'Bob')
    join(connect, 'Carol')
    admin.emit('admin:start')
    bob.emit('chat', 'apple')
    admin.get_received()

    bob.disconnect()
    state = last_state(admin)
    assert state['chatMessages'][-1]['text'] == 'Bob disconnected.'
    assert [p['name'] for p in state['players']] == ['Carol']

    bob_again = join(connect, 'BOB')
    received = bob_again.get_received()
    assert events(received, 'joined') == [{'name': 'BOB', 'isAdmin': False}]
    state = events(received, 'game:state')[-1]
    assert {'name': 'BOB', 'score': 2, 'rank': 1} in state['players']
    assert state['chatMessages'][-1]['text'] == 'BOB has joined the game! (reconnected, 2 pts restored!)'
    assert len(flask_app.extensions['fourpics'].cache) == 0


class TimedConfig(TestConfig):
    ROUND_DURATION_SEC = 1


@pytest.fixture()
def timed_app():
    return create_app(TimedConfig)


def test_timer_ticks_and_auto_reveals(timed_app):
    app, socketio = timed_app
    admin = socketio.test_client(app)
    guesser = socketio.test_client(app)
    try:
        admin.emit('join', 'ADMIN')
        guesser.emit('join', 'Alice')
        admin.emit('admin:start')
        guesser.get_received()

        ticks, states = [], []
        deadline = time.time() + 5.0
        while time.time() < deadline and not any(s['revealed'] for s in states):
            received = guesser.get_received()
            ticks.extend(events(received, 'timer:tick'))
            states.extend(events(received, 'game:state'))
            time.sleep(0.1)

        assert ticks == [0]
        assert states[-1]['revealed'] is True
        assert states[-1]['revealedWord'] == 'Apple'
        reveal_msgs = [m for m in states[-1]['chatMessages'] if m['reveal']]
        assert [m['text'] for m in reveal_msgs] == ["Time's up! The answer was: Apple"]
    finally:
        admin.disconnect()
        guesser.disconnect()


def test_events_without_payload_are_ignored(connect):
    c = connect()
    c.get_received()
    c.emit('join')
    assert c.is_connected()
    assert c.get_received() == []

    alice = join(connect, 'Alice')
    alice.get_received()
    alice.emit('chat')
    assert alice.is_connected()
    assert alice.get_received() == []

import asyncio

import socketio

from quodyssey.push import SocketIOPush, Subscription


class FakeSocket:
    """Records what SocketIOPush does with its Socket.IO client."""

    def __init__(self):
        self.connected = False
        self.handlers = {}
        self.connects = []
        self.emitted = []

    def on(self, event, handler, namespace=None):
        self.handlers[(event, namespace)] = handler

    async def connect(self, url, namespaces=None):
        self.connected = True
        self.connects.append((url, namespaces))
        self.namespace = (namespaces or ['/'])[0]
        await self.handlers[('connect', self.namespace)]()

    async def emit(self, event, data, namespace=None):
        self.emitted.append((event, data, namespace))

    async def disconnect(self):
        await self.drop()

    async def drop(self):
        self.connected = False
        await self.handlers[('disconnect', self.namespace)]('transport close')

    async def reconnect(self):
        self.connected = True
        await self.handlers[('connect', self.namespace)]()

    async def deliver(self, event, data, namespace='/ws'):
        await self.handlers[(event, namespace)](data)


def test_default_client_is_async_socketio():
    push = SocketIOPush('http://quiz.test')
    assert isinstance(push.sio, socketio.AsyncClient)


def test_register_connects_and_joins_once():
    sock = FakeSocket()
    push = SocketIOPush('http://quiz.test', client=sock)

    async def scenario():
        await push.register('G1', lambda data: None)
        await push.register('G1', lambda data: None)
        await push.register(42, lambda data: None)

    asyncio.run(scenario())
    assert sock.connects == [('http://quiz.test', ['/ws'])]
    assert sock.emitted == [
        ('join_game', {'game_code': 'G1'}, '/ws'),
        ('join_game', {'game_code': '42'}, '/ws'),
    ]


def test_question_events_reach_only_their_game():
    sock = FakeSocket()
    push = SocketIOPush('http://quiz.test', client=sock)
    received = {'G1': [], 'G2': []}

    async def scenario():
        await push.register('G1', received['G1'].append)
        await push.register('G2', received['G2'].append)
        await sock.deliver('question', {'gameId': 'G1', 'round': 4})
        await sock.deliver('question', {'game_code': 'G2', 'round': 7})
        await sock.deliver('question', {'round': 9})

    asyncio.run(scenario())
    assert received == {'G1': [{'gameId': 'G1', 'round': 4}], 'G2': [{'game_code': 'G2', 'round': 7}]}


def test_cancelled_subscription_gets_nothing():
    sock = FakeSocket()
    push = SocketIOPush('http://quiz.test', client=sock)
    received = []

    async def scenario():
        subscription = await push.register('G1', received.append)
        assert isinstance(subscription, Subscription)
        subscription.cancel()
        subscription.cancel()
        await sock.deliver('question', {'gameId': 'G1', 'round': 2})

    asyncio.run(scenario())
    assert received == []


def test_close_disconnects():
    sock = FakeSocket()
    push = SocketIOPush('http://quiz.test', namespace='/game', client=sock)

    async def scenario():
        await push.register('G1', lambda data: None)
        await push.close()

    asyncio.run(scenario())
    assert not sock.connected
    assert sock.connects == [('http://quiz.test', ['/game'])]


def test_games_are_rejoined_after_reconnect():
    sock = FakeSocket()
    push = SocketIOPush('http://quiz.test', client=sock)
    received = []

    async def scenario():
        await push.register('G1', received.append)
        await sock.drop()
        await sock.reconnect()
        await push.register('G1', received.append)
        await sock.deliver('question', {'gameId': 'G1', 'round': 2})

    asyncio.run(scenario())
    joins = [data for event, data, _ in sock.emitted if event == 'join_game']
    assert joins == [{'game_code': 'G1'}, {'game_code': 'G1'}]
    assert len(received) == 2


def test_cancelled_games_are_not_rejoined():
    sock = FakeSocket()
    push = SocketIOPush('http://quiz.test', client=sock)

    async def scenario():
        subscription = await push.register('G1', lambda data: None)
        subscription.cancel()
        await sock.drop()
        await sock.reconnect()
        await push.register('G2', lambda data: None)

    asyncio.run(scenario())
    joins = [data for event, data, _ in sock.emitted if event == 'join_game']
    assert joins == [{'game_code': 'G1'}, {'game_code': 'G2'}]

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Set

import socketio

logger = logging.getLogger(__name__)

QuestionCallback = Callable[[Dict[str, Any]], None]


class Subscription:
    """Handle returned by ``register``; ``cancel()`` stops further delivery."""

    def __init__(self, on_cancel: Callable[[], None]):
        self._on_cancel = on_cancel
        self.cancelled = False

    def cancel(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._on_cancel()


class SocketIOPush:
    """Round announcements delivered over Socket.IO.

    The client joins the ``game:<id>`` room through the server's
    ``join_game`` event and receives a ``question`` event for every new
    round. The connection is opened lazily on the first registration.
    """

    def __init__(self, url: str, namespace: str = '/ws', client=None):
        self.url = url
        self.namespace = namespace
        self.sio = client or socketio.AsyncClient(reconnection=True)
        self._callbacks: Dict[str, List[QuestionCallback]] = defaultdict(list)
        self._joined: Set[str] = set()
        self.sio.on('question', self._on_question, namespace=namespace)
        self.sio.on('connect', self._on_connect, namespace=namespace)
        self.sio.on('disconnect', self._on_disconnect, namespace=namespace)

    async def register(self, game_id, callback: QuestionCallback) -> Subscription:
        game_code = str(game_id)
        if not self.sio.connected:
            await self.sio.connect(self.url, namespaces=[self.namespace])
            logger.info(f"[push-connect] url={self.url} namespace={self.namespace}")
        await self._join(game_code)
        self._callbacks[game_code].append(callback)
        return Subscription(lambda: self._unregister(game_code, callback))

    async def _join(self, game_code: str) -> None:
        if game_code not in self._joined:
            await self.sio.emit('join_game', {'game_code': game_code}, namespace=self.namespace)
            self._joined.add(game_code)

    async def _on_connect(self, *args):
        # Rooms do not survive a reconnect; rejoin every game still listened to
        for game_code, callbacks in list(self._callbacks.items()):
            if callbacks:
                await self._join(game_code)
                logger.info(f"[push-rejoin] game={game_code}")

    async def _on_disconnect(self, *args):
        self._joined.clear()
        logger.info(f"[push-disconnect] url={self.url} namespace={self.namespace}")

    def _unregister(self, game_code: str, callback: QuestionCallback) -> None:
        callbacks = self._callbacks.get(game_code, [])
        if callback in callbacks:
            callbacks.remove(callback)

    async def _on_question(self, data):
        data = data or {}
        game_code = data.get('gameId', data.get('game_code'))
        if game_code is None:
            logger.warning(f"[push-drop] question event without game id: {data!r}")
            return
        listeners = list(self._callbacks.get(str(game_code), []))
        logger.info(f"[push-question] game={game_code} round={data.get('round')} listeners={len(listeners)}")
        for callback in listeners:
            callback(data)

    async def close(self) -> None:
        self._callbacks.clear()
        self._joined.clear()
        if self.sio.connected:
            await self.sio.disconnect()

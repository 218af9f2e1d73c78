import json
import queue
import threading
from datetime import datetime, timezone


class TournamentEventBus:
    """In-memory pub/sub feeding the SSE stream.

    A subscriber either follows a single tournament or, with
    ``tournament_id=None``, every tournament. Subscribers that stop reading
    are dropped once their queue fills up.
    """

    def __init__(self, maxsize=50):
        self._maxsize = maxsize
        self._subscribers = {}
        self._lock = threading.Lock()

    def subscribe(self, tournament_id=None):
        q = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers[id(q)] = (q, tournament_id)
        return q

    def unsubscribe(self, q):
        with self._lock:
            self._subscribers.pop(id(q), None)

    def publish(self, event_type, tournament_id, **data):
        msg = json.dumps({
            "type": event_type,
            "tournament_id": tournament_id,
            "data": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })
        with self._lock:
            stale = []
            for key, (q, wanted) in self._subscribers.items():
                if wanted is not None and wanted != tournament_id:
                    continue
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    stale.append(key)
            for key in stale:
                del self._subscribers[key]

    @property
    def subscriber_count(self):
        with self._lock:
            return len(self._subscribers)

    def clear(self):
        with self._lock:
            self._subscribers.clear()


event_bus = TournamentEventBus()

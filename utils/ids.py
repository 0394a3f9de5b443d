import threading
import time

_lock = threading.Lock()
_last_issued: dict[str, int] = {}


def generate_id(collection: str) -> str:
    """Return `{collection}-{epoch_millis}`, strictly increasing per collection."""
    with _lock:
        millis = int(time.time() * 1000)
        last = _last_issued.get(collection, 0)
        if millis <= last:
            millis = last + 1
        _last_issued[collection] = millis
    return f"{collection}-{millis}"

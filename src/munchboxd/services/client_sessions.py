"""Per-client view state controllers keyed by an opaque client id."""

import logging
import secrets
import threading
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from munchboxd.services.view_state import ViewStateController

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[], ViewStateController]


@dataclass
class ClientSessions:
    """Registry of one controller, and one auth session, per browser.

    Each controller wraps its own Supabase client so that the signed-in
    account of one visitor is never visible to another. The least recently
    used controller is released once ``max_clients`` is exceeded.
    """

    factory: ControllerFactory
    max_clients: int = 1000
    _controllers: "OrderedDict[str, ViewStateController]" = field(
        default_factory=OrderedDict, repr=False
    )
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __len__(self) -> int:
        return len(self._controllers)

    def get(self, client_id: str | None) -> tuple[str, ViewStateController]:
        """Return the controller for ``client_id``, creating one if unknown."""
        with self._lock:
            if client_id is not None and client_id in self._controllers:
                self._controllers.move_to_end(client_id)
                return client_id, self._controllers[client_id]

        controller = self.factory()
        controller.attach()
        controller.resolve_session()
        new_id = secrets.token_urlsafe(24)

        evicted: list[ViewStateController] = []
        with self._lock:
            self._controllers[new_id] = controller
            while len(self._controllers) > self.max_clients:
                _, oldest = self._controllers.popitem(last=False)
                evicted.append(oldest)
        for oldest in evicted:
            oldest.detach()
        if evicted:
            logger.info("Released %s idle client sessions", len(evicted))
        return new_id, controller

    def discard(self, client_id: str | None) -> None:
        """Drop a client's controller and release its subscription."""
        if client_id is None:
            return
        with self._lock:
            controller = self._controllers.pop(client_id, None)
        if controller is not None:
            controller.detach()

    def close(self) -> None:
        """Release every controller."""
        with self._lock:
            controllers = list(self._controllers.values())
            self._controllers.clear()
        for controller in controllers:
            controller.detach()

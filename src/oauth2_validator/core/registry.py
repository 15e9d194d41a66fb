"""Read-only client lookup used by the host before validation.

The validator never talks to storage; hosts hand it a :class:`Client`
fetched through any object satisfying :class:`ClientRegistry`.
"""

from __future__ import annotations

import threading
from typing import Iterable, Iterator, Protocol, runtime_checkable

from oauth2_validator.core.models import Client


@runtime_checkable
class ClientRegistry(Protocol):
    """Minimal lookup contract: client identifier -> registered client."""

    def get_client(self, client_id: str) -> Client | None: ...


class InMemoryClientRegistry(ClientRegistry):
    """Dict-backed registry; ``client_id`` is unique within an instance."""

    def __init__(self, clients: Iterable[Client] = ()) -> None:
        self._clients: dict[str, Client] = {}
        self._lock = threading.Lock()
        for client in clients:
            self.register(client)

    def register(self, client: Client) -> None:
        with self._lock:
            if client.client_id in self._clients:
                raise ValueError(f"client_id already registered: {client.client_id}")
            self._clients[client.client_id] = client

    def get_client(self, client_id: str) -> Client | None:
        return self._clients.get(client_id)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._clients

    def __iter__(self) -> Iterator[Client]:
        return iter(list(self._clients.values()))

    def __len__(self) -> int:
        return len(self._clients)

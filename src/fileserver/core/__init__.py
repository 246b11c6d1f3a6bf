"""
=============================================================================
SERVE FACILITY
=============================================================================

Networking plumbing underneath the dispatcher.

    SocketServer   listening socket and accept loop
         │
         ▼
    ThreadPool     workers pulling accepted connections off a queue
         │
         ▼
    Connection     buffered request reading, keep-alive, close

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer
from .thread_pool import ThreadPool, Worker, WorkerState

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "ThreadPool",
    "Worker",
    "WorkerState",
]

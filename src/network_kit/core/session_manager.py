# src/network_kit/core/session_manager.py
"""
Потоко-локальные requests.Session для RequestsTransport.

requests.Session не потокобезопасен (cookie jar, состояние адаптеров),
поэтому каждый поток executor-а транспорта получает свою сессию.
"""

import logging
import threading
import weakref
from typing import Callable, Set

import requests

logger = logging.getLogger("network_kit.transport")


class SessionManager:
    """
    Выдаёт каждому потоку собственную сессию, созданную фабрикой.

    Сессии создаются лениво при первом обращении потока. Все созданные
    сессии отслеживаются через weakref, чтобы close_all() мог закрыть
    сессии чужих потоков.

    Example:
        >>> manager = SessionManager(requests.Session)
        >>> session = manager.get_session()
        >>> manager.close_all()
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: Set[weakref.ref] = set()
        self._lock = threading.Lock()

    def get_session(self) -> requests.Session:
        """Сессия текущего потока."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._lock:
                self._sessions.add(weakref.ref(session, self._discard))
        return session

    def _discard(self, ref: weakref.ref) -> None:
        with self._lock:
            self._sessions.discard(ref)

    @property
    def active_sessions(self) -> int:
        """Сколько сессий ещё живо."""
        with self._lock:
            return sum(1 for ref in self._sessions if ref() is not None)

    def close_all(self) -> None:
        """Закрыть сессии всех потоков. Можно вызывать повторно."""
        self._local.session = None

        with self._lock:
            refs = list(self._sessions)
            self._sessions.clear()

        for ref in refs:
            session = ref()
            if session is None:
                continue
            try:
                session.close()
            except Exception as e:
                logger.debug("Session close failed", extra={"error": str(e)})

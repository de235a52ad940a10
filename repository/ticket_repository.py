# repository/ticket_repository.py
import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Final, Optional
from pydantic import ValidationError
from model.ticket import Ticket
from util.errors import PersistenceError

logger = logging.getLogger(__name__)

FILE_SUFFIX: Final[str] = ".json"
WRITE_CHECK_FILE: Final[str] = "test.tmp"


class TicketRepository:
    """
    In-memory ticket map backed by one JSON file per ticket.

    Flow:
    - open(data_dir) creates the directory, checks it is writable and loads
      every <id>.json found there.
    - upsert/delete hit the disk first; the map only changes once the file
      operation succeeded.
    - Every operation runs under one lock, so writers never overlap readers.
    """

    def __init__(self, data_dir: str) -> None:
        self._dir = data_dir
        self._tickets: Dict[str, Ticket] = {}
        self._lock = asyncio.Lock()

    @property
    def data_dir(self) -> str:
        return self._dir

    @classmethod
    def open(cls, data_dir: str) -> "TicketRepository":
        abs_path = os.path.abspath(data_dir)
        logger.info("store.init dir=%s", abs_path)

        try:
            os.makedirs(abs_path, exist_ok=True)
        except PermissionError as e:
            raise PersistenceError(
                f"insufficient permissions to create data directory at {abs_path}"
            ) from e
        except OSError as e:
            raise PersistenceError(
                f"failed to create data directory at {abs_path}: {e}"
            ) from e

        check_path = os.path.join(abs_path, WRITE_CHECK_FILE)
        try:
            with open(check_path, "w", encoding="utf-8") as fh:
                fh.write("test")
            os.remove(check_path)
        except OSError as e:
            raise PersistenceError(
                f"data directory exists but is not writable at {abs_path}: {e}"
            ) from e

        repo = cls(abs_path)
        repo._load_all()
        logger.info("store.ready dir=%s tickets=%d", abs_path, len(repo._tickets))
        return repo

    def _path(self, ticket_id: str) -> str:
        return os.path.join(self._dir, ticket_id + FILE_SUFFIX)

    def _load_all(self) -> None:
        try:
            names = sorted(os.listdir(self._dir))
        except OSError as e:
            raise PersistenceError(f"failed to list {self._dir}: {e}") from e

        for name in names:
            path = os.path.join(self._dir, name)
            if not name.endswith(FILE_SUFFIX) or not os.path.isfile(path):
                continue
            ticket_id = name[: -len(FILE_SUFFIX)]
            try:
                with open(path, "rb") as fh:
                    ticket = Ticket.model_validate_json(fh.read())
            except (OSError, ValidationError) as e:
                logger.error("store.load.error ticket=%s err=%s", ticket_id, e)
                continue
            self._tickets[ticket_id] = ticket

    def _write(self, ticket: Ticket) -> None:
        path = self._path(ticket.id)
        tmp = path + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as fh:
                fh.write(ticket.model_dump_json(indent=4))
            os.replace(tmp, path)
        except OSError as e:
            try:
                os.remove(tmp)
            except OSError:
                pass
            raise PersistenceError(f"failed to write {path}: {e}") from e

    def _remove(self, ticket_id: str) -> None:
        path = self._path(ticket_id)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise PersistenceError(f"failed to remove {path}: {e}") from e

    # ---------------- Core CRUD ----------------

    async def list(self) -> Dict[str, Ticket]:
        async with self._lock:
            return dict(self._tickets)

    async def get(self, ticket_id: str) -> Optional[Ticket]:
        if not ticket_id:
            return None
        async with self._lock:
            return self._tickets.get(ticket_id)

    async def upsert(self, ticket: Ticket) -> Ticket:
        stored = ticket.model_copy(
            update={
                "operators": list(ticket.operators),
                "added": datetime.now(timezone.utc),
            }
        )
        async with self._lock:
            await asyncio.to_thread(self._write, stored)
            self._tickets[stored.id] = stored
        logger.info(
            "store.upsert ticket=%s operators=%d", stored.id, len(stored.operators)
        )
        return stored

    async def delete(self, ticket_id: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._remove, ticket_id)
            self._tickets.pop(ticket_id, None)
        logger.info("store.delete ticket=%s", ticket_id)

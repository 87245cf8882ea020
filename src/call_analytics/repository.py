from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import DateTime, bindparam, create_engine, text
from sqlalchemy.engine import Engine, Row

from .models import CallEvent

logger = logging.getLogger(__name__)


class CallEventRepository:
    """
    Interface for loading call events.

    Implementations return the calls of one agent whose start timestamp falls
    in ``[start, end)``. The analytics service asks for the previous and the
    current period in one go.
    """

    def load(self, agent_id: str, start: datetime, end: datetime) -> Sequence[CallEvent]:
        raise NotImplementedError


class SQLCallEventRepository(CallEventRepository):
    """
    Load call events from the ``call_logs`` table.

    Expected columns:
      - call_logs(id, agent_id, started_at, duration_seconds, status, direction,
        evaluation, from_number, metadata)
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def load(self, agent_id: str, start: datetime, end: datetime) -> Sequence[CallEvent]:
        query = (
            text(
                """
                SELECT id, started_at, duration_seconds, status, direction,
                       evaluation, from_number, metadata
                FROM call_logs
                WHERE agent_id = :agent_id AND started_at >= :start AND started_at < :end
                ORDER BY started_at ASC
                """
            )
            .bindparams(bindparam("start", type_=DateTime()), bindparam("end", type_=DateTime()))
            .columns(started_at=DateTime())
        )
        params = {"agent_id": agent_id, "start": start, "end": end}
        with self.engine.connect() as connection:
            rows = connection.execute(query, params).fetchall()
        logger.debug("Loaded %s call logs for agent %s", len(rows), agent_id)
        return tuple(self._row_to_event(row) for row in rows)

    @staticmethod
    def _row_to_event(row: Row) -> CallEvent:
        return CallEvent(
            id=str(row.id),
            started_at=row.started_at,
            duration_seconds=None if row.duration_seconds is None else int(row.duration_seconds),
            status=row.status,
            direction=row.direction,
            evaluation=row.evaluation,
            from_number=row.from_number,
            metadata=_decode_metadata(row.metadata),
        )


def _decode_metadata(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring undecodable call metadata")
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


@dataclass(frozen=True)
class RepositoryConfig:
    database_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "RepositoryConfig":
        return cls(database_url=os.getenv("ANALYTICS_DATABASE_URL"))


def build_repository_from_env(config: Optional[RepositoryConfig] = None) -> Optional[CallEventRepository]:
    cfg = config or RepositoryConfig.from_env()
    if cfg.database_url:
        engine = create_engine(cfg.database_url)
        return SQLCallEventRepository(engine)
    return None

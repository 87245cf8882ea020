from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, validator

from .configuration import load_analytics_config
from .models import CallEvent, CustomWindow, RelativeWindow, ReportingWindow, ResolvedPeriods
from .periods import InvalidWindowError, resolve_periods
from .repository import CallEventRepository, build_repository_from_env
from .service import CallAnalyticsService

app = FastAPI(title="Call Analytics API", version="0.1.0")
config = load_analytics_config()
repository: Optional[CallEventRepository] = build_repository_from_env()


class CallEventPayload(BaseModel):
    id: str
    started_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    status: Optional[str] = None
    direction: Optional[str] = None
    evaluation: Optional[str] = None
    from_number: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class WindowPayload(BaseModel):
    mode: Literal["relative", "custom"] = "relative"
    days: int = 7
    start: Optional[date] = None
    end: Optional[date] = None

    @validator("days")
    def _validate_days(cls, days: int) -> int:
        if days > 366:
            raise ValueError("days must be at most 366")
        return days

    def to_window(self) -> ReportingWindow:
        if self.mode == "custom":
            return CustomWindow(start=self.start, end=self.end)
        return RelativeWindow(days=self.days)


class AnalyticsRequest(BaseModel):
    window: WindowPayload = Field(default_factory=WindowPayload)
    now: Optional[datetime] = None
    agent_id: Optional[str] = None
    events: Optional[List[CallEventPayload]] = None


class AnalyticsResponse(BaseModel):
    data: Dict[str, Any]
    source: str


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/analytics", response_model=AnalyticsResponse)
async def analytics_endpoint(request: AnalyticsRequest) -> AnalyticsResponse:
    window = request.window.to_window()
    now = request.now or datetime.now(timezone.utc)
    try:
        periods = resolve_periods(window, now=now, config=config)
    except InvalidWindowError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    events, source = _load_events(request, periods)
    service = CallAnalyticsService(events, config=config)
    result = service.build(window, now=now)
    return AnalyticsResponse(data=result.as_dict(), source=source)


def _load_events(request: AnalyticsRequest, periods: ResolvedPeriods) -> Tuple[Sequence[CallEvent], str]:
    if repository is not None and request.agent_id:
        events = repository.load(request.agent_id, start=periods.previous.start, end=periods.current.end)
        return events, "database"

    if request.events is None:
        raise HTTPException(
            status_code=400,
            detail=(
                "ANALYTICS_DATABASE_URL is not configured or agent_id is missing; "
                "supply events in the request body for ad-hoc queries."
            ),
        )

    return tuple(_convert_event_payload(payload) for payload in request.events), "inline"


def _convert_event_payload(payload: CallEventPayload) -> CallEvent:
    return CallEvent(
        id=payload.id,
        started_at=payload.started_at,
        duration_seconds=payload.duration_seconds,
        status=payload.status,
        direction=payload.direction,
        evaluation=payload.evaluation,
        from_number=payload.from_number,
        metadata=payload.metadata,
    )

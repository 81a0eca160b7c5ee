from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from jsonschema import ValidationError

from .admin import config as admin_config
from .admin import health as admin_health
from .admin import stats as admin_stats
from .config import ServerConfig, get_server_config
from .events.service import EventService, UnknownUser
from .ranking import Event, EventNotFound
from .ranking.service import InvalidIndex, InvalidRange, RankingService
from .storage import build_storage
from .trades.service import TradeService, UnknownEvent
from .users.service import UserService
from .validation.validator import SchemaRegistry, get_schema_registry
from .votes.service import VoteRejected, VoteService


@asynccontextmanager
async def lifespan(app: FastAPI):
    server_config = get_server_config()
    schema_registry = get_schema_registry()
    storage = build_storage(server_config)

    app.state.server_config = server_config
    app.state.schema_registry = schema_registry
    app.state.storage = storage
    app.state.ranking_service = RankingService(storage)
    app.state.trade_service = TradeService(storage)
    app.state.vote_service = VoteService(storage)
    app.state.event_service = EventService(storage)
    app.state.user_service = UserService(
        storage, default_vote_num=server_config.users.default_vote_num
    )
    app.state.start_time = datetime.now(timezone.utc)

    yield


app = FastAPI(
    title="RS List Server",
    version="1.0.0",
    docs_url="/docs",
    lifespan=lifespan,
)

app.include_router(admin_health.router)
app.include_router(admin_stats.router)
app.include_router(admin_config.router)


# Dependency helpers ---------------------------------------------------------


def get_server_settings(request: Request) -> ServerConfig:
    return request.app.state.server_config


def get_schema_service(request: Request) -> SchemaRegistry:
    return request.app.state.schema_registry


def get_ranking_service(request: Request) -> RankingService:
    return request.app.state.ranking_service


def get_trade_service(request: Request) -> TradeService:
    return request.app.state.trade_service


def get_vote_service(request: Request) -> VoteService:
    return request.app.state.vote_service


def get_event_service(request: Request) -> EventService:
    return request.app.state.event_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def validate_payload(schemas: SchemaRegistry, schema_name: str, payload: dict[str, Any]) -> None:
    try:
        schemas.validate(schema_name, payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc.message)) from exc


def ranking_failure() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="ranking unavailable",
    )


# Routes ---------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root(settings: ServerConfig = Depends(get_server_settings)) -> dict[str, Any]:
    return {
        "service": "rs-list-server",
        "version": app.version,
        "storage_backend": settings.storage.backend,
    }


@app.get("/rs/list", tags=["rs"])
async def list_events(
    start: Optional[int] = None,
    end: Optional[int] = None,
    ranking: RankingService = Depends(get_ranking_service),
) -> list[dict[str, Any]]:
    try:
        if start is None and end is None:
            events = await ranking.ranked_events()
        elif start is None or end is None:
            raise HTTPException(status_code=400, detail="invalid request param")
        else:
            events = await ranking.ranked_slice(start, end)
    except InvalidRange as exc:
        raise HTTPException(status_code=400, detail="invalid request param") from exc
    except EventNotFound as exc:
        raise ranking_failure() from exc
    return [event.to_payload() for event in events]


@app.get("/rs/{index}", tags=["rs"])
async def get_event(
    index: int,
    ranking: RankingService = Depends(get_ranking_service),
) -> dict[str, Any]:
    try:
        event: Event = await ranking.event_at(index)
    except InvalidIndex as exc:
        raise HTTPException(status_code=400, detail="invalid index") from exc
    except EventNotFound as exc:
        raise ranking_failure() from exc
    return event.to_payload()


@app.post("/rs/event", tags=["rs"], status_code=status.HTTP_201_CREATED)
async def add_event(
    payload: dict[str, Any] = Body(...),
    schemas: SchemaRegistry = Depends(get_schema_service),
    service: EventService = Depends(get_event_service),
) -> dict[str, Any]:
    validate_payload(schemas, "rs_event", payload)
    try:
        event = await service.add_event(
            payload["event_name"], payload["keyword"], int(payload["user_id"])
        )
    except UnknownUser as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"id": event["id"]}


@app.post("/rs/vote/{event_id}", tags=["rs"])
async def vote(
    event_id: int,
    payload: dict[str, Any] = Body(...),
    schemas: SchemaRegistry = Depends(get_schema_service),
    service: VoteService = Depends(get_vote_service),
) -> dict[str, Any]:
    validate_payload(schemas, "vote", payload)
    try:
        record = await service.vote(
            event_id,
            int(payload["user_id"]),
            int(payload["vote_num"]),
            payload["time"],
        )
    except VoteRejected as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"status": "accepted", "vote_id": record["id"]}


@app.post("/rs/buy/{event_id}", tags=["rs"])
async def buy(
    event_id: int,
    payload: dict[str, Any] = Body(...),
    schemas: SchemaRegistry = Depends(get_schema_service),
    service: TradeService = Depends(get_trade_service),
) -> dict[str, Any]:
    validate_payload(schemas, "trade", payload)
    try:
        result = await service.buy(event_id, int(payload["rank"]), int(payload["amount"]))
    except UnknownEvent as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not result.accepted:
        raise HTTPException(status_code=400, detail=result.failure.value)
    return {"status": "accepted", "rank": result.bid.rank, "amount": result.bid.amount}


@app.post("/user", tags=["users"], status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: dict[str, Any] = Body(...),
    schemas: SchemaRegistry = Depends(get_schema_service),
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    validate_payload(schemas, "user", payload)
    user = await service.register(payload)
    return {"id": user["id"]}


@app.get("/users", tags=["users"])
async def list_users(service: UserService = Depends(get_user_service)) -> list[dict[str, Any]]:
    return await service.list_users()


@app.get("/user/{user_id}", tags=["users"])
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    try:
        return await service.get(user_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"user {user_id} not found") from exc

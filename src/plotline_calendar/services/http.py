"""Local HTTP surface over the registered calendar functions."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from fastapi import APIRouter, FastAPI, HTTPException
from pydantic import BaseModel, Field

from ..api import ApiFunction, api_state, call_api, get_api_functions

logger = logging.getLogger(__name__)


class FunctionDescription(BaseModel):
    name: str
    description: str
    category: str
    tags: List[str]
    parameters: Dict[str, Any]

    @classmethod
    def from_api_function(cls, api_function: ApiFunction) -> "FunctionDescription":
        return cls(
            name=api_function.name,
            description=api_function.description,
            category=api_function.category,
            tags=list(api_function.tags),
            parameters=api_function.parameter_schema,
        )


class FunctionList(BaseModel):
    functions: List[FunctionDescription]


class FunctionCall(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


class FunctionResult(BaseModel):
    name: str
    result: Any = None


router = APIRouter(prefix="/api/functions", tags=["calendar"])


@router.get("", response_model=FunctionList)
async def list_functions() -> FunctionList:
    return FunctionList(functions=[FunctionDescription.from_api_function(func) for func in get_api_functions()])


@router.post("/{function_name}", response_model=FunctionResult)
async def invoke_function(function_name: str, call: FunctionCall) -> FunctionResult:
    try:
        result = await call_api(function_name, **call.arguments)
    except KeyError as exc:
        logger.warning("Calendar function not found: %s", function_name)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        # Covers pydantic argument validation as well as bad dates and steps.
        logger.info("Rejected call to %s: %s", function_name, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return FunctionResult(name=function_name, result=result)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await api_state.calendar.start()
    try:
        yield
    finally:
        gateway = api_state.context.gateway
        if gateway is not None:
            await gateway.aclose()


def create_app() -> FastAPI:
    application = FastAPI(title="PlotLine Calendar Local API", version="0.1.0", lifespan=lifespan)
    application.include_router(router)
    return application


app = create_app()


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving calendar API on %s:%d", host, port)
    asyncio.run(serve(app, config))

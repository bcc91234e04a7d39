from __future__ import annotations

from fastapi import Request

from simmetrics.domain import SimulatedState
from simmetrics.services import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_state(request: Request) -> SimulatedState:
    return get_context(request).state

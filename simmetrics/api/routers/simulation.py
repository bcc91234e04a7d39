from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from simmetrics.api.deps import get_context, get_state
from simmetrics.api.schemas.simulation import (
    CpuUpdatedOut,
    CurrentState,
    ErrorOut,
    HealthOut,
    IndexOut,
    MemoryUpdatedOut,
    NormalOut,
    StressOut,
    UnhealthyOut,
)
from simmetrics.domain import SimulatedState
from simmetrics.services import AppContext

router = APIRouter()

ENDPOINTS = {
    "/metrics": "Prometheus metrics endpoint",
    "/health": "Health check",
    "/stress": "Simulate high CPU (85%)",
    "/normal": "Reset to normal state",
    "/unhealthy": "Mark app as unhealthy",
    "/set-cpu/:value": "Set CPU usage (0-100)",
    "/set-memory/:value": "Set memory usage in MB",
}

STRESS_ALERT = "CPU usage above 70% threshold - alert should trigger!"


@router.get("/", response_model=IndexOut)
def index(state: SimulatedState = Depends(get_state)):
    snapshot = state.snapshot()
    return IndexOut(
        message="Observability Demo App",
        endpoints=ENDPOINTS,
        current_state=CurrentState(
            cpu=snapshot.cpu,
            memory_mb=snapshot.memory_mb,
            healthy=snapshot.healthy,
        ),
    )


@router.get("/metrics", response_class=Response)
def metrics(ctx: AppContext = Depends(get_context)):
    return Response(ctx.registry.snapshot(), media_type=ctx.registry.content_type)


@router.get(
    "/health",
    response_model=HealthOut,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthOut}},
)
def health(state: SimulatedState = Depends(get_state)):
    snapshot = state.snapshot()
    if snapshot.healthy:
        body = HealthOut(status="healthy", cpu=snapshot.cpu, memory=snapshot.memory)
        return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump())
    body = HealthOut(status="unhealthy", cpu=snapshot.cpu, memory=snapshot.memory)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump()
    )


@router.get("/stress", response_model=StressOut)
def stress(state: SimulatedState = Depends(get_state)):
    snapshot = state.stress()
    return StressOut(
        message="High CPU load simulated", cpu=snapshot.cpu, alert=STRESS_ALERT
    )


@router.get("/normal", response_model=NormalOut)
def normal(state: SimulatedState = Depends(get_state)):
    snapshot = state.reset()
    return NormalOut(
        message="Reset to normal state",
        cpu=snapshot.cpu,
        memory=snapshot.memory,
        healthy=snapshot.healthy,
    )


@router.get("/unhealthy", response_model=UnhealthyOut)
def unhealthy(state: SimulatedState = Depends(get_state)):
    snapshot = state.mark_unhealthy()
    return UnhealthyOut(
        message="App marked as unhealthy - alert should trigger!",
        healthy=snapshot.healthy,
    )


@router.get(
    "/set-cpu/{value}",
    response_model=CpuUpdatedOut,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorOut}},
)
def set_cpu(value: str, state: SimulatedState = Depends(get_state)):
    cpu = state.set_cpu(value)
    return CpuUpdatedOut(message="CPU usage updated", cpu=cpu)


@router.get(
    "/set-memory/{value}",
    response_model=MemoryUpdatedOut,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorOut}},
)
def set_memory(value: str, state: SimulatedState = Depends(get_state)):
    memory_mb = state.set_memory_mb(value)
    return MemoryUpdatedOut(message="Memory usage updated", memory_mb=memory_mb)

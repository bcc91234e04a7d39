from typing import Annotated

from pydantic import BaseModel, PlainSerializer


def _compact_number(value: float) -> int | float:
    # 整数值按 int 输出（25 而不是 25.0）
    if value.is_integer():
        return int(value)
    return value


Number = Annotated[float, PlainSerializer(_compact_number, return_type=int | float)]


class CurrentState(BaseModel):
    cpu: Number
    memory_mb: int
    healthy: bool


class IndexOut(BaseModel):
    message: str
    endpoints: dict[str, str]
    current_state: CurrentState


class HealthOut(BaseModel):
    status: str
    cpu: Number
    memory: int


class StressOut(BaseModel):
    message: str
    cpu: Number
    alert: str


class NormalOut(BaseModel):
    message: str
    cpu: Number
    memory: int
    healthy: bool


class UnhealthyOut(BaseModel):
    message: str
    healthy: bool


class CpuUpdatedOut(BaseModel):
    message: str
    cpu: Number


class MemoryUpdatedOut(BaseModel):
    message: str
    memory_mb: Number


class ErrorOut(BaseModel):
    error: str

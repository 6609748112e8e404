"""Pydantic models for tarkov.dev GraphQL task payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TarkovDevBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class TaskPayload(TarkovDevBaseModel):
    """One task; fields beyond ``id`` and ``name`` are kept verbatim as extras."""

    id: str
    name: str

    def to_entity(self) -> dict[str, object]:
        return self.model_dump()


class TasksData(TarkovDevBaseModel):
    tasks: list[TaskPayload] = Field(default_factory=list["TaskPayload"])


class GraphQLErrorPayload(TarkovDevBaseModel):
    message: str


class TasksResponse(TarkovDevBaseModel):
    data: TasksData | None = None
    errors: list[GraphQLErrorPayload] = Field(default_factory=list["GraphQLErrorPayload"])

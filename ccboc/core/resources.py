"""
Typed resources returned by the calculation API server.

Each model carries a `kind` tag used by the decoder and the renderers.
The server emits Kubernetes-style objects (`metadata.name`, `spec.*`,
id-keyed maps) while older endpoints emit flat records; the `before`
validators normalise both into the same fields.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ResourceKind(str, Enum):
    """Closed set of resource shapes the CLI can decode and render."""

    CALCULATION = "calculation"
    CALCULATION_LIST = "calculation_list"
    CALCULATION_BULK = "calculation_bulk"
    CALCULATION_BULK_LIST = "calculation_bulk_list"
    WORKER_POOL = "worker_pool"
    WORKER_POOL_LIST = "worker_pool_list"


class Phase(str, Enum):
    """Lifecycle state of a calculation."""

    CREATED = "Created"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"


def _metadata_name(data: dict[str, Any]) -> dict[str, Any]:
    """Lift `metadata.name` to a top-level `name`."""
    meta = data.get("metadata")
    if "name" not in data and isinstance(meta, dict) and "name" in meta:
        data = {**data, "name": meta["name"]}
    return data


def _keyed_members(value: Any) -> Any:
    """Turn an id-keyed map into a list ordered by key.

    The key becomes the member's name when the member has none.
    """
    if not isinstance(value, dict):
        return value
    members = []
    for key in sorted(value):
        member = value[key]
        if isinstance(member, dict) and "name" not in member:
            member = {**member, "name": key}
        members.append(member)
    return members


class Calculation(BaseModel):
    """A single stellar-atmosphere calculation."""

    kind: ClassVar[ResourceKind] = ResourceKind.CALCULATION
    model_config = ConfigDict(populate_by_name=True)

    name: str
    teff: float
    logg: float = Field(alias="logG")
    phase: Optional[Phase] = None
    assign: str = ""

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = _metadata_name(data)
        # Standalone calculations nest values under `spec`, bulk members under `params`
        for nested in ("spec", "params"):
            inner = data.get(nested)
            if isinstance(inner, dict):
                for key in ("teff", "logG"):
                    if key in inner and key not in data:
                        data = {**data, key: inner[key]}
        return data

    @field_validator("phase", mode="before")
    @classmethod
    def _empty_phase(cls, value: Any) -> Any:
        return value or None

    @field_validator("assign", mode="before")
    @classmethod
    def _empty_assign(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_wire(self) -> dict[str, Any]:
        """Serialize in the flat shape the decoder accepts."""
        return self.model_dump(mode="json", by_alias=True)


class _ItemList(BaseModel):
    """Accepts `{"items": [...]}`, `{"items": null}` or a bare array."""

    @model_validator(mode="before")
    @classmethod
    def _wrap_items(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"items": data}
        if isinstance(data, dict) and data.get("items", ()) is None:
            return {**data, "items": []}
        return data


class CalculationList(_ItemList):
    kind: ClassVar[ResourceKind] = ResourceKind.CALCULATION_LIST

    items: list[Calculation]


class CalculationBulk(BaseModel):
    """A named batch of calculations submitted together."""

    kind: ClassVar[ResourceKind] = ResourceKind.CALCULATION_BULK

    name: str
    calculations: list[Calculation] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = _metadata_name(data)
        if "calculations" in data:
            calculations = data["calculations"]
            data = {**data, "calculations": [] if calculations is None else _keyed_members(calculations)}
        return data

    def to_wire(self) -> dict[str, Any]:
        """Serialize in the shape accepted by `POST /bulk/create`."""
        return {
            "name": self.name,
            "calculations": [c.to_wire() for c in self.calculations],
        }


class BulkFileMember(Calculation):
    name: str = ""


class BulkFile(CalculationBulk):
    """A bulk as written by the user; the server assigns the names."""

    name: str = ""
    calculations: list[BulkFileMember] = Field(default_factory=list)


class CalculationBulkList(_ItemList):
    kind: ClassVar[ResourceKind] = ResourceKind.CALCULATION_BULK_LIST

    items: list[CalculationBulk]


class Worker(BaseModel):
    name: str


class WorkerPool(BaseModel):
    """A named group of compute workers."""

    kind: ClassVar[ResourceKind] = ResourceKind.WORKER_POOL

    name: str
    workers: list[Worker] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = _metadata_name(data)
        spec = data.get("spec")
        workers = data.get("workers")
        if workers is None and isinstance(spec, dict):
            workers = spec.get("workers")
        return {**data, "workers": [] if workers is None else _keyed_members(workers)}


class WorkerPoolList(_ItemList):
    kind: ClassVar[ResourceKind] = ResourceKind.WORKER_POOL_LIST

    items: list[WorkerPool]


class StatusReply(BaseModel):
    """Body returned by the delete endpoints."""

    status_code: int
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code == 200


Resource = Calculation | CalculationList | CalculationBulk | CalculationBulkList | WorkerPool | WorkerPoolList

MODELS: dict[ResourceKind, type[BaseModel]] = {
    ResourceKind.CALCULATION: Calculation,
    ResourceKind.CALCULATION_LIST: CalculationList,
    ResourceKind.CALCULATION_BULK: CalculationBulk,
    ResourceKind.CALCULATION_BULK_LIST: CalculationBulkList,
    ResourceKind.WORKER_POOL: WorkerPool,
    ResourceKind.WORKER_POOL_LIST: WorkerPoolList,
}

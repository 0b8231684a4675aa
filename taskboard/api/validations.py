"""Search parameter parsing and task payload validation.

The task list view passes its state in the query string, e.g.::

    ?page=2&perPage=20&sort=title.asc&status=todo,in-progress&from=2024-01-01

``parse_search_params`` turns that raw, string-typed mapping into a
``GetTasksParams`` with defaults applied and enum values checked.
Bad input raises ``pydantic.ValidationError``.
"""

import json
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import get_settings
from ..models.enums import TaskStatus, TaskPriority, TaskLabel

DEFAULT_SORT = "createdAt.desc"

LIST_PARAMS = ("status", "priority")


class FilterCondition(BaseModel):
    """Generic column filter sent by the advanced filter UI.

    Accepted and validated, not applied by the task queries.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    value: str
    operator: str
    join_operator: str = Field(alias="joinOperator")


class GetTasksParams(BaseModel):
    """Normalized task list query parameters."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    page: int = Field(1, ge=1)
    per_page: int = Field(
        default_factory=lambda: get_settings().default_per_page,
        ge=1,
        alias="perPage",
    )
    sort: str = DEFAULT_SORT
    title: str = ""
    status: List[TaskStatus] = Field(default_factory=list)
    priority: List[TaskPriority] = Field(default_factory=list)
    from_date: str = Field("", alias="from")
    to_date: str = Field("", alias="to")
    filters: List[FilterCondition] = Field(default_factory=list)

    @field_validator("per_page")
    @classmethod
    def validate_per_page(cls, v: int) -> int:
        max_per_page = get_settings().max_per_page
        if v > max_per_page:
            raise ValueError(f"perPage must be at most {max_per_page}")
        return v

    @field_validator("status", "priority", mode="before")
    @classmethod
    def split_comma_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("filters", mode="before")
    @classmethod
    def decode_filters(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            if not v.strip():
                return []
            try:
                v = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"filters must be a JSON array: {e.msg}")
        if not isinstance(v, list):
            raise ValueError("filters must be a JSON array")
        return v

    @field_validator("sort", "from_date", "to_date")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    def cache_payload(self) -> str:
        """Serialized form of the whole parameter object, used as cache key input."""
        return json.dumps(self.model_dump(mode="json", by_alias=True), sort_keys=True)


def _raw_value(raw: Mapping[str, Any], key: str) -> Optional[Any]:
    getlist = getattr(raw, "getlist", None)
    if getlist is not None and key in LIST_PARAMS:
        values = [v for v in getlist(key) if v is not None]
        return ",".join(values) if values else None
    return raw.get(key)


def parse_search_params(raw: Mapping[str, Any]) -> GetTasksParams:
    """Parse raw query parameters into ``GetTasksParams``.

    Missing and blank values fall back to their defaults. ``perPage`` is
    also accepted as ``per_page``.

    Raises:
        pydantic.ValidationError: malformed numbers, unknown status or
            priority values, out of range paging, malformed filters
    """
    data = {}
    for field_name, field in GetTasksParams.model_fields.items():
        keys = [field.alias or field_name]
        if field.alias:
            keys.append(field_name)
        for key in keys:
            value = _raw_value(raw, key)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            data[field_name] = value
            break
    return GetTasksParams.model_validate(data)


class CreateTaskSchema(BaseModel):
    """Payload for creating a task."""

    title: str
    label: TaskLabel
    status: TaskStatus
    priority: TaskPriority


class UpdateTaskSchema(BaseModel):
    """Payload for a partial task update."""

    title: Optional[str] = None
    label: Optional[TaskLabel] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

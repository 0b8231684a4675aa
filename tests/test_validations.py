"""Tests for search parameter parsing and task payload schemas."""

import pytest
from pydantic import ValidationError
from starlette.datastructures import QueryParams

from taskboard.api.validations import (
    CreateTaskSchema,
    FilterCondition,
    GetTasksParams,
    UpdateTaskSchema,
    parse_search_params,
)
from taskboard.models.enums import TaskStatus, TaskPriority, TaskLabel


class TestParseSearchParams:
    """Raw query string to GetTasksParams."""

    def test_defaults(self):
        params = parse_search_params({})

        assert params.page == 1
        assert params.per_page == 10
        assert params.sort == "createdAt.desc"
        assert params.title == ""
        assert params.status == []
        assert params.priority == []
        assert params.from_date == ""
        assert params.to_date == ""
        assert params.filters == []

    def test_string_values_are_coerced(self):
        params = parse_search_params({
            "page": "3",
            "perPage": "25",
            "sort": "title.asc",
            "title": "login",
            "from": "2024-01-01",
            "to": "2024-02-01",
        })

        assert params.page == 3
        assert params.per_page == 25
        assert params.sort == "title.asc"
        assert params.title == "login"
        assert params.from_date == "2024-01-01"
        assert params.to_date == "2024-02-01"

    def test_snake_case_per_page(self):
        assert parse_search_params({"per_page": "7"}).per_page == 7

    def test_blank_values_use_defaults(self):
        params = parse_search_params({"page": "", "perPage": "  ", "sort": "", "status": ""})

        assert params.page == 1
        assert params.per_page == 10
        assert params.sort == "createdAt.desc"
        assert params.status == []

    def test_comma_separated_enums(self):
        params = parse_search_params({"status": "todo,in-progress", "priority": "high, low"})

        assert params.status == [TaskStatus.TODO, TaskStatus.IN_PROGRESS]
        assert params.priority == [TaskPriority.HIGH, TaskPriority.LOW]

    def test_empty_list_items_are_dropped(self):
        params = parse_search_params({"status": "todo,,done,"})

        assert params.status == [TaskStatus.TODO, TaskStatus.DONE]

    def test_repeated_query_keys(self):
        raw = QueryParams("status=todo&status=done&priority=medium")

        params = parse_search_params(raw)

        assert params.status == [TaskStatus.TODO, TaskStatus.DONE]
        assert params.priority == [TaskPriority.MEDIUM]

    @pytest.mark.parametrize("raw", [
        {"status": "todo,started"},
        {"priority": "urgent"},
        {"status": "TODO"},
    ])
    def test_unknown_enum_values_rejected(self, raw):
        with pytest.raises(ValidationError):
            parse_search_params(raw)

    @pytest.mark.parametrize("raw", [
        {"page": "0"},
        {"page": "-1"},
        {"page": "abc"},
        {"perPage": "0"},
        {"perPage": "101"},
        {"perPage": "ten"},
    ])
    def test_bad_paging_rejected(self, raw):
        with pytest.raises(ValidationError):
            parse_search_params(raw)

    def test_filters_json(self):
        raw = {"filters": '[{"id": "title", "value": "bug", "operator": "iLike", "joinOperator": "and"}]'}

        params = parse_search_params(raw)

        assert params.filters == [
            FilterCondition(id="title", value="bug", operator="iLike", join_operator="and")
        ]

    @pytest.mark.parametrize("value", ["not json", '{"id": "title"}', '[{"id": "title"}]'])
    def test_bad_filters_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_search_params({"filters": value})

    def test_bounds_and_sort_are_stripped(self):
        params = parse_search_params({"sort": " title.asc ", "from": " 2024-01-01 ", "to": "2024-02-01 "})

        assert params.sort == "title.asc"
        assert params.from_date == "2024-01-01"
        assert params.to_date == "2024-02-01"

    def test_title_keeps_surrounding_spaces(self):
        assert parse_search_params({"title": "login "}).title == "login "
        assert GetTasksParams(title=" a b").title == " a b"

    def test_unknown_keys_ignored(self):
        params = parse_search_params({"page": "2", "utm_source": "mail"})

        assert params.page == 2


class TestGetTasksParams:
    """The normalized parameter object."""

    def test_aliases_and_field_names(self):
        by_alias = GetTasksParams.model_validate({"perPage": 5, "from": "2024-01-01"})
        by_name = GetTasksParams(per_page=5, from_date="2024-01-01")

        assert by_alias == by_name

    def test_is_immutable(self):
        params = GetTasksParams()

        with pytest.raises(ValidationError):
            params.page = 2

    def test_cache_payload_is_stable(self):
        a = GetTasksParams(status=["todo", "done"], title="x")
        b = parse_search_params({"title": "x", "status": "todo,done"})

        assert a.cache_payload() == b.cache_payload()
        assert '"perPage": 10' in a.cache_payload()
        assert '"status": ["todo", "done"]' in a.cache_payload()


class TestTaskSchemas:
    """Create and update payloads."""

    def test_create_requires_all_fields(self):
        with pytest.raises(ValidationError):
            CreateTaskSchema(title="x", status="todo", priority="low")

    def test_create_validates_enums(self):
        data = CreateTaskSchema(title="x", label="feature", status="done", priority="high")

        assert data.label == TaskLabel.FEATURE
        assert data.status == TaskStatus.DONE

        with pytest.raises(ValidationError):
            CreateTaskSchema(title="x", label="chore", status="done", priority="high")

    def test_update_is_partial(self):
        data = UpdateTaskSchema(status="canceled")

        assert data.model_dump(exclude_unset=True) == {"status": TaskStatus.CANCELED}

"""
Query building - compile document-style filters into SQL.

Filters look like:

    {
        "is_processed": {"equals": True},
        "publish_date": {"greater_than_equal": start, "less_than_equal": end},
    }

Fields in one mapping are ANDed; "and" / "or" keys take lists of nested
filters. Sort strings name a field, with a leading "-" for descending.
"""

from .converters import encode_value
from .models import FieldType

COMPARISON_OPERATORS = {
    "greater_than": ">",
    "greater_than_equal": ">=",
    "less_than": "<",
    "less_than_equal": "<=",
}

OPERATORS = {"equals", "not_equals", "exists", *COMPARISON_OPERATORS}

ORDERABLE_TYPES = {FieldType.TEXT, FieldType.INTEGER, FieldType.NUMBER, FieldType.DATETIME}


def build_where(where: dict | None, fields: dict[str, FieldType]) -> tuple[str, list]:
    """
    Compile a filter mapping into a WHERE clause body and parameters.

    Returns ("1=1", []) for an empty filter.

    Raises:
        ValueError: On unknown fields or operators, or values that do not
            match the field type
    """
    if not where:
        return "1=1", []

    clauses: list[str] = []
    params: list = []

    for key, condition in where.items():
        if key in ("and", "or"):
            if not isinstance(condition, list):
                raise ValueError(f"'{key}' expects a list of filters")
            parts = []
            for sub_where in condition:
                sub_clause, sub_params = build_where(sub_where, fields)
                parts.append(f"({sub_clause})")
                params.extend(sub_params)
            if parts:
                joiner = " AND " if key == "and" else " OR "
                clauses.append(f"({joiner.join(parts)})")
            continue

        if key not in fields:
            raise ValueError(f"Unknown field in filter: {key}")
        if not isinstance(condition, dict) or not condition:
            raise ValueError(f"Filter for '{key}' must be a mapping of operator to value")

        for operator, value in condition.items():
            clause, clause_params = _compile_condition(key, fields[key], operator, value)
            clauses.append(clause)
            params.extend(clause_params)

    return " AND ".join(clauses) if clauses else "1=1", params


def _compile_condition(column: str, field_type: FieldType, operator: str, value) -> tuple[str, list]:
    if operator not in OPERATORS:
        raise ValueError(f"Unknown filter operator: {operator}")

    if operator == "exists":
        return (f"{column} IS NOT NULL" if value else f"{column} IS NULL"), []

    if field_type == FieldType.TEXT_LIST:
        raise ValueError(f"Only 'exists' is supported on list field '{column}'")

    if operator == "equals":
        if value is None:
            return f"{column} IS NULL", []
        return f"{column} = ?", [encode_value(field_type, value)]

    if operator == "not_equals":
        if value is None:
            return f"{column} IS NOT NULL", []
        return f"({column} != ? OR {column} IS NULL)", [encode_value(field_type, value)]

    if field_type not in ORDERABLE_TYPES:
        raise ValueError(f"'{operator}' is not supported on field '{column}'")
    if value is None:
        raise ValueError(f"'{operator}' on '{column}' needs a value")

    return f"{column} {COMPARISON_OPERATORS[operator]} ?", [encode_value(field_type, value)]


def build_order_by(sort: str | None, fields: dict[str, FieldType]) -> str:
    """
    Compile a sort string into an ORDER BY body, with id as tiebreaker.

    Raises:
        ValueError: On unknown or unorderable fields
    """
    if not sort:
        return "id ASC"

    descending = sort.startswith("-")
    column = sort.lstrip("-")

    if column not in fields or fields[column] not in ORDERABLE_TYPES:
        raise ValueError(f"Cannot sort by field: {column}")

    direction = "DESC" if descending else "ASC"
    if column == "id":
        return f"id {direction}"
    nulls = "NULLS LAST" if descending else "NULLS FIRST"
    return f"{column} {direction} {nulls}, id {direction}"

"""Validates decoded readerspec blocks against the resource schema.

Works on loosely-typed JSON data. Every rule is checked in one pass and
all violations are reported; warnings and suggestions never affect
``is_valid``.
"""

import math
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from readerspec.errors import ValidationError
from readerspec.parser.base import ResourceDescription

FIELD_TYPES = ("string", "boolean", "number", "array")
FILTER_OPS = ("equals", "search", "contains", "in", "range")
VALUE_OPS = ("equals", "in", "range")
TARGET_OPS = ("search", "contains")

MAX_PER_WARNING = 1000
SEARCH_FILTER_WARNING = 2


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str]
    warnings: list[str] = []
    suggestions: list[str] = []


def _is_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _is_str_list(value: Any, non_empty: bool = False) -> bool:
    if not isinstance(value, list):
        return False
    if non_empty and not value:
        return False
    return all(isinstance(v, str) for v in value)


def validate_resource(candidate: Any) -> ValidationResult:
    """Check a decoded block and collect errors, warnings and suggestions."""
    if not isinstance(candidate, dict):
        return ValidationResult(is_valid=False, errors=["Resource description must be an object"])

    errors: list[str] = []

    if not _is_str(candidate.get("resource")):
        errors.append("resource must be a non-empty string")

    fields = candidate.get("fields")
    if not isinstance(fields, list):
        errors.append("fields must be an array")
    else:
        for index, field in enumerate(fields):
            errors.extend(validate_field(field, index))

    filters = candidate.get("filters")
    if not isinstance(filters, list):
        errors.append("filters must be an array")
    else:
        seen: set[str] = set()
        for index, item in enumerate(filters):
            name = item.get("field") if isinstance(item, dict) else None
            if _is_str(name):
                if name in seen:
                    errors.append(
                        f'filters[{index}]: Duplicate filter field "{name}". '
                        "Each filter must have a unique field name."
                    )
                else:
                    seen.add(name)
            errors.extend(validate_filter(item, index))

    sort = candidate.get("sort")
    if not isinstance(sort, list):
        errors.append("sort must be an array")
    else:
        seen = set()
        for index, item in enumerate(sort):
            name = item.get("field") if isinstance(item, dict) else None
            if _is_str(name):
                if name in seen:
                    errors.append(
                        f'sort[{index}]: Duplicate sort field "{name}". '
                        "Each sort option must have a unique field name."
                    )
                else:
                    seen.add(name)
            errors.extend(validate_sort_option(item, index))

    paginate = candidate.get("paginate")
    if not isinstance(paginate, dict):
        errors.append("paginate must be an object")
    else:
        errors.extend(validate_pagination(paginate))

    ownership = candidate.get("ownership")
    if not isinstance(ownership, dict):
        errors.append("ownership must be an object")
    else:
        errors.extend(validate_ownership(ownership))

    returns = candidate.get("returns")
    if not isinstance(returns, list):
        errors.append("returns must be an array")
    else:
        for index, item in enumerate(returns):
            if not isinstance(item, str):
                errors.append(f"returns[{index}] must be a string")

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=generate_warnings(candidate),
        suggestions=generate_suggestions(candidate),
    )


def validate_field(field: Any, index: int) -> list[str]:
    if not isinstance(field, dict):
        return [f"fields[{index}] must be an object"]

    errors = []
    if not _is_str(field.get("name")):
        errors.append(f"fields[{index}].name must be a string")

    field_type = field.get("type")
    if not _is_str(field_type):
        errors.append(f"fields[{index}].type must be a string")
    elif field_type not in FIELD_TYPES:
        errors.append(
            f"fields[{index}].type must be one of: {', '.join(FIELD_TYPES)}. "
            f'Got "{field_type}". Use "string" for IDs, dates, and text content.'
        )

    for key in ("desc", "relation"):
        if key in field and not isinstance(field[key], str):
            errors.append(f"fields[{index}].{key} must be a string if provided")

    return errors


def validate_filter(item: Any, index: int) -> list[str]:
    if not isinstance(item, dict):
        return [f"filters[{index}] must be an object"]

    errors = []
    if not _is_str(item.get("field")):
        errors.append(f"filters[{index}].field must be a string")

    op = item.get("op")
    if not _is_str(op):
        errors.append(f"filters[{index}].op must be a string")
    elif op not in FILTER_OPS:
        errors.append(
            f"filters[{index}].op must be one of: {', '.join(FILTER_OPS)}. "
            f'Got "{op}". Did you mean "search" or "contains"?'
        )

    values = item.get("values")
    if op in VALUE_OPS:
        if not _is_str_list(values, non_empty=True):
            errors.append(f"filters[{index}].values must be a non-empty array of strings for {op} operation")
    elif values is not None and not _is_str_list(values):
        errors.append(f"filters[{index}].values must be an array of strings if provided")

    target = item.get("target")
    if op in TARGET_OPS:
        if not _is_str(target):
            errors.append(f"filters[{index}].target must be a string for {op} operation")
    elif target is not None and not isinstance(target, str):
        errors.append(f"filters[{index}].target must be a string if provided")

    return errors


def validate_sort_option(item: Any, index: int) -> list[str]:
    if not isinstance(item, dict):
        return [f"sort[{index}] must be an object"]

    errors = []
    if not _is_str(item.get("field")):
        errors.append(f"sort[{index}].field must be a string")
    if not _is_str_list(item.get("dir")):
        errors.append(f"sort[{index}].dir must be an array of strings")
    return errors


def validate_pagination(paginate: dict) -> list[str]:
    errors = []
    max_per = paginate.get("maxPer")
    default_per = paginate.get("defaultPer")
    start_page = paginate.get("startPage")

    if not _is_number(max_per) or max_per <= 0:
        errors.append("paginate.maxPer must be a positive number")
    if not _is_number(default_per) or default_per <= 0:
        errors.append("paginate.defaultPer must be a positive number")
    if not _is_number(start_page) or start_page < 1:
        errors.append("paginate.startPage must be a number >= 1")

    # Compare only once both sides are known to be numbers.
    if _is_number(max_per) and _is_number(default_per) and default_per > max_per:
        errors.append("paginate.defaultPer cannot be greater than paginate.maxPer")

    return errors


def validate_ownership(ownership: dict) -> list[str]:
    if not _is_str(ownership.get("by")):
        return ["ownership.by must be a string"]
    return []


def generate_suggestions(candidate: dict) -> list[str]:
    """Advisory hints; they never make a description invalid."""
    suggestions = []

    filters = candidate.get("filters")
    if isinstance(filters, list):
        seen: set[str] = set()
        for index, item in enumerate(filters):
            if not isinstance(item, dict):
                continue
            name = item.get("field")
            op = item.get("op")
            if _is_str(name):
                if name in seen:
                    suggestions.append(
                        f'filters[{index}]: Duplicate filter field "{name}". '
                        "Consider combining filters or using different field names."
                    )
                else:
                    seen.add(name)

            if op == "contains" and item.get("values") and not item.get("target"):
                suggestions.append(
                    f'filters[{index}]: Consider using "search" with "target" field instead of '
                    '"contains" with "values" for better clarity'
                )

            if op in VALUE_OPS and item.get("values") == []:
                suggestions.append(
                    f'filters[{index}]: Empty values array not allowed. Use ["string"] for generic '
                    "values or provide specific examples."
                )

    fields = candidate.get("fields")
    if isinstance(fields, list):
        names = {f.get("name") for f in fields if isinstance(f, dict) and isinstance(f.get("name"), str)}
        if not names & {"id", "_id"}:
            suggestions.append('Consider adding an "id" field for unique identification')
        if not names & {"createdAt", "created_at"}:
            suggestions.append('Consider adding a "createdAt" field for tracking creation time')

    return suggestions


def generate_warnings(candidate: dict) -> list[str]:
    """Performance risks worth flagging on an otherwise valid description."""
    warnings = []

    filters = candidate.get("filters")
    if isinstance(filters, list):
        searches = [f for f in filters if isinstance(f, dict) and f.get("op") in TARGET_OPS]
        if len(searches) > SEARCH_FILTER_WARNING:
            warnings.append(
                "Multiple search filters may impact performance. Consider consolidating search operations."
            )

    paginate = candidate.get("paginate")
    if isinstance(paginate, dict):
        max_per = paginate.get("maxPer")
        if _is_number(max_per) and max_per > MAX_PER_WARNING:
            warnings.append(
                f"Very high maxPer values may impact performance. Consider limiting to {MAX_PER_WARNING} or less."
            )

    return warnings


def to_resource(candidate: Any) -> ResourceDescription:
    """Convert a decoded block into a ResourceDescription, validating first."""
    result = validate_resource(candidate)
    if not result.is_valid:
        raise ValidationError(result.errors)
    try:
        return ResourceDescription.model_validate(candidate)
    except ModelValidationError as e:
        errors = [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()]
        raise ValidationError(errors) from e

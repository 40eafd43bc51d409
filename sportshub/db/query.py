"""
Query-string driven filtering, sorting, projection and pagination.

Supported parameters::

    ?select=name,date            project fields (``id`` is always kept)
    ?sort=-created_at,name       order, ``-`` for descending
    ?page=2&limit=10             pagination (limit capped at MAX_LIMIT)
    ?city=Boston                 equality filter on any column
    ?average_rating[gte]=7       comparison filters: gt, gte, lt, lte
    ?level[in]=beginner,all      membership filter
"""
import enum
import operator
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sportshub.core.exceptions import FieldError, ValidationError

RESERVED_PARAMS = {"select", "sort", "page", "limit"}
DEFAULT_LIMIT = 25
MAX_LIMIT = 100
DEFAULT_SORT = ["-created_at"]

_FILTER_KEY = re.compile(r"^(?P<field>[A-Za-z_][A-Za-z0-9_]*)(?:\[(?P<op>[a-z]+)\])?$")

COMPARISONS = {
    "eq": operator.eq,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}

_datetime_adapter = TypeAdapter(datetime)


@dataclass
class Filter:
    field: str
    op: str
    value: str


@dataclass
class QuerySpec:
    filters: List[Filter] = field(default_factory=list)
    select: Optional[List[str]] = None
    sort: List[str] = field(default_factory=lambda: list(DEFAULT_SORT))
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(cls, params: Iterable[Tuple[str, str]]) -> "QuerySpec":
        spec = cls()
        errors: List[FieldError] = []

        for key, value in params:
            if key == "select":
                spec.select = _split(value)
            elif key == "sort":
                spec.sort = _split(value) or list(DEFAULT_SORT)
            elif key in ("page", "limit"):
                try:
                    number = int(value)
                except ValueError:
                    number = 0
                if number < 1:
                    errors.append(FieldError(field=key, message=f"{key} must be a positive integer"))
                else:
                    setattr(spec, key, min(number, MAX_LIMIT) if key == "limit" else number)
            else:
                match = _FILTER_KEY.match(key)
                op = (match.group("op") or "eq") if match else None
                if match is None or (op not in COMPARISONS and op != "in"):
                    errors.append(FieldError(field=key, message=f"Unsupported filter '{key}'"))
                    continue
                spec.filters.append(Filter(field=match.group("field"), op=op, value=value))

        if errors:
            raise ValidationError(errors)
        return spec


@dataclass
class Page:
    total: int
    items: Sequence[Any]
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit

    def metadata(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "page": self.page,
            "per_page": self.limit,
            "total_pages": self.total_pages,
            "has_next": self.page < self.total_pages,
            "has_prev": self.page > 1,
        }


def _split(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _column(model, name: str):
    column = model.__table__.columns.get(name)
    if column is None:
        raise ValidationError([FieldError(field=name, message=f"Unknown field '{name}'")])
    return column


def _coerce(column, raw: str) -> Any:
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return raw

    try:
        if python_type is bool:
            if raw.lower() not in ("true", "false", "1", "0"):
                raise ValueError(raw)
            return raw.lower() in ("true", "1")
        if python_type is datetime:
            return _datetime_adapter.validate_python(raw)
        if python_type is uuid.UUID:
            return uuid.UUID(raw)
        if isinstance(python_type, type) and issubclass(python_type, enum.Enum):
            return python_type(raw)
        return python_type(raw)
    except (ValueError, TypeError, PydanticValidationError):
        raise ValidationError([
            FieldError(field=column.name, message=f"Invalid value '{raw}' for {column.name}")
        ])


def apply_filters(stmt: Select, model, spec: QuerySpec) -> Select:
    for flt in spec.filters:
        column = _column(model, flt.field)
        if flt.op == "in":
            stmt = stmt.where(column.in_([_coerce(column, v) for v in _split(flt.value)]))
        else:
            stmt = stmt.where(COMPARISONS[flt.op](column, _coerce(column, flt.value)))
    return stmt


def apply_sort(stmt: Select, model, spec: QuerySpec) -> Select:
    for key in spec.sort:
        column = _column(model, key.lstrip("-"))
        stmt = stmt.order_by(column.desc() if key.startswith("-") else column.asc())
    return stmt


def project(item: Dict[str, Any], fields: Optional[List[str]]) -> Dict[str, Any]:
    """Keep only the selected keys of a serialized record, plus ``id``."""
    if not fields:
        return item
    keep = set(fields) | {"id"}
    return {key: value for key, value in item.items() if key in keep}


async def paginate(
    session: AsyncSession,
    model,
    spec: QuerySpec,
    conditions: Sequence[Any] = (),
    options: Sequence[Any] = (),
) -> Page:
    """Run ``spec`` against ``model``; ``conditions`` are extra WHERE clauses from the caller."""
    base = select(model).where(*conditions) if conditions else select(model)
    base = apply_filters(base, model, spec)

    count_stmt = select(func.count()).select_from(base.subquery())
    total = (await session.execute(count_stmt)).scalar() or 0

    stmt = apply_sort(base, model, spec).options(*options).limit(spec.limit).offset(spec.offset)
    items = (await session.execute(stmt)).scalars().all()
    return Page(total=total, items=items, page=spec.page, limit=spec.limit)

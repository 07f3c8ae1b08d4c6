"""
SQL fragment builders shared by the CRUD layer.

Both builders emit positional placeholders ($1, $2, ...) and collect the
matching values separately, so caller data only ever reaches the database
as bind parameters (see jobly.core.database.query).
"""

from typing import Any, Dict, Iterable, List, NamedTuple

from jobly.core.exceptions import BadRequestError


class SetClause(NamedTuple):
    """Compiled SET clause of a partial update"""
    set_cols: str
    values: List[Any]


def sql_for_partial_update(
    data: Dict[str, Any],
    js_to_sql: Dict[str, str],
    allowed: Iterable[str]
) -> SetClause:
    """
    Compile a partial update into a SET clause and its values.

    Args:
        data: External field name -> new value, only for fields being changed
        js_to_sql: External field name -> column name, for fields whose
            column is spelled differently
        allowed: External field names that may be updated

    Returns:
        SetClause, e.g. for {"firstName": "Aliya", "age": 32} and
        {"firstName": "first_name"}:
        ('first_name = $1, age = $2', ['Aliya', 32])

    Raises:
        BadRequestError: If data is empty or names a field outside allowed
    """
    keys = list(data)
    if not keys:
        raise BadRequestError("No data")

    rejected = sorted(set(keys) - set(allowed))
    if rejected:
        raise BadRequestError(f"Cannot update field(s): {', '.join(rejected)}")

    cols = [f"{js_to_sql.get(key, key)} = ${idx}" for idx, key in enumerate(keys, start=1)]

    return SetClause(set_cols=", ".join(cols), values=[data[key] for key in keys])


def escape_like(value: str) -> str:
    """Escape LIKE wildcards (and the escape character) with a backslash."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class FilterClause:
    """
    Conjunctive WHERE clause built one predicate at a time.

    Each predicate template uses "{}" where its positional placeholder goes:

        clause = FilterClause()
        clause.add("salary >= {}", 100)
        clause.add_literal("equity > 0")
        clause.where  # ' WHERE salary >= $1 AND equity > 0'
        clause.args   # [100]
    """

    def __init__(self):
        self.predicates: List[str] = []
        self.args: List[Any] = []

    def add(self, template: str, value: Any) -> "FilterClause":
        self.args.append(value)
        self.predicates.append(template.format(f"${len(self.args)}"))
        return self

    def add_contains(self, column: str, value: str) -> "FilterClause":
        """
        Case-insensitive substring match; wildcards travel in the value.

        % and _ in the value match themselves, not any character.
        """
        return self.add(f"LOWER({column}) LIKE LOWER({{}}) ESCAPE '\\'", f"%{escape_like(value)}%")

    def add_literal(self, predicate: str) -> "FilterClause":
        self.predicates.append(predicate)
        return self

    @property
    def where(self) -> str:
        if not self.predicates:
            return ""
        return " WHERE " + " AND ".join(self.predicates)

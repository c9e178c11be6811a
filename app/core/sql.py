"""
SQL fragment helpers shared by the data-access layer.

Only values travel as bound parameters. Column names and predicates are
written into the SQL text, so they must come from code, never from a request.
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple

from app.core.exceptions import BadRequestError


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    js_to_sql: Mapping[str, str],
    allowed: Optional[Iterable[str]] = None,
) -> Tuple[str, List[Any]]:
    """
    Build the SET portion of an UPDATE for the fields present in data_to_update.

    Keys are taken in insertion order; the key at position i becomes
    ``"<column>"=$i`` where column is ``js_to_sql[key]`` or the key itself.

        {"firstName": "Aliya", "age": 32}, {"firstName": "first_name"}
        => ('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Args:
        data_to_update: Field name -> new value, at least one entry
        js_to_sql: Field name -> column name for fields whose names differ
        allowed: If given, the only field names accepted

    Returns:
        (set_cols, values) where $i in set_cols binds values[i - 1]

    Raises:
        BadRequestError: If there is nothing to update or a field is not allowed
    """
    keys = list(data_to_update)
    if not keys:
        raise BadRequestError("No data")

    if allowed is not None:
        allowed = set(allowed)
        rejected = [key for key in keys if key not in allowed]
        if rejected:
            raise BadRequestError(f"Cannot update field(s): {', '.join(rejected)}")

    cols = [f'"{js_to_sql.get(key, key)}"=${idx}' for idx, key in enumerate(keys, start=1)]

    return ", ".join(cols), [data_to_update[key] for key in keys]


class FilterBuilder:
    """
    Accumulates WHERE predicates and their positional parameters.

    Each predicate is written with one ``{}`` per parameter; ``add`` numbers
    them in the order they arrive so $n always matches values[n - 1].

        builder = FilterBuilder()
        builder.add("salary >= {}", 100).add("equity > 0")
        builder.where_clause()  # " WHERE salary >= $1 AND equity > 0"
        builder.values          # [100]
    """

    def __init__(self):
        self.predicates: List[str] = []
        self.values: List[Any] = []

    def add(self, predicate: str, *params: Any) -> "FilterBuilder":
        placeholders = []
        for param in params:
            self.values.append(param)
            placeholders.append(f"${len(self.values)}")
        self.predicates.append(predicate.format(*placeholders))
        return self

    def where_clause(self) -> str:
        if not self.predicates:
            return ""
        return " WHERE " + " AND ".join(self.predicates)

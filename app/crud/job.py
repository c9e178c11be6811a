"""
Data access for jobs.

Implements the Repository pattern over hand-written, parameterized SQL so the
API layer never builds queries itself. The database client is passed in, so
a repository can be pointed at any session (request-scoped or test).
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional

from app.core.database import DatabaseClient
from app.core.exceptions import BadRequestError, NotFoundError
from app.core.sql import FilterBuilder, sql_for_partial_update

logger = logging.getLogger(__name__)

# Fields a partial update may touch. Their names already match the columns,
# so updates run with an empty field-name map.
UPDATABLE_FIELDS = frozenset({"title", "salary", "equity"})

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'


def _min_salary(builder: FilterBuilder, value: Any) -> None:
    builder.add("j.salary >= {}", value)


def _has_equity(builder: FilterBuilder, value: Any) -> None:
    # hasEquity=False means "no constraint", not "no equity"
    if value is True:
        builder.add("j.equity > 0")


def _title(builder: FilterBuilder, value: Any) -> None:
    builder.add("LOWER(j.title) LIKE LOWER({})", f"%{value}%")


# Recognized filters, applied in this order
JOB_FILTERS: Dict[str, Callable[[FilterBuilder, Any], None]] = {
    "minSalary": _min_salary,
    "hasEquity": _has_equity,
    "title": _title,
}


def _format_equity(job: Dict[str, Any]) -> Dict[str, Any]:
    """Return equity as plain decimal text ("0.1", never "1E-7") whatever the driver produced."""
    equity = job.get("equity")
    if equity is not None and not isinstance(equity, str):
        job["equity"] = format(Decimal(str(equity)), "f")
    return job


class JobRepository:
    """Create, query, update and remove jobs."""

    def __init__(self, db: DatabaseClient):
        self.db = db

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a job from data and return it.

        Args:
            data: {title, salary, equity, companyHandle}

        Returns:
            {id, title, salary, equity, companyHandle}
        """
        rows = self.db.execute(
            f"""INSERT INTO jobs (title,
                                  salary,
                                  equity,
                                  company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {JOB_COLUMNS}""",
            [data["title"], data.get("salary"), data.get("equity"), data["companyHandle"]],
        )
        job = _format_equity(rows[0])

        logger.info(f"Created job {job['id']}: {job['title']} ({job['companyHandle']})")
        return job

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find all jobs, optionally narrowed by filters, ordered by title.

        Recognized filters:
            minSalary: salary at least this much
            hasEquity: only when True, jobs with non-zero equity
            title: case-insensitive substring of the title

        Filters set to None are ignored.

        Returns:
            [{id, title, salary, equity, companyHandle, companyName}, ...]

        Raises:
            BadRequestError: If an unrecognized filter is given
        """
        filters = filters or {}

        unknown = sorted(set(filters) - set(JOB_FILTERS))
        if unknown:
            raise BadRequestError(f"Unrecognized filter(s): {', '.join(unknown)}")

        filters = {key: value for key, value in filters.items() if value is not None}

        builder = FilterBuilder()
        for name, apply_filter in JOB_FILTERS.items():
            if name in filters:
                apply_filter(builder, filters[name])

        query = f"""SELECT j.id,
                           j.title,
                           j.salary,
                           j.equity,
                           j.company_handle AS "companyHandle",
                           c.name AS "companyName"
                    FROM jobs AS j
                    LEFT JOIN companies AS c ON c.handle = j.company_handle
                    {builder.where_clause()}
                    ORDER BY j.title"""

        rows = self.db.execute(query, builder.values)
        return [_format_equity(row) for row in rows]

    def get(self, job_id: int) -> Dict[str, Any]:
        """
        Return a job with its company nested.

        Returns:
            {id, title, salary, equity, company}
            where company is {handle, name, description, numEmployees, logoUrl}

        Raises:
            NotFoundError: If no job has this id
        """
        rows = self.db.execute(
            f"""SELECT {JOB_COLUMNS}
                FROM jobs
                WHERE id = $1""",
            [job_id],
        )
        if not rows:
            raise NotFoundError(f"No job: {job_id}")

        job = _format_equity(rows[0])

        company_rows = self.db.execute(
            """SELECT handle,
                      name,
                      description,
                      num_employees AS "numEmployees",
                      logo_url AS "logoUrl"
               FROM companies
               WHERE handle = $1""",
            [job.pop("companyHandle")],
        )
        job["company"] = company_rows[0] if company_rows else None

        return job

    def update(self, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partially update a job; only the fields present in data change.

        Args:
            job_id: Job to update
            data: Any of {title, salary, equity}

        Returns:
            {id, title, salary, equity, companyHandle}

        Raises:
            BadRequestError: If data is empty or names a field that cannot change
            NotFoundError: If no job has this id
        """
        set_cols, values = sql_for_partial_update(data, {}, allowed=UPDATABLE_FIELDS)
        id_idx = f"${len(values) + 1}"

        rows = self.db.execute(
            f"""UPDATE jobs
                SET {set_cols}
                WHERE id = {id_idx}
                RETURNING {JOB_COLUMNS}""",
            [*values, job_id],
        )
        if not rows:
            raise NotFoundError(f"No job: {job_id}")

        logger.info(f"Updated job {job_id}: {', '.join(data)}")
        return _format_equity(rows[0])

    def remove(self, job_id: int) -> None:
        """
        Delete a job.

        Raises:
            NotFoundError: If no job has this id
        """
        rows = self.db.execute(
            """DELETE
               FROM jobs
               WHERE id = $1
               RETURNING id""",
            [job_id],
        )
        if not rows:
            raise NotFoundError(f"No job: {job_id}")

        logger.info(f"Deleted job {job_id}")

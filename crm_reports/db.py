"""
Database Client
===============
Supabase client helpers for the report tables.

Environment-aware routing:
    ENVIRONMENT=dev  → all tables go to 'dev' schema
    ENVIRONMENT=prod → tables go to their defined schema (public by default)
"""

from functools import lru_cache

from crm_reports.config import get_settings


@lru_cache
def get_supabase_client():
    """
    Get Supabase client.

    Returns:
        Supabase client instance
    """
    # Import here to avoid requiring supabase for the pure analysis code
    from supabase import create_client

    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_service_key)


def _resolve_table(table_name: str) -> tuple[str, str]:
    """
    Resolve table name to (schema, table) based on environment.

    In dev: all tables route to 'dev' schema with schema-prefixed table name
    In prod: tables use their defined schema

    Args:
        table_name: Table name, optionally schema-qualified (e.g., 'public.Report')

    Returns:
        Tuple of (schema, table)

    Examples:
        ENVIRONMENT=prod: 'Report' → ('public', 'Report')
        ENVIRONMENT=dev:  'Report' → ('dev', 'public_Report')
    """
    settings = get_settings()

    if "." in table_name:
        schema, table = table_name.split(".", 1)
    else:
        schema, table = "public", table_name

    if settings.environment == "dev":
        return "dev", f"{schema}_{table}"

    return schema, table


def read_table(
    table_name: str,
    columns: str = "*",
    filters: dict | None = None,
    in_filters: dict | None = None,
    order_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
) -> list[dict]:
    """
    Read records from a table.

    Args:
        table_name: Table name (e.g., 'Report' or 'public.Field')
        columns: Columns to select (default: all)
        filters: Optional equality filters as {column: value}
        in_filters: Optional membership filters as {column: [values]}
        order_by: Optional column to order by
        descending: Order descending instead of ascending
        limit: Optional row limit

    Returns:
        List of records
    """
    client = get_supabase_client()
    schema, table = _resolve_table(table_name)
    query = client.schema(schema).table(table).select(columns)

    if filters:
        for col, val in filters.items():
            query = query.eq(col, val)

    if in_filters:
        for col, values in in_filters.items():
            query = query.in_(col, list(values))

    if order_by:
        query = query.order(order_by, desc=descending)

    if limit:
        query = query.limit(limit)

    result = query.execute()
    return list(result.data)  # type: ignore[arg-type]


def read_one(table_name: str, filters: dict) -> dict | None:
    """
    Read a single record matching the filters.

    Returns:
        The first matching record, or None if nothing matches
    """
    rows = read_table(table_name, filters=filters, limit=1)
    return rows[0] if rows else None

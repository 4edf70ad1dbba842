"""PostgreSQL connection pool for the key-value project store."""

from psycopg2.pool import SimpleConnectionPool

from app.config import settings

_pool: SimpleConnectionPool | None = None


def get_pool() -> SimpleConnectionPool:
    """Return the shared connection pool, creating it on first call.

    Returns
    -------
    SimpleConnectionPool
        A psycopg2 connection pool sized by ``PG_POOL_MIN`` / ``PG_POOL_MAX``.

    Raises
    ------
    psycopg2.OperationalError
        If the database cannot be reached.
    """
    global _pool
    if _pool is None:
        _pool = SimpleConnectionPool(
            minconn=settings.pg_pool_min,
            maxconn=settings.pg_pool_max,
            host=settings.pg_host,
            port=settings.pg_port,
            dbname=settings.pg_database,
            user=settings.pg_user,
            password=settings.pg_password,
        )
    return _pool


def close_pool() -> None:
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None

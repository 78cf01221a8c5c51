"""SqlPad ad-hoc SQL console.

Type a connection string and a query, execute it against a MySQL server
without blocking the host loop, and view the result as a text grid. The
connection string and query text are kept in an encrypted preference store.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]

"""
db/ - Database Layer
====================
Owns the PostgreSQL connection pool and the schema bootstrap for the
customer / invoice / invoice_line / track / genre tables.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""

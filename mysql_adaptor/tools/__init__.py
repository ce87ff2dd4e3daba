"""
Database tool implementations for the adaptor.

- mysql: MySQL connection lifecycle and insert/upsert/sql_string operations
"""

"""
MySQL tool for the adaptor.

This package provides:
- Connection configuration validation
- A single managed connection per run with idempotent close
- INSERT / ON DUPLICATE KEY UPDATE statement assembly
- Statement execution through PyMySQL

Usage:
    from mysql_adaptor.tools.mysql import insert, upsert, sql_string
"""

from mysql_adaptor.tools.mysql.operations import insert, sql_string, upsert

__all__ = ['insert', 'upsert', 'sql_string']

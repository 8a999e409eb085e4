# 📄 File: sprout/shared/infrastructure/database/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The database toolbox: connection pool, sessions and the base every table builds on.
#
# 🧪 Purpose (Technical Summary):
# Exports the declarative Base, engine lifecycle helpers and session dependencies.
#
# 🔗 Dependencies:
# - connection.py, session.py
#
# 🔄 Connected Modules / Calls From:
# - Repository implementations, sprout.main, migrations/env.py

from .connection import Base, close_database, database_health_check, init_database
from .session import database_session, get_db_session, initialize_sessions

__all__ = [
    "Base",
    "close_database",
    "database_health_check",
    "database_session",
    "get_db_session",
    "init_database",
    "initialize_sessions",
]

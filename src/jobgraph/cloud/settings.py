from __future__ import annotations
import os

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///./jobgraph.db")
REDIS_URL = os.environ.get("REDIS_URL") or None  # queue notification is off when unset
QUEUE_NAME = os.environ.get("QUEUE_NAME", "jobgraph:queue")
DEBUG = os.environ.get("JOBGRAPH_DEBUG", "0") not in ("", "0", "false", "no")

import pytest

from jobgraph.cloud.db import create_tables, make_engine, make_sessionmaker
from jobgraph.cloud.store import JobStore
from jobgraph.schemas import JobRequest, TaskRequest


def make_request(*tasks, schedule="* * * * *", route_path=None, **kw) -> JobRequest:
    """Build a JobRequest from (name, next_tasks) pairs."""
    return JobRequest(
        name=kw.pop("name", "job"),
        schedule=schedule,
        route_path=route_path,
        tasks=[TaskRequest(name=n, command=f"echo {n}", next_tasks=nt) for n, nt in tasks],
        **kw,
    )


@pytest.fixture
async def session_factory(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield make_sessionmaker(engine)
    await engine.dispose()


@pytest.fixture
def store(session_factory):
    return JobStore(session_factory)

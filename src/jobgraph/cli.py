# cli.py
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from jobgraph.errors import JobValidationError
from jobgraph.schemas import JobRequest
from jobgraph.ui.console import Console, get_console, set_console
from jobgraph.validator import validate_job_request


def load_job_request(path: Path) -> JobRequest:
    """
    Read a job document (the same JSON the API accepts).

    Raises:
        SystemExit: If the file is missing or does not decode into a job
    """
    console = get_console()

    if not path.exists():
        console.print_error(
            "Job file not found",
            f"Could not find job file: {path}",
            suggestion="Pass the path to a JSON job document:\n  jobgraph validate job.json",
        )
        sys.exit(1)

    try:
        return JobRequest.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print_error(
            "Invalid job document",
            f"Could not decode {path} into a job request.",
            details=[
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" if err["loc"] else err["msg"]
                for err in e.errors()
            ],
        )
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
def cli(debug):
    """jobgraph: job task-graph validation and storage."""
    set_console(Console(debug=debug))


@cli.command()
@click.argument("job_file", type=click.Path(path_type=Path))
def validate(job_file):
    """Validate a job document without storing it."""
    console = get_console()
    req = load_job_request(job_file)

    try:
        job = validate_job_request(req)
    except JobValidationError as e:
        console.print_error("Job rejected", str(e), details=[f"kind: {e.kind}"])
        console.print_debug(e.describe())
        sys.exit(1)

    console.print_job_valid(job.name, len(job.tasks), job.kind.value)
    for task in job.tasks:
        console.print_task(task.name, task.next_tasks)


@cli.command("init-db")
@click.option("--database-url", default=None, help="Database URL (defaults to $DATABASE_URL)")
def init_db(database_url):
    """Create the jobs, tasks and nodes tables."""
    from jobgraph.cloud.db import create_tables, make_engine
    from jobgraph.cloud.settings import DATABASE_URL

    console = get_console()
    url = database_url or DATABASE_URL

    async def _init() -> None:
        engine = make_engine(url)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    try:
        asyncio.run(_init())
    except Exception as e:
        console.print_error("Could not create tables", f"Database: {url}")
        console.print_exception(e)
        sys.exit(1)

    console.print_info(f"Tables ready in {url}")


if __name__ == "__main__":
    cli()

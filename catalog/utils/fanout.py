import asyncio
from collections.abc import Callable
from typing import Any
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

Read = Callable[[Session], Any]


def _run_read(session_factory: sessionmaker[Session], read: Read) -> Any:
    with session_factory() as db:
        return read(db)


async def fan_out(session_factory: sessionmaker[Session], *reads: Read) -> list[Any]:
    """
    Run independent reads concurrently, each on its own session, and return
    their results in argument order. The first read to fail propagates its
    exception and the remaining results are discarded.
    """
    return await asyncio.gather(
        *(run_in_threadpool(_run_read, session_factory, read) for read in reads)
    )

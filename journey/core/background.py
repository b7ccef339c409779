# core/background.py
import asyncio
from typing import Awaitable, Callable, Optional, Set

from journey.core.logger import logger

_pending: Set[asyncio.Task] = set()


async def _run_detached(factory: Callable[[], Awaitable[None]], description: str) -> None:
    try:
        await factory()
    except asyncio.CancelledError:
        logger.warning(f"Detached task cancelled: {description}")
        raise
    except Exception as e:
        logger.error(f"Detached task failed: {description}: {e}", exc_info=True)


def spawn_detached(factory: Callable[[], Awaitable[None]], description: str) -> asyncio.Task:
    """
    Schedule work that outlives the current request.

    The task is not awaited by the caller and its failures only reach the log.
    A reference is held until it finishes so it cannot be garbage collected.
    """
    task = asyncio.get_running_loop().create_task(_run_detached(factory, description))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


async def drain_detached_tasks(timeout: Optional[float] = None) -> None:
    """Wait for in-flight detached tasks, used on shutdown and in tests."""
    loop = asyncio.get_running_loop()
    tasks = [task for task in _pending if task.get_loop() is loop]
    if not tasks:
        return
    done, not_done = await asyncio.wait(tasks, timeout=timeout)
    if not_done:
        logger.warning(f"{len(not_done)} detached task(s) still running after {timeout}s")

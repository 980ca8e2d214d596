from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence

import anyio


def with_sem[**P, R](
    sem: anyio.Semaphore,
    func: Callable[P, Awaitable[R]],
    *args: P.args,
    **kwargs: P.kwargs,
) -> Callable[[], Awaitable[R]]:
    async def wrapper() -> R:
        async with sem:
            return await func(*args, **kwargs)

    return wrapper


async def gather_bounded[T, R](
    func: Callable[[T], Awaitable[R]], items: Sequence[T], *, limit: int
) -> list[R]:
    """Apply `func` to every item with at most `limit` calls in flight, keeping order."""
    sem = anyio.Semaphore(max(limit, 1))
    results: dict[int, R] = {}

    async def run(idx: int, item: T) -> None:
        results[idx] = await with_sem(sem, func, item)()

    async with anyio.create_task_group() as tg:
        for idx, item in enumerate(items):
            tg.start_soon(run, idx, item)

    return [results[idx] for idx in range(len(items))]

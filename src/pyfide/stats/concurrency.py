"""Run independent facet computations on a thread pool."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Mapping


def run_facets(tasks: Mapping[str, Callable[[], Any]], max_workers: int = 1) -> Dict[str, Any]:
    """Evaluate every task and return results by name.

    The first failure propagates and pending tasks are cancelled; no partial
    result is returned.
    """

    if max_workers <= 1 or len(tasks) <= 1:
        return {name: task() for name, task in tasks.items()}

    with ThreadPoolExecutor(max_workers=min(max_workers, len(tasks)), thread_name_prefix="facet") as pool:
        futures = {name: pool.submit(task) for name, task in tasks.items()}
        try:
            return {name: future.result() for name, future in futures.items()}
        except BaseException:
            for future in futures.values():
                future.cancel()
            raise

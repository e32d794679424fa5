"""Call sync or async user callables uniformly.

Handlers and middleware may be ``def`` or ``async def``; the pipeline
awaits through this helper so the check lives in one place::

    result = await invoke(route.handler, ctx)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result when it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result

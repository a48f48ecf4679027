"""Invoke helpers — call sync or async handlers uniformly.

Route handlers can be ``def`` or ``async def``. Any code that calls
a user-provided handler must handle both cases. This module provides
a single helper so the sync/async check lives in exactly one place.

Usage::

    from perch._internal.invoke import invoke

    response = await invoke(route.handler, request, next)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately, no await needed
        def ping(request, next):
            return Response("pong")

        # async: returns coroutine, awaited automatically
        async def profile(request, next):
            user = await load_user(request.get_attribute("id"))
            return Response(user.name)
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result

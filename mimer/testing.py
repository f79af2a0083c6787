from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from mimer.conf import _monkay as monkay_for_settings


class override_settings:
    """
    A context manager that overrides mimer settings temporarily.

    Usage:
    ```
    with override_settings(line_length=64):
        encode(message, sink)
    ```

    It can also be used as a decorator, on sync or async functions:
    ```
    @override_settings(write_bcc_header=True)
    def test_function():
        ...
    ```
    """

    def __init__(self, **kwargs: Any) -> None:
        self.options = kwargs
        self._innermanager: Any = None

    def __enter__(self) -> None:
        original_settings = monkay_for_settings.settings
        opts = original_settings.dict()
        opts.update(self.options)
        self._innermanager = monkay_for_settings.with_settings(
            original_settings.__class__(**opts)
        )
        self._innermanager.__enter__()

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self._innermanager.__exit__(exc_type, exc_value, traceback)

    async def __aenter__(self) -> None:
        return self.__enter__()

    async def __aexit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.__exit__(exc_type, exc_value, traceback)

    def __call__(self, func: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                async with self:
                    return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with self:
                return func(*args, **kwargs)

        return sync_wrapper

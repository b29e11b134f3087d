from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable


class RetryPolicy(ABC):
    """
    Base class for retry policies.
    Defines the interface for executing an async function with retries.
    """

    @abstractmethod
    async def execute(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """
        Execute the given async function with retries.

        Returns:
            The result of the async function if successful.

        Raises:
            Exception: the last error once retries are exhausted.
        """

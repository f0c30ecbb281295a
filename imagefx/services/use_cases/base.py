"""
Base use case class.

A use case is one workflow step (upload, generate, download) with an explicit
request/response contract. It knows nothing about HTTP routes or the CLI, so
every front end drives the same code.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class UseCase(ABC, Generic[RequestT, ResponseT]):
    """
    Base use case abstract class.

    Type Parameters:
        RequestT: Type of the input request object
        ResponseT: Type of the output response object
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """
        Run the step and return its result.

        Raises:
            WorkflowError subclasses. Translating them into HTTP responses or
            exit codes is the caller's job.
        """

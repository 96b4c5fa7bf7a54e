"""
Answering gateway capability.

Interface of the remote answering and indexing service as consumed by the
knowledge base synchronizer and the conversation engine. Implementations
are constructed at startup and injected; tests inject an in-memory fake.

Dependencies: assistant_hub.boundary.answering.answering_schemas
System role: Capability contract for the external service
"""

from typing import AsyncIterator, Protocol, Sequence

from assistant_hub.boundary.answering.answering_schemas import (
    AnswerRequest,
    AnswerResult,
    GatewayCompletion,
    GatewayDelta,
)


class AnsweringGateway(Protocol):
    """
    Remote answering/indexing capability.

    Every method raises UpstreamFailure on remote errors;
    add_files_to_index raises IndexingFailed when ingestion does not
    complete.
    """

    async def create_index(self, name: str) -> str: ...

    async def delete_index(self, vector_store_id: str) -> None: ...

    async def upload_file(self, data: bytes, filename: str) -> str: ...

    async def delete_file(self, file_id: str) -> None: ...

    async def add_files_to_index(
        self,
        vector_store_id: str,
        file_ids: Sequence[str],
    ) -> None: ...

    async def remove_file_from_index(self, vector_store_id: str, file_id: str) -> None: ...

    async def answer(self, request: AnswerRequest) -> AnswerResult: ...

    def stream_answer(
        self,
        request: AnswerRequest,
    ) -> AsyncIterator[GatewayDelta | GatewayCompletion]: ...

    async def close(self) -> None: ...

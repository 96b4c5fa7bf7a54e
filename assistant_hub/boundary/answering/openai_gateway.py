"""
OpenAI answering gateway.

Implements AnsweringGateway over the OpenAI Responses API (answers with
file_search) and the Vector Stores API (one index per assistant).

Dependencies: openai, assistant_hub.configs, assistant_hub.core.exceptions
System role: Client for the remote answering/indexing service
"""

import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Sequence

from openai import AsyncOpenAI, OpenAIError

from assistant_hub.boundary.answering.answering_schemas import (
    AnswerRequest,
    AnswerResult,
    GatewayCompletion,
    GatewayDelta,
    parse_response,
)
from assistant_hub.core.exceptions import IndexingFailed, UpstreamFailure

if TYPE_CHECKING:
    from assistant_hub.configs.settings import Settings
    from assistant_hub.core.stream_adapter import StreamAdapter

logger = logging.getLogger(__name__)


class OpenAIGateway:
    """
    OpenAI client wrapper for answering and indexing operations.

    Owns one AsyncOpenAI client for the process lifetime. The stream
    adapter that turns raw Responses events into gateway items is injected
    at construction.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        stream_adapter: "StreamAdapter",
        chunking_strategy: dict[str, Any],
        poll_interval_ms: int = 1000,
    ) -> None:
        """
        Initialize gateway.

        Args:
            client: Configured AsyncOpenAI client
            stream_adapter: Adapter for raw streaming events
            chunking_strategy: Static chunking policy for indexes and batches
            poll_interval_ms: Poll interval while waiting for batch ingestion
        """
        self.client = client
        self.stream_adapter = stream_adapter
        self.chunking_strategy = chunking_strategy
        self.poll_interval_ms = poll_interval_ms

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        stream_adapter: "StreamAdapter",
    ) -> "OpenAIGateway":
        """
        Build a gateway from application settings.

        Args:
            settings: Application settings
            stream_adapter: Adapter for raw streaming events

        Returns:
            OpenAIGateway: Gateway owning a fresh AsyncOpenAI client
        """
        config = settings.openai
        client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )
        return cls(
            client=client,
            stream_adapter=stream_adapter,
            chunking_strategy=settings.knowledge_base.chunking_strategy(),
            poll_interval_ms=config.poll_interval_ms,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()

    async def create_index(self, name: str) -> str:
        """
        Create a vector store with the fixed chunking policy.

        Args:
            name: Human-readable index name

        Returns:
            str: Vector store id

        Raises:
            UpstreamFailure: If creation fails
        """
        try:
            store = await self.client.vector_stores.create(
                name=name,
                chunking_strategy=self.chunking_strategy,
            )
        except OpenAIError as exc:
            raise UpstreamFailure(
                f"Failed to create knowledge base: {exc}",
                operation="create_index",
            ) from exc

        logger.info("Vector store created", extra={"vector_store_id": store.id, "store_name": name})
        return store.id

    async def delete_index(self, vector_store_id: str) -> None:
        """Delete a vector store. Raises UpstreamFailure on error."""
        try:
            await self.client.vector_stores.delete(vector_store_id)
        except OpenAIError as exc:
            raise UpstreamFailure(
                f"Failed to delete knowledge base: {exc}",
                operation="delete_index",
                details={"vector_store_id": vector_store_id},
            ) from exc

    async def upload_file(self, data: bytes, filename: str) -> str:
        """
        Upload bytes to the file store for use with assistants.

        Args:
            data: File contents
            filename: Name reported to the service

        Returns:
            str: Remote file id

        Raises:
            UpstreamFailure: If the upload fails
        """
        try:
            uploaded = await self.client.files.create(
                file=(filename, data),
                purpose="assistants",
            )
        except OpenAIError as exc:
            raise UpstreamFailure(
                f"Failed to upload file: {exc}",
                operation="upload_file",
                details={"filename": filename},
            ) from exc
        return uploaded.id

    async def delete_file(self, file_id: str) -> None:
        """Delete a remote file. Raises UpstreamFailure on error."""
        try:
            await self.client.files.delete(file_id)
        except OpenAIError as exc:
            raise UpstreamFailure(
                f"Failed to delete file: {exc}",
                operation="delete_file",
                details={"file_id": file_id},
            ) from exc

    async def add_files_to_index(
        self,
        vector_store_id: str,
        file_ids: Sequence[str],
    ) -> None:
        """
        Submit files to a vector store and wait for ingestion.

        Blocks until the batch leaves the in_progress state. A batch that
        ends in any status other than completed, or that reports failed
        files, counts as an indexing failure.

        Args:
            vector_store_id: Target vector store
            file_ids: Remote file ids to ingest

        Raises:
            IndexingFailed: If ingestion fails or does not complete
        """
        try:
            batch = await self.client.vector_stores.file_batches.create_and_poll(
                vector_store_id=vector_store_id,
                file_ids=list(file_ids),
                chunking_strategy=self.chunking_strategy,
                poll_interval_ms=self.poll_interval_ms,
            )
        except OpenAIError as exc:
            raise IndexingFailed(
                f"File batch submission failed: {exc}",
                operation="add_files_to_index",
                details={"vector_store_id": vector_store_id},
            ) from exc

        failed_count = getattr(batch.file_counts, "failed", 0) or 0
        if batch.status != "completed" or failed_count:
            raise IndexingFailed(
                f"File batch ended with status '{batch.status}'",
                operation="add_files_to_index",
                details={
                    "vector_store_id": vector_store_id,
                    "batch_id": batch.id,
                    "status": batch.status,
                    "failed_files": failed_count,
                },
            )

    async def remove_file_from_index(self, vector_store_id: str, file_id: str) -> None:
        """Detach a file from a vector store. Raises UpstreamFailure on error."""
        try:
            await self.client.vector_stores.files.delete(
                file_id,
                vector_store_id=vector_store_id,
            )
        except OpenAIError as exc:
            raise UpstreamFailure(
                f"Failed to remove file from knowledge base: {exc}",
                operation="remove_file_from_index",
                details={"vector_store_id": vector_store_id, "file_id": file_id},
            ) from exc

    async def answer(self, request: AnswerRequest) -> AnswerResult:
        """
        Run one non-streaming turn.

        Args:
            request: Turn request

        Returns:
            AnswerResult: Validated text, citations and continuation token

        Raises:
            UpstreamFailure: On remote errors or unrecognized responses
        """
        try:
            response = await self.client.responses.create(**request.to_payload())
        except OpenAIError as exc:
            raise UpstreamFailure(f"Answering call failed: {exc}", operation="answer") from exc
        return parse_response(response)

    async def stream_answer(
        self,
        request: AnswerRequest,
    ) -> AsyncIterator[GatewayDelta | GatewayCompletion]:
        """
        Run one streaming turn.

        Yields:
            GatewayDelta chunks in arrival order, then one GatewayCompletion

        Raises:
            UpstreamFailure: On remote errors
            IncompleteStream: If the stream ends without a terminal event
        """
        try:
            stream = await self.client.responses.create(**request.to_payload(), stream=True)
        except OpenAIError as exc:
            raise UpstreamFailure(f"Answering call failed: {exc}", operation="answer") from exc

        async with stream:
            async for item in self.stream_adapter.adapt(self._raw_events(stream)):
                yield item

    @staticmethod
    async def _raw_events(stream: AsyncIterator[Any]) -> AsyncIterator[Any]:
        try:
            async for event in stream:
                yield event
        except OpenAIError as exc:
            raise UpstreamFailure(f"Answer stream failed: {exc}", operation="answer") from exc

"""
Dependency injection container.

The ServiceContainer holds process-wide collaborators (answering gateway,
stager, synchronizer, lock registries). It is built in the application
lifespan, stored on app.state and closed at shutdown. Factory functions
below expose it and the per-request services as FastAPI dependencies.

Dependencies: assistant_hub.configs, assistant_hub.application, assistant_hub.boundary, assistant_hub.core
System role: DI container for service injection
"""

import logging
from typing import AsyncGenerator
from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from assistant_hub.application.services import (
    AccessService,
    AssistantService,
    ChatService,
    DocumentService,
    SessionService,
    UserService,
)
from assistant_hub.boundary.answering import AnsweringGateway, OpenAIGateway
from assistant_hub.boundary.db.CRUD.user_crud import user_crud
from assistant_hub.boundary.db.connection import get_async_session_factory
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.configs import Settings
from assistant_hub.core.access_guard import ensure_operator
from assistant_hub.core.citation_builder import CitationBuilder
from assistant_hub.core.document_stager import DocumentStager
from assistant_hub.core.exceptions import AuthenticationRequired
from assistant_hub.core.keyed_lock import KeyedLock
from assistant_hub.core.knowledge_base import KnowledgeBaseSynchronizer
from assistant_hub.core.stream_adapter import StreamAdapter

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"


class ServiceContainer:
    """Container for process-wide service collaborators."""

    def __init__(
        self,
        settings: Settings,
        gateway: AnsweringGateway,
        session_factory: async_sessionmaker[AsyncSession],
        stager: DocumentStager | None = None,
    ) -> None:
        """
        Wire collaborators.

        Args:
            settings: Application settings
            gateway: Remote answering/indexing capability
            session_factory: Database session factory
            stager: Upload stager (built from settings if omitted)
        """
        self.settings = settings
        self.gateway = gateway
        self.session_factory = session_factory
        self.stager = stager or DocumentStager.from_settings(settings)
        self.turn_locks = KeyedLock("session-turn")
        self.provisioning_locks = KeyedLock("assistant-provisioning")
        self.citation_builder = CitationBuilder()
        self.synchronizer = KnowledgeBaseSynchronizer(
            gateway=gateway,
            stager=self.stager,
            provisioning_locks=self.provisioning_locks,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContainer":
        """Build the production container around an OpenAI gateway."""
        gateway = OpenAIGateway.from_settings(settings, StreamAdapter())
        return cls(
            settings=settings,
            gateway=gateway,
            session_factory=get_async_session_factory(),
        )

    async def close(self) -> None:
        """Release the gateway's network resources."""
        await self.gateway.close()


def get_container(request: Request) -> ServiceContainer:
    """Get the container built at startup."""
    return request.app.state.container


async def get_db(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped database session from the container's factory.

    Yields:
        AsyncSession: Session closed when the request completes
    """
    async with container.session_factory() as session:
        yield session


async def get_current_user(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    db: AsyncSession = Depends(get_db),
) -> UserModel:
    """
    Resolve the upstream-authenticated principal.

    Raises:
        AuthenticationRequired: If the header is missing, malformed or unknown
    """
    if not x_user_id:
        raise AuthenticationRequired("Authentication required")
    try:
        user_id = UUID(x_user_id)
    except ValueError as e:
        raise AuthenticationRequired("Malformed principal identifier") from e
    user = await user_crud.get_by_id(db, user_id)
    if user is None:
        raise AuthenticationRequired("Unknown principal")
    return user


async def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    """Require the operator role. Raises AccessDenied otherwise."""
    ensure_operator(user)
    return user


def get_session_service(db: AsyncSession = Depends(get_db)) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db)


def get_chat_service(
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
) -> ChatService:
    """Get chat service wired to the shared gateway and turn locks."""
    return ChatService(
        db=db,
        gateway=container.gateway,
        turn_locks=container.turn_locks,
        session_factory=container.session_factory,
        citation_builder=container.citation_builder,
        default_model=container.settings.openai.default_model,
    )


def get_assistant_service(
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
) -> AssistantService:
    """Get assistant service instance."""
    return AssistantService(
        db=db,
        synchronizer=container.synchronizer,
        default_model=container.settings.openai.default_model,
    )


def get_document_service(
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
) -> DocumentService:
    """Get document service instance."""
    return DocumentService(db=db, stager=container.stager, synchronizer=container.synchronizer)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Get user service instance."""
    return UserService(db=db)


def get_access_service(db: AsyncSession = Depends(get_db)) -> AccessService:
    """Get access service instance."""
    return AccessService(db=db)

import logging
from dataclasses import dataclass
from kanban_api.core.config import Settings
from kanban_api.core.database import build_engine, build_session_factory
from kanban_api.core.security import TokenSettings
from kanban_api.repositories.base import BoardRepository, UserRepository
from kanban_api.repositories.memory import MemoryBoardRepository, MemoryUserRepository
from kanban_api.repositories.sql import SqlBoardRepository, SqlUserRepository
from kanban_api.services.auth_service import AuthService
from kanban_api.services.board_service import BoardService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    """Long-lived objects shared by every request, stored on app.state"""
    token_settings: TokenSettings
    users: UserRepository
    boards: BoardRepository
    auth_service: AuthService
    board_service: BoardService


def build_repositories(settings: Settings) -> tuple[UserRepository, BoardRepository]:
    if settings.STORAGE_BACKEND == "memory":
        logger.info("Using in-memory storage; data is lost on restart")
        return MemoryUserRepository(), MemoryBoardRepository()

    engine = build_engine(settings.DATABASE_URL)
    session_factory = build_session_factory(engine)
    logger.info("Using SQL storage at %s", engine.url.render_as_string(hide_password=True))
    return SqlUserRepository(session_factory), SqlBoardRepository(session_factory)


def build_container(settings: Settings) -> Container:
    if settings.uses_insecure_secret:
        logger.warning(
            "JWT_SECRET is not set; signing tokens with the built-in development secret. "
            "Never run like this in production."
        )

    token_settings = TokenSettings.from_settings(settings)
    users, boards = build_repositories(settings)
    return Container(
        token_settings=token_settings,
        users=users,
        boards=boards,
        auth_service=AuthService(users, token_settings),
        board_service=BoardService(boards),
    )

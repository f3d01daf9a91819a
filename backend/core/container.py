# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Composition root.

Builds every service once from :class:`Settings` and hangs the result on
``app.state.container``.  Route handlers reach it through the small
dependency functions below, and tests can build a container from their own
settings.  Configuration values are read here only; the services receive
them as constructor arguments.
"""

from dataclasses import dataclass

from fastapi import Request

from auth.credentials import CredentialStore
from core.config import Settings
from core.logger import logger
from core.security import PasswordHasher, TokenService
from files.pipeline import FileIngestionPipeline, UploadPolicy
from files.storage import FileStorage
from models.product import Product
from models.uploaded_file import UploadedFile
from models.user import User
from repositories.base import Repository
from repositories.memory import MemoryRepository


@dataclass
class Container:
    settings: Settings
    tokens: TokenService
    credentials: CredentialStore
    products: Repository
    pipeline: FileIngestionPipeline


def _build_repositories(settings: Settings) -> tuple[Repository, Repository, Repository]:
    if not settings.database_url:
        logger.info("Using in-memory storage (state is lost on restart)")
        return (
            MemoryRepository(unique_keys=("email",)),
            MemoryRepository(),
            MemoryRepository(unique_keys=("stored_name",), auto_id=False),
        )

    # Lazy import: SQLAlchemy engines are only needed for the SQL backend
    from database import create_session_factory
    from repositories.sql import SqlRepository

    session_factory = create_session_factory(settings.database_url)
    logger.info("Using SQL storage (%s)", session_factory.kw["bind"].url.render_as_string(hide_password=True))
    return (
        SqlRepository(User, session_factory, unique_keys=("email",)),
        SqlRepository(Product, session_factory),
        SqlRepository(
            UploadedFile,
            session_factory,
            unique_keys=("stored_name",),
            order_by=UploadedFile.uploaded_at,
        ),
    )


def build_container(settings: Settings) -> Container:
    users, products, files = _build_repositories(settings)
    hasher = PasswordHasher(rounds=settings.password_hash_rounds)
    tokens = TokenService(secret=settings.secret_key, lifetime=settings.token_lifetime)
    pipeline = FileIngestionPipeline(
        files=files,
        storage=FileStorage(settings.upload_dir),
        policy=UploadPolicy.from_settings(settings),
    )
    return Container(
        settings=settings,
        tokens=tokens,
        credentials=CredentialStore(users, hasher),
        products=products,
        pipeline=pipeline,
    )


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_credential_store(request: Request) -> CredentialStore:
    return get_container(request).credentials


def get_token_service(request: Request) -> TokenService:
    return get_container(request).tokens


def get_product_repository(request: Request) -> Repository:
    return get_container(request).products


def get_pipeline(request: Request) -> FileIngestionPipeline:
    return get_container(request).pipeline

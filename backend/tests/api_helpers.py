from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import ValidationError as PydanticValidationError

from civic.access.errors import AccessDomainError
from civic.access.principal import Principal
from civic.api.router import router
from civic.dependencies import (
    get_content_repository,
    get_principal_directory,
    get_session_store,
)
from civic.errors import AppError
from civic.main import (
    handle_access_domain_error,
    handle_app_error,
    handle_model_validation_error,
    handle_request_validation_error,
)
from civic.security.token_inspection import issue_access_token
from tests.access_helpers import (
    FakeContentRepository,
    FakePrincipalDirectory,
    InMemorySessionStore,
)


def make_app(
    repo: FakeContentRepository | None = None,
    store: InMemorySessionStore | None = None,
    directory: FakePrincipalDirectory | None = None,
) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(AccessDomainError, handle_access_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(PydanticValidationError, handle_model_validation_error)

    repo = repo if repo is not None else FakeContentRepository()
    store = store if store is not None else InMemorySessionStore()
    directory = directory if directory is not None else FakePrincipalDirectory()
    app.dependency_overrides[get_content_repository] = lambda: repo
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_principal_directory] = lambda: directory
    return TestClient(app)


def auth_headers(
    principal: Principal,
    *,
    session_id: str | None = None,
    commune: str | None = None,
) -> dict[str, str]:
    headers = {
        "Authorization": f"Bearer {issue_access_token(principal, session_id=session_id)}"
    }
    if commune is not None:
        headers["x-commune-id"] = commune
    return headers

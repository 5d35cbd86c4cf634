"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- DbSession: per-request SQLAlchemy session
- Store: BookStore bound to that session
- TokenClaims / require_token: the bearer-token gate for protected routes
- JsonBody: the decoded request body, before any validation
"""

import json
import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import PayloadValidationError
from app.services.security import verify_token_type
from app.services.store import BookStore
from app.services.validation import FORM_ERRORS_KEY

logger = logging.getLogger(__name__)

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def get_book(db: Session = Depends(get_db)):
#
# You can write:
#   def get_book(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


def get_store(db: DbSession) -> BookStore:
    """BookStore for the current request's session."""
    return BookStore(db)


Store = Annotated[BookStore, Depends(get_store)]


# =============================================================================
# Bearer Token Authentication
# =============================================================================
# HTTPBearer extracts the token from "Authorization: Bearer <token>" and
# adds the "Authorize" button to Swagger UI. auto_error=False so a missing
# header reaches require_token, which answers with the same 401 as a bad
# token.

bearer_scheme = HTTPBearer(auto_error=False)


def require_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict:
    """
    Reject the request unless it carries a valid access token.

    Used as a router-level dependency, so it runs before anything else
    the route depends on (body, session, path parsing).

    Returns:
        The decoded token claims

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired,
            not an access token, or has no subject
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        logger.warning(f"Missing bearer token for {request.method} {request.url.path}")
        raise credentials_exception

    payload = verify_token_type(
        credentials.credentials,
        "access",
        request.app.state.settings,
    )
    if payload is None or not payload.get("sub"):
        raise credentials_exception

    return payload


TokenClaims = Annotated[dict, Depends(require_token)]


# =============================================================================
# Request Body
# =============================================================================
async def get_json_body(request: Request) -> Any:
    """
    Decode the JSON request body without validating its shape.

    Validation happens in the route (see app.services.validation) so that
    it can run after path-id handling and report errors per field.
    An empty body decodes to {}.

    Raises:
        PayloadValidationError: if the body is not valid JSON
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise PayloadValidationError({FORM_ERRORS_KEY: ["Malformed JSON body"]})


JsonBody = Annotated[Any, Depends(get_json_body)]

from typing import Awaitable, Callable, List, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from miraveja_wiring.application import BeanIndex, BeanIndexer, BeanResolver
from miraveja_wiring.domain import BeanDefinition, BeanInjectionPoint, IndexStats, ResolutionResult
from miraveja_wiring.infrastructure.logging import clear_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

log = structlog.get_logger(__name__)


def create_index_dependency(indexer: BeanIndexer) -> Callable[[], BeanIndex]:
    """Create a FastAPI Depends() callable returning the live bean index.

    Args:
        indexer: The indexer owning the index.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> get_index = create_index_dependency(indexer)
        >>>
        >>> @app.get("/beans/count")
        >>> async def count(index: BeanIndex = Depends(get_index)):
        ...     return {"count": len(index)}
    """

    def dependency() -> BeanIndex:
        """Return the indexer's current index."""
        return indexer.index

    return dependency


def create_navigation_router(indexer: BeanIndexer, resolver: Optional[BeanResolver] = None) -> APIRouter:
    """Create the router serving navigation queries to an editor front end.

    Routes:
        POST /beans/resolve: injection point in, ranked candidates out.
        GET /beans/definitions: all definitions, optionally filtered by bean name.
        GET /beans/injection-points: injection points satisfied by a definition.
        GET /beans/stats: index statistics.

    Args:
        indexer: The indexer owning the index. Reads always see its current index.
        resolver: Resolver to use. A default resolver is created if omitted.

    Returns:
        Router to include in a FastAPI application.
    """
    resolver = resolver or BeanResolver()
    get_index = create_index_dependency(indexer)
    router = APIRouter(prefix="/beans", tags=["beans"])

    @router.post("/resolve", response_model=ResolutionResult)
    def resolve(injection: BeanInjectionPoint, index: BeanIndex = Depends(get_index)) -> ResolutionResult:
        """Go to definition from an injection site."""
        return resolver.resolve_result(injection, index)

    @router.get("/definitions", response_model=List[BeanDefinition])
    def list_definitions(
        name: Optional[str] = Query(default=None, description="Only definitions with this bean name."),
        index: BeanIndex = Depends(get_index),
    ) -> List[BeanDefinition]:
        if name is not None:
            return index.find_by_name(name)
        return index.all_definitions()

    @router.get("/injection-points", response_model=List[BeanInjectionPoint])
    def list_injection_points(
        location_key: str = Query(..., description="Location key of the definition."),
        index: BeanIndex = Depends(get_index),
    ) -> List[BeanInjectionPoint]:
        """Find usages of a definition."""
        definition = index.get_definition(location_key)
        if definition is None:
            raise HTTPException(status_code=404, detail=f"No bean definition at {location_key}")
        return resolver.find_injection_points(definition, index)

    @router.get("/stats", response_model=IndexStats)
    def stats(index: BeanIndex = Depends(get_index)) -> IndexStats:
        return index.get_stats()

    return router


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that tags every request with a correlation ID.

    The ID is taken from the ``X-Request-ID`` header when present, bound into
    structlog's context for the duration of the request and echoed back on
    the response.
    """

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Bind a request ID and execute the endpoint.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        structlog.contextvars.bind_contextvars(path=request.url.path)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            structlog.contextvars.unbind_contextvars("path")
            clear_request_id()


def create_navigation_app(indexer: BeanIndexer, resolver: Optional[BeanResolver] = None) -> FastAPI:
    """Create a FastAPI application exposing the navigation router.

    Example:
        >>> indexer = BeanIndexer()
        >>> app = create_navigation_app(indexer)
        >>> # uvicorn.run(app)
    """
    app = FastAPI(title="miraveja-wiring")
    app.add_middleware(RequestContextMiddleware)
    app.include_router(create_navigation_router(indexer, resolver))
    log.debug("navigation_app.created")
    return app

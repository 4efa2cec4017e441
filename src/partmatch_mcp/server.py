"""Part Match MCP Server - compare manufacturer part numbers for BOM dedup and substitution."""

import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from . import __version__
from .config import DEFAULT_RANK_LIMIT, HTTP_PORT, LOG_LEVEL, RATE_LIMIT_REQUESTS
from .rules import default_registry
from .service import PartMatcher

logger = logging.getLogger(__name__)

# Global state
_matcher: PartMatcher | None = None


def get_matcher() -> PartMatcher:
    global _matcher
    if _matcher is None:
        _matcher = PartMatcher()
    return _matcher


@asynccontextmanager
async def lifespan(app):
    """Build the rule registry on startup (not on first request)."""
    global _matcher
    registry = default_registry()
    _matcher = PartMatcher(registry=registry)
    logger.info(f"Registry ready: {len(registry)} rules across {len(registry.categories())} categories")
    yield


mcp = FastMCP(
    name="partmatch",
    instructions="Compare manufacturer part numbers (MPNs). Use mpn_compare for a pair, mpn_rank_substitutes to order candidate substitutes, and mpn_detect_category when the component type is unknown. Scores are ordering heuristics in [0, 1], not probabilities.",
    lifespan=lifespan,
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding one-minute window of requests per client IP."""

    MAX_TRACKED_IPS = 10_000
    WINDOW_SECONDS = 60

    def __init__(self, app, requests_per_minute: int = RATE_LIMIT_REQUESTS):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.request_log: dict[str, list[float]] = {}

    @staticmethod
    def client_ip(request) -> str:
        # Rightmost X-Forwarded-For entry is the one our proxy appended
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[-1].strip() or "unknown"
        return request.client.host if request.client else "unknown"

    def _prune(self, cutoff: float) -> None:
        stale = [ip for ip, times in self.request_log.items() if not times or times[-1] < cutoff]
        for ip in stale:
            del self.request_log[ip]

    def is_limited(self, client_ip: str, now: float | None = None) -> bool:
        """Record a request from ``client_ip``; True if it exceeds the limit."""
        now = time.time() if now is None else now
        cutoff = now - self.WINDOW_SECONDS

        if client_ip not in self.request_log and len(self.request_log) >= self.MAX_TRACKED_IPS:
            self._prune(cutoff)
            if len(self.request_log) >= self.MAX_TRACKED_IPS:
                return True

        recent = [t for t in self.request_log.get(client_ip, []) if t > cutoff]
        if len(recent) >= self.requests_per_minute:
            self.request_log[client_ip] = recent
            return True
        recent.append(now)
        self.request_log[client_ip] = recent
        return False

    async def dispatch(self, request, call_next):
        if request.url.path == "/health":
            return await call_next(request)
        if self.is_limited(self.client_ip(request)):
            return JSONResponse(
                status_code=429,
                content={"error": "Rate limit exceeded", "retry_after": self.WINDOW_SECONDS},
                headers={"Retry-After": str(self.WINDOW_SECONDS)},
            )
        return await call_next(request)


def _parse_list_param(value: list[str] | str | None) -> list[str] | None:
    """Accept a list or a JSON-encoded list (some MCP clients send the latter)."""
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            logger.debug(f"Failed to parse list parameter as JSON: {value[:100]!r}")
            return None
        if isinstance(parsed, list):
            return parsed
    return None


_READ_ONLY = dict(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)


# Tools

@mcp.tool(annotations=ToolAnnotations(title="Compare MPNs", **_READ_ONLY))
def mpn_compare(
    mpn1: str,
    mpn2: str,
    category: str | None = None,
) -> dict[str, Any]:
    """Score how similar two manufacturer part numbers are (0.0 to 1.0).

    Args:
        mpn1: First MPN, e.g. "STM32F103C8T6"
        mpn2: Second MPN, e.g. "GD32F103C8T6"
        category: Component category, e.g. "microcontroller", "led", "connector",
            or a manufacturer refinement like "connector_molex". Auto-detected if omitted.

    Returns:
        similarity, match level (high/medium/low/none), resolved category,
        and the fields parsed from each MPN.
    """
    try:
        return get_matcher().compare(mpn1, mpn2, category)
    except Exception as e:
        logger.error(f"mpn_compare failed: {type(e).__name__}: {e}")
        return {"error": "Comparison failed. Check server logs for details."}


@mcp.tool(annotations=ToolAnnotations(title="Rank Substitutes", **_READ_ONLY))
def mpn_rank_substitutes(
    mpn: str,
    candidates: list[str] | str,
    category: str | None = None,
    limit: int = DEFAULT_RANK_LIMIT,
    min_score: float = 0.0,
) -> dict[str, Any]:
    """Rank candidate MPNs as substitutes for a part, most similar first.

    Args:
        mpn: The part to replace
        candidates: Candidate MPNs (list or JSON array string)
        category: Component category; auto-detected from mpn if omitted
        limit: Max results (1-50)
        min_score: Drop candidates scoring below this

    Returns:
        Ranked results with similarity and match level, plus a summary.
    """
    parsed_candidates = _parse_list_param(candidates)
    if parsed_candidates is None:
        return {"error": "candidates must be a list of MPNs or a JSON array string"}
    try:
        return get_matcher().rank(mpn, parsed_candidates, category, limit=limit, min_score=min_score)
    except Exception as e:
        logger.error(f"mpn_rank_substitutes failed: {type(e).__name__}: {e}")
        return {"error": "Ranking failed. Check server logs for details."}


@mcp.tool(annotations=ToolAnnotations(title="Detect Category", **_READ_ONLY))
def mpn_detect_category(mpn: str) -> dict[str, Any]:
    """Identify component category and manufacturer from an MPN's numbering scheme."""
    return get_matcher().detect_category(mpn)


@mcp.tool(annotations=ToolAnnotations(title="List Categories", **_READ_ONLY))
def mpn_categories() -> dict[str, Any]:
    """List component categories, their manufacturer refinements and calculators."""
    return get_matcher().categories()


# Health check endpoint
async def health(request):
    return JSONResponse({
        "status": "healthy",
        "service": "partmatch-mcp",
        "version": __version__,
    })


def create_app():
    """Create the ASGI application."""
    middleware = [
        Middleware(RateLimitMiddleware, requests_per_minute=RATE_LIMIT_REQUESTS),
    ]
    app = mcp.http_app(
        path="/mcp",
        middleware=middleware,
        transport="streamable-http",
        stateless_http=True,
    )
    app.routes.append(Route("/health", health))
    return app


app = create_app()


class _HealthFilterLog(logging.Filter):
    """Drop /health access log lines (container healthchecks)."""

    def filter(self, record: logging.LogRecord) -> bool:
        return "/health" not in record.getMessage()


def main():
    """Run the server."""
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("uvicorn.access").addFilter(_HealthFilterLog())

    uvicorn.run(
        "partmatch_mcp.server:app",
        host="0.0.0.0",
        port=HTTP_PORT,
        lifespan="on",
    )


if __name__ == "__main__":
    main()

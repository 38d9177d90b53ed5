"""
Wishlist Resolver - FastAPI Application
Main entry point with REST API endpoints.
"""
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wishlist import __version__
from wishlist.config import config
from wishlist.utils.logger import get_logger, set_trace_id
from wishlist.adapters.fetcher import FetchError
from wishlist.adapters.image_search import ImageSearchAdapter
from wishlist.layers.ingestion import IngestionLayer, InvalidURLError
from wishlist.layers.rate_limit import RateLimiter
from wishlist.models.product import ParsedPrice, ResolvedItem
from wishlist.utils.price import format_price, parse_price


# Initialize FastAPI app
app = FastAPI(
    title="Wishlist Resolver",
    description="Resolves product links into wishlist items (title, image, price)",
    version=__version__,
    debug=config.DEBUG,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Initialize layers
ingestion_layer = IngestionLayer()
image_search = ImageSearchAdapter()
rate_limiter = RateLimiter()

logger = get_logger("main")


# Request/Response models
class ResolveRequest(BaseModel):
    """Request model for URL resolution."""
    url: Optional[str] = None


class ResolveResponse(BaseModel):
    """Response model for URL resolution."""
    ok: bool
    data: Optional[ResolvedItem] = None
    errors: Optional[List[str]] = None
    trace_id: Optional[str] = None


class ParsePriceRequest(BaseModel):
    """Request model for manually entered prices."""
    text: str = ""


class ParsePriceResponse(BaseModel):
    """Response model for manually entered prices."""
    ok: bool
    data: Optional[ParsedPrice] = None
    formatted: str


class SearchImageRequest(BaseModel):
    """Request model for the image search fallback."""
    query: Optional[str] = None


class SearchImageResponse(BaseModel):
    """Response model for the image search fallback."""
    ok: bool
    image_url: str
    source: str
    query: str


def error_response(status_code: int, message: str, trace_id: Optional[str] = None) -> JSONResponse:
    """Uniform error body: {"ok": false, "errors": [...]}"""
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "errors": [message], "trace_id": trace_id},
    )


def client_key(request: Request) -> str:
    """Client identity for rate limiting: first forwarded address, else peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client:
        return request.client.host
    return "unknown"


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.post("/api/resolve", response_model=ResolveResponse)
async def resolve_url(payload: ResolveRequest, request: Request):
    """
    Resolve a product URL into a wishlist item.

    Fetches the page and extracts title, image and price.
    """
    trace_id = set_trace_id()
    client = client_key(request)

    logger.info("resolve_request", url=payload.url, client=client, trace_id=trace_id)

    if not rate_limiter.check(client):
        return error_response(429, "Rate limit exceeded. Please try again later.", trace_id)

    try:
        item = await ingestion_layer.ingest(payload.url)
    except InvalidURLError as e:
        logger.warning("resolve_rejected", error=str(e), url=payload.url)
        return error_response(400, str(e), trace_id)
    except FetchError as e:
        logger.error("resolve_fetch_error", error=str(e), error_type=type(e).__name__, url=payload.url)
        return error_response(502, f"Failed to process URL: {str(e)}", trace_id)

    logger.info(
        "resolve_completed",
        url=item.url,
        domain=item.domain,
        title=item.title[:200],
        has_image=item.image_url is not None,
        price_minor_units=item.price_minor_units,
        currency_code=item.currency_code,
    )

    return ResolveResponse(ok=True, data=item, trace_id=trace_id)


@app.post("/api/parse-price", response_model=ParsePriceResponse)
async def parse_price_text(payload: ParsePriceRequest):
    """Parse a manually entered price string."""
    parsed = parse_price(payload.text)
    return ParsePriceResponse(
        ok=True,
        data=parsed,
        formatted=format_price(
            parsed.amount_minor_units if parsed else None,
            parsed.currency_code if parsed else None,
        ),
    )


@app.post("/api/search-image", response_model=SearchImageResponse)
async def search_image(payload: SearchImageRequest):
    """
    Find a stand-in image for an item.

    Always answers with an image when the query is valid.
    """
    set_trace_id()

    if not payload.query or not payload.query.strip():
        return error_response(400, "Query is required and must be a string")

    result = await image_search.search(payload.query)
    return SearchImageResponse(
        ok=True,
        image_url=result.image_url,
        source=result.source,
        query=result.query,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("wishlist.main:app", host=config.HOST, port=config.PORT, reload=config.DEBUG)

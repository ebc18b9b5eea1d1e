import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from mdview.config import get_settings, load_config
from mdview.routers.convert import router as convert_router
from mdview.routers.markdown import limiter, router as markdown_router
from mdview.services.cache import MarkdownCache

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="mdview – Markdown views of rendered pages",
    description="Fetches a site's rendered HTML and serves a cleaned Markdown version with metadata frontmatter.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# One cache per process; replaced entries are the only form of cleanup
app.state.settings = get_settings()
app.state.config = load_config(app.state.settings.config_dir)
app.state.cache = MarkdownCache()


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(markdown_router)
app.include_router(convert_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from mdview"}

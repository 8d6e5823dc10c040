"""Main FastMCP server — mounts all sub-servers."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from .client import GeminiClient
from .tools.infra import infra_server
from .tools.study import study_server

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(server: FastMCP):
    """Startup/shutdown hook — tears down shared Gemini clients."""
    yield {}
    closed = await GeminiClient.close_all()
    logger.info("Lifespan shutdown: closed %d client(s)", closed)


app = FastMCP(
    "study-aid",
    instructions=(
        "TNPSC study aid — extracts exam-relevant key points from images, "
        "PDF pages and OCR text, and generates practice questions in "
        "English or Tamil."
    ),
    lifespan=_lifespan,
)

app.mount(study_server)
app.mount(infra_server)


def main() -> None:
    """Entry-point for ``study-aid-mcp`` console script."""
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run()


if __name__ == "__main__":
    main()

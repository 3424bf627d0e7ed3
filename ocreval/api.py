"""FastAPI application exposing the scorers."""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from pydantic import BaseModel

from .config import EvalConfig, load_config
from .log import configure_logging
from .report import result_to_dict
from .service import EvaluationService

REQUEST_COUNTER = Counter("ocreval_requests_total", "Total scoring requests", ["endpoint"])
LATENCY_HISTOGRAM = Histogram(
    "ocreval_request_latency_seconds", "Scoring latency", ["endpoint"]
)


class ScoreRequest(BaseModel):
    truth: str = ""
    ocr: str = ""
    include_diff: bool = True


def create_app(config: Optional[EvalConfig] = None) -> FastAPI:
    configure_logging()
    config = config or load_config()
    service = EvaluationService(config)
    app = FastAPI(title="OCR Evaluation Service", version="1.0")

    # Plain def: FastAPI runs it in the threadpool.
    @app.post("/score")
    def score_endpoint(request: ScoreRequest) -> Dict[str, Any]:
        REQUEST_COUNTER.labels(endpoint="score").inc()
        with LATENCY_HISTOGRAM.labels(endpoint="score").time():
            result = service.analyze_texts(request.truth, request.ocr)
            return result_to_dict(result, include_diff=request.include_diff)

    @app.get("/healthz")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics")
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app

import logging
import time

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from dotenv import load_dotenv

# Load environment variables from .env.local for development
load_dotenv(".env.local")

from carcheck.config import CarCheckConfig
from carcheck.domains.cars.schemas import EvaluationResult
from carcheck.logic.errors import ErrorKind, EvaluationError
from carcheck.logic.evaluation import EvaluationService
from carcheck.logic.extractor import ListingExtractor
from carcheck.logic.llm_client import ChatClient
from carcheck.logic.narrator import Narrator
from carcheck.logic.postprocessor import render_report
from carcheck.schemas import EvaluationRequestBody, ReportRequestBody

logging.basicConfig(
    level=CarCheckConfig.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("carcheck")

app = FastAPI(
    title="CarCheck Evaluation Service",
    description="Evaluates used-car listings: scrapes Yad2 or takes manual details, then asks a language model for a recommendation and score.",
    version=CarCheckConfig.SERVICE_VERSION
)


def get_evaluation_service() -> EvaluationService:
    """Build a fresh service per request; nothing is shared between requests."""
    return EvaluationService(
        extractor=ListingExtractor(),
        narrator=Narrator(ChatClient()),
    )


@app.get("/")
async def read_root():
    return {"message": "Welcome to the CarCheck service. POST listing URLs or car details to /api/evaluate."}


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/api/config")
async def read_config():
    return CarCheckConfig.to_dict()


@app.post("/api/evaluate", response_model=EvaluationResult)
async def evaluate_car(body: EvaluationRequestBody,
                       service: EvaluationService = Depends(get_evaluation_service)):
    """
    This endpoint orchestrates the evaluation by:
    1. Scraping the Yad2 listing (when a URL is given)
    2. Asking the language model for a verdict
    3. Returning car data, rationale, recommendation and score
    """
    start_time = time.time()
    if CarCheckConfig.LOG_REQUESTS:
        logger.info("Evaluate request: %s", body.model_dump(by_alias=True, exclude_none=True))

    try:
        result = await service.evaluate(body)
    except EvaluationError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.to_payload(body.language, expose_detail=CarCheckConfig.EXPOSE_ERROR_DETAILS),
        )
    except Exception as e:
        logger.exception("Unhandled error in evaluation endpoint")
        error = EvaluationError(ErrorKind.INTERNAL_ERROR, detail=str(e))
        raise HTTPException(status_code=error.status_code, detail=error.to_payload(body.language))

    processing_time_ms = (time.time() - start_time) * 1000
    logger.info("Evaluation completed in %.0f ms (score=%s, label=%s)",
                processing_time_ms, result.score, result.label.value)
    if CarCheckConfig.LOG_RESPONSES:
        logger.info("Evaluate response: %s", result.model_dump(by_alias=True))
    return result


@app.post("/api/evaluate/report", response_class=PlainTextResponse)
async def evaluation_report(body: ReportRequestBody):
    """Plain-text report of an evaluation, for download."""
    return PlainTextResponse(
        render_report(body.result, body.language),
        headers={"Content-Disposition": 'attachment; filename="car-evaluation.txt"'},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("carcheck.main:app", host=CarCheckConfig.HOST, port=CarCheckConfig.PORT)

"""
Evaluation service - the single entry point of the pipeline.

request -> (optional) listing extraction -> narration -> EvaluationResult
"""

import logging
from typing import List, Optional

from carcheck.config import CarCheckConfig
from carcheck.domains.cars.schemas import EvaluationResult, VehicleAttributes
from carcheck.logic.errors import ErrorKind, EvaluationError, NarrationError
from carcheck.logic.extractor import ListingExtractor
from carcheck.logic.narrator import Narrator
from carcheck.schemas import EvaluationRequestBody

logger = logging.getLogger(__name__)


class EvaluationService:

    def __init__(self, extractor: ListingExtractor, narrator: Narrator,
                 allowed_hosts: Optional[List[str]] = None):
        self.extractor = extractor
        self.narrator = narrator
        self.allowed_hosts = CarCheckConfig.ALLOWED_LISTING_HOSTS if allowed_hosts is None else allowed_hosts

    async def evaluate(self, body: EvaluationRequestBody) -> EvaluationResult:
        """
        Run one evaluation.

        Raises:
            EvaluationError: always with a taxonomy kind; anything unexpected
                is wrapped as INTERNAL_ERROR
        """
        try:
            car_data = await self._resolve_car_data(body)
            narration = await self.narrator.narrate(car_data, body.language)
        except NarrationError as e:
            logger.error("Narration failed: %s | context=%s | raw=%r", e.detail, e.context, e.raw_response)
            raise
        except EvaluationError as e:
            if e.kind != ErrorKind.INVALID_REQUEST:
                logger.error("Evaluation failed (%s): %s | context=%s", e.kind.value, e.detail, e.context)
            raise
        except Exception as e:
            logger.exception("Unexpected error during evaluation")
            raise EvaluationError(ErrorKind.INTERNAL_ERROR, detail=f"{type(e).__name__}: {e}") from e

        return EvaluationResult(
            car_data=car_data,
            evaluation=narration.evaluation,
            recommendation=narration.recommendation,
            label=narration.label,
            score=narration.score,
            score_source=narration.score_source,
        )

    async def _resolve_car_data(self, body: EvaluationRequestBody) -> VehicleAttributes:
        url = (body.yad2_url or "").strip()

        if url:
            if body.car_data is not None:
                logger.warning("Both yad2Url and carData supplied; using the URL")
            if not CarCheckConfig.is_allowed_listing_url(url, self.allowed_hosts):
                raise EvaluationError(ErrorKind.INVALID_REQUEST, detail=f"unsupported listing URL: {url}",
                                      message_key="unsupported_listing")
            logger.info("Processing Yad2 URL: %s", url)
            return await self.extractor.extract(url)

        if body.car_data is not None:
            logger.info("Processing manual car data: %s", body.car_data.title)
            return body.car_data.to_attributes()

        raise EvaluationError(ErrorKind.INVALID_REQUEST, detail="neither yad2Url nor carData provided")

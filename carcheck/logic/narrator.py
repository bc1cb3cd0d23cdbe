"""
Narrator - model-assisted verdict for a vehicle.

The model is asked for a JSON object {evaluation, recommendation, score}.
Reply handling:
- parseable JSON: use its fields; a missing or non-numeric score comes from
  the deterministic scorer, a missing/unknown label becomes Neutral
- non-JSON text: the text is the rationale, the label is found by phrase
  search and the score comes from the scorer
- empty reply or provider failure: NarrationError
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from carcheck.domains.cars.messages import UNABLE_TO_EVALUATE, localize_recommendation, normalize_language
from carcheck.domains.cars.prompts import create_prompt
from carcheck.domains.cars.schemas import Recommendation, VehicleAttributes
from carcheck.logic.errors import NarrationError
from carcheck.logic.llm_client import LLMClientError, TextGenerator
from carcheck.logic.postprocessor import coerce_score, parse_json, resolve_label
from carcheck.logic.scorer import score_vehicle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Narration:
    evaluation: str
    label: Recommendation
    recommendation: str
    score: int
    score_source: str


class Narrator:

    def __init__(self, client: TextGenerator,
                 scorer: Callable[[VehicleAttributes], int] = score_vehicle,
                 temperature: Optional[float] = None):
        self.client = client
        self.scorer = scorer
        self.temperature = temperature

    async def narrate(self, car_data: VehicleAttributes, language: str = "en") -> Narration:
        language = normalize_language(language)
        messages = create_prompt(car_data, language)
        context = {"car_data": car_data.to_wire(), "language": language}

        logger.info("Requesting evaluation from LLM (language=%s)", language)
        try:
            raw = await self.client.chat(messages, temperature=self.temperature, json_mode=True)
        except LLMClientError as e:
            raise NarrationError(detail=str(e), context=context) from e

        logger.debug("LLM raw response: %s", raw)
        if not raw or not raw.strip():
            raise NarrationError(detail="empty reply", raw_response=raw, context=context)

        return self._interpret(raw, car_data, language)

    def _interpret(self, raw: str, car_data: VehicleAttributes, language: str) -> Narration:
        parsed = parse_json(raw)

        if parsed is None:
            logger.warning("LLM reply is not JSON, falling back to text matching and rule score")
            evaluation = raw.strip()
            raw_label = raw
            score = None
        else:
            evaluation = str(parsed.get("evaluation") or "").strip()
            raw_label = str(parsed.get("recommendation") or "").strip()
            score = coerce_score(parsed.get("score"))

        label = resolve_label(raw_label)
        if label is None:
            if raw_label and parsed is not None:
                logger.info("Unknown recommendation label from LLM: %r", raw_label)
            label = Recommendation.NEUTRAL
            # unknown labels pass through unchanged as the display string
            display = raw_label if (raw_label and parsed is not None) else localize_recommendation(label.value, language)
        else:
            display = localize_recommendation(label.value, language)

        score_source = "model"
        if score is None:
            score = self.scorer(car_data)
            score_source = "rules"

        return Narration(
            evaluation=evaluation or UNABLE_TO_EVALUATE[language],
            label=label,
            recommendation=display,
            score=score,
            score_source=score_source,
        )

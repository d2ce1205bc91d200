"""AI advisory service backed by Google Gemini.

Three independent request/response operations: product description
generation, inventory risk analysis and price range suggestion. Every
failure is caught here and replaced by a fixed fallback, so callers never
see an exception from the model.

Example usage:
    service = AdvisoryService(api_key="YOUR_GEMINI_API_KEY")
    text = await service.generate_description("Ergo Chair Ultra", Category.FURNITURE)
"""

import json
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import google.generativeai as genai
import structlog
from pydantic import ValidationError

from lumina.schemas import Category, PriceSuggestion, Product, ProductSummary

logger = structlog.get_logger()

DEFAULT_MODEL = "gemini-2.5-flash"

ANALYST_INSTRUCTION = "You are an expert Inventory Operations Manager."

DESCRIPTION_EMPTY = "No description generated."
DESCRIPTION_FAILED = "Failed to generate description via AI."
ANALYSIS_EMPTY = "No analysis available."
ANALYSIS_FAILED = "Unable to analyze inventory at this time."
PRICE_FALLBACK_REASONING = "AI unavailable"

PRICE_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "min": {"type": "NUMBER"},
        "max": {"type": "NUMBER"},
        "reasoning": {"type": "STRING"},
    },
    "required": ["min", "max", "reasoning"],
}


def summarize(products: Sequence[Product]) -> list[ProductSummary]:
    """Compact summaries that keep the analysis prompt small."""
    return [
        ProductSummary(name=p.name, qty=p.quantity, cat=p.category, price=p.price)
        for p in products
    ]


def price_fallback() -> PriceSuggestion:
    """Zero-valued suggestion returned when the model cannot answer."""
    return PriceSuggestion(min=0, max=0, reasoning=PRICE_FALLBACK_REASONING)


class AdvisoryService:
    """Gemini-backed advisory operations with fixed fallbacks."""

    def __init__(self, api_key: str | None, model_name: str = DEFAULT_MODEL) -> None:
        """Initialize advisory service.

        Args:
            api_key: Gemini API key. Without one every call returns its fallback.
            model_name: Gemini model to use.
        """
        self.api_key = api_key
        self.model_name = model_name
        self._models: dict[str | None, Any] = {}

    @property
    def enabled(self) -> bool:
        """Whether an API key is configured."""
        return bool(self.api_key)

    def _get_model(self, system_instruction: str | None = None) -> Any:
        """Lazily create the Gemini model for a system instruction.

        The SDK binds a model to the process-wide key on its first request,
        and `_generate` issues that request without yielding after this
        call. Configuring this service's key just before a model is created
        keeps services with different keys from sharing one.
        """
        if system_instruction not in self._models:
            genai.configure(api_key=self.api_key)
            self._models[system_instruction] = genai.GenerativeModel(
                model_name=self.model_name,
                system_instruction=system_instruction,
            )
        return self._models[system_instruction]

    async def _generate(
        self,
        prompt: str,
        system_instruction: str | None = None,
        generation_config: dict[str, Any] | None = None,
    ) -> str:
        """Send one prompt and return the response text.

        Raises:
            RuntimeError: If no API key is configured.
        """
        if not self.enabled:
            raise RuntimeError("Gemini API key is not configured")

        model = self._get_model(system_instruction)
        if generation_config is None:
            response = await model.generate_content_async(prompt)
        else:
            response = await model.generate_content_async(
                prompt, generation_config=generation_config
            )
        return response.text or ""

    async def generate_description(self, name: str, category: Category | str) -> str:
        """Write a short marketing description for a product.

        Args:
            name: Product name.
            category: Product category.

        Returns:
            The description, or a fixed fallback message.
        """
        category = Category(category).value
        prompt = (
            "Write a concise, professional marketing description (max 2 sentences) "
            f'for a product named "{name}" in the category "{category}".'
        )
        try:
            text = await self._generate(prompt)
        except Exception as e:
            logger.error("Description generation failed", name=name, error=str(e))
            return DESCRIPTION_FAILED

        logger.info("Description generated", name=name, length=len(text))
        return text or DESCRIPTION_EMPTY

    async def analyze_risks(self, products: Sequence[Product]) -> str:
        """Produce a Markdown risk summary of the given inventory.

        Args:
            products: Snapshot to analyze.

        Returns:
            Markdown report, or a fixed fallback message.
        """
        summary = [s.model_dump(mode="json") for s in summarize(products)]
        prompt = (
            "Analyze this inventory data and provide a strategic summary.\n"
            "Identify low stock risks (quantity < 10), suggest potential restocking "
            "priorities, and comment on the portfolio balance.\n"
            "Format the output as a helpful Markdown summary with bullet points.\n\n"
            f"Inventory Data: {json.dumps(summary)}"
        )
        try:
            text = await self._generate(prompt, system_instruction=ANALYST_INSTRUCTION)
        except Exception as e:
            logger.error(
                "Inventory analysis failed", product_count=len(products), error=str(e)
            )
            return ANALYSIS_FAILED

        logger.info("Inventory analyzed", product_count=len(products))
        return text or ANALYSIS_EMPTY

    async def suggest_price_range(
        self, name: str, category: Category | str
    ) -> PriceSuggestion:
        """Ask the model for a price range.

        Args:
            name: Product name.
            category: Product category.

        Returns:
            Suggested range with `min <= max`, or a zero-valued fallback.
        """
        category = Category(category).value
        prompt = f'Suggest a price range for a "{name}" in the category "{category}". Return JSON.'
        try:
            text = await self._generate(
                prompt,
                generation_config={
                    "response_mime_type": "application/json",
                    "response_schema": PRICE_RESPONSE_SCHEMA,
                },
            )
            if not text:
                raise ValueError("No JSON returned")
            suggestion = PriceSuggestion.model_validate(json.loads(text))
        except (ValidationError, ValueError) as e:
            logger.warning("Unusable price suggestion", name=name, error=str(e))
            return price_fallback()
        except Exception as e:
            logger.error("Price suggestion failed", name=name, error=str(e))
            return price_fallback()

        if suggestion.min > suggestion.max:
            suggestion = suggestion.model_copy(
                update={"min": suggestion.max, "max": suggestion.min}
            )
        logger.info(
            "Price suggested", name=name, min=suggestion.min, max=suggestion.max
        )
        return suggestion


class AnalysisBoard:
    """Latest risk analysis report.

    Every run takes a token; a run that finishes after a newer one started
    is discarded, so the board always shows the most recently requested
    analysis.
    """

    def __init__(self) -> None:
        self.report: str | None = None
        self.generated_at: datetime | None = None
        self.product_count: int | None = None
        self._latest_token = 0
        self._completed_token = 0

    @property
    def analyzing(self) -> bool:
        """Whether the most recently started run is still outstanding."""
        return self._completed_token != self._latest_token

    def begin(self) -> int:
        """Start a run and return its token."""
        self._latest_token += 1
        return self._latest_token

    def complete(self, token: int, report: str, product_count: int) -> bool:
        """Record a finished run.

        Returns:
            False if the run was superseded and its report discarded.
        """
        if token != self._latest_token:
            logger.info(
                "Stale analysis discarded", token=token, latest=self._latest_token
            )
            return False
        self.report = report
        self.product_count = product_count
        self.generated_at = datetime.now(timezone.utc)
        self._completed_token = token
        return True

    async def run(self, service: AdvisoryService, snapshot: Sequence[Product]) -> str:
        """Analyze a snapshot and publish the report if still current.

        Returns:
            The report produced by this run, whether or not it was published.
        """
        token = self.begin()
        report = await service.analyze_risks(snapshot)
        self.complete(token, report, len(snapshot))
        return report

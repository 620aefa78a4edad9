"""
AI Agents for SpendMate

Two thin adapters around Gemini. Neither is required for the tracker
to work; both are opaque collaborators with a fixed prompt.

CRITICAL BOUNDARIES:

1. RECEIPT AGENT:
   - CAN: Read a receipt photo and propose merchant, amount, date, category
   - CANNOT: Save anything - its output only pre-fills the entry form
   - MUST: Fill gaps with safe defaults, never guess silently beyond them
   - MUST: Raise ReceiptParseError on any failure so the UI can fall
     back to manual entry

2. INSIGHT AGENT:
   - CAN: Summarise the most recent expenses in a few sentences
   - MUST: Return a fixed fallback message on failure, never raise
"""

import json
from datetime import date
from typing import Any, Optional, Sequence

import google.generativeai as genai
import structlog

from spendmate.config import GeminiSettings, get_settings
from spendmate.models import ExpenseCategory, ExpenseRecord, ReceiptData


logger = structlog.get_logger(__name__)


RECEIPT_FAILURE_MESSAGE = "Failed to parse receipt. Please try manually."
NO_EXPENSES_MESSAGE = "No expenses to analyze."
EMPTY_INSIGHT_MESSAGE = "Could not generate insights."
INSIGHT_FAILURE_MESSAGE = "Unable to generate insights at this time."

UNKNOWN_MERCHANT = "Unknown Merchant"


class ReceiptParseError(Exception):
    """The receipt could not be read. The message is safe to show to users."""
    pass


def _build_model(settings: Optional[GeminiSettings] = None, max_output_tokens: Optional[int] = None):
    """Configure Google Generative AI and return a model handle."""
    settings = settings or get_settings().gemini
    genai.configure(api_key=settings.api_key)
    return genai.GenerativeModel(
        model_name=settings.model_name,
        generation_config={
            "temperature": settings.temperature,
            "max_output_tokens": max_output_tokens or settings.max_tokens,
        }
    )


def _extract_json(text: str) -> dict:
    """Pull the first JSON object out of a model reply."""
    start = text.find("{")
    end = text.rfind("}") + 1
    if start < 0 or end <= start:
        raise ValueError("No JSON object in response")
    data = json.loads(text[start:end])
    if not isinstance(data, dict):
        raise ValueError("Response JSON is not an object")
    return data


class ReceiptAgent:
    """
    Turns a receipt photo into proposed expense fields.

    Missing fields are defaulted:
    merchant -> "Unknown Merchant", amount -> 0, date -> today,
    category -> Other.
    """

    def __init__(self, model: Any = None, settings: Optional[GeminiSettings] = None):
        self._model = model or _build_model(settings, max_output_tokens=512)

    def _build_prompt(self) -> str:
        categories = ", ".join(cat.value for cat in ExpenseCategory)
        return f"""Analyze this receipt image. Extract the Merchant Name, Date (YYYY-MM-DD), Total Amount, and categorize it into one of these: [{categories}].

Respond with ONLY a JSON object in this exact format:
{{"merchant": "name", "date": "YYYY-MM-DD", "amount": 12.34, "category": "Food"}}"""

    def _to_receipt(self, data: dict) -> ReceiptData:
        """Apply defaults to whatever fields the model returned."""
        merchant = data.get("merchant")
        if not isinstance(merchant, str) or not merchant.strip():
            merchant = UNKNOWN_MERCHANT

        amount = data.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount < 0:
            amount = 0

        receipt_date = date.today()
        raw_date = data.get("date")
        if isinstance(raw_date, str) and raw_date:
            try:
                receipt_date = date.fromisoformat(raw_date.strip())
            except ValueError:
                logger.info("receipt_date_unparseable", raw_date=raw_date)

        return ReceiptData(
            merchant=merchant[:200],
            amount=amount,
            date=receipt_date,
            category=ExpenseCategory.coerce(data.get("category")),
        )

    async def parse_receipt(
        self,
        image_bytes: bytes,
        mime_type: str = "image/jpeg",
    ) -> ReceiptData:
        """
        Extract receipt fields from an image.

        Raises:
            ReceiptParseError: If there is no image, the service is
                unreachable, or the reply cannot be parsed
        """
        if not image_bytes:
            raise ReceiptParseError("No image data provided")

        try:
            response = await self._model.generate_content_async(
                [
                    {"mime_type": mime_type, "data": image_bytes},
                    self._build_prompt(),
                ],
                generation_config={"response_mime_type": "application/json"},
            )
            text = response.text
            if not text:
                raise ValueError("No response from AI")
            return self._to_receipt(_extract_json(text.strip()))
        except Exception as e:
            logger.error("receipt_parse_error", error=str(e))
            raise ReceiptParseError(RECEIPT_FAILURE_MESSAGE) from e


class InsightAgent:
    """
    Produces a short natural-language spending summary.

    Only the most recent expenses are sent, reduced to
    date, category, amount and merchant.
    """

    def __init__(
        self,
        model: Any = None,
        settings: Optional[GeminiSettings] = None,
        record_limit: Optional[int] = None,
    ):
        self._model = model or _build_model(settings)
        self._record_limit = record_limit or get_settings().app.insight_record_limit

    def simplify(self, expenses: Sequence[ExpenseRecord]) -> list[dict]:
        """
        Payload sent to the model.

        Expects newest-first input (the store's order) and keeps the
        first record_limit entries.
        """
        return [
            {
                "date": e.date.isoformat(),
                "category": e.category.value,
                "amount": float(e.amount),
                "merchant": e.merchant,
            }
            for e in list(expenses)[: self._record_limit]
        ]

    def _build_prompt(self, simplified: list[dict]) -> str:
        return f"""Analyze this list of expenses and provide a helpful, human-readable summary.
Identify:
1. The category with the highest spending.
2. Any unusual spending patterns.
3. A brief tip for saving money based on this data.

Keep it concise (max 3 sentences).
Data: {json.dumps(simplified)}"""

    async def generate_insights(self, expenses: Sequence[ExpenseRecord]) -> str:
        """
        Summarise spending. Never raises.
        """
        if not expenses:
            return NO_EXPENSES_MESSAGE

        prompt = self._build_prompt(self.simplify(expenses))

        try:
            response = await self._model.generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            logger.error("insight_generation_error", error=str(e))
            return INSIGHT_FAILURE_MESSAGE

        return text or EMPTY_INSIGHT_MESSAGE

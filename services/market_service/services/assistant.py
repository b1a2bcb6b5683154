"""Generative assistant adapters.

Thin wrappers over LiteLLM for the two merchandising helpers: streaming a
recipe for a product and suggesting prices for a farmer's listings. The
model call itself is opaque; these adapters only own prompt building,
response parsing, fallbacks and the price-apply path.
"""

import json
from decimal import Decimal
from typing import AsyncIterator, Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.messages import t
from pydantic import BaseModel, TypeAdapter, ValidationError
from services.market_service.errors import AssistantUnavailable, PermissionDenied
from services.market_service.models import Account, AuditAction, Product
from services.market_service.services.audit_trail import AuditTrail
from services.market_service.services.catalog_store import CatalogStore, with_new_price
from services.market_service.services.notifications import Notifier

logger = get_logger(__name__)

RECIPE_SYSTEM_PROMPT = (
    "You are a friendly home cook. Suggest one simple recipe featuring the "
    "given ingredient. Keep it short: a title, an ingredient list and numbered steps."
)

PRICING_SYSTEM_PROMPT = (
    "You are a pricing analyst for a farm-to-table marketplace. For each product, "
    "suggest a competitive price in USD based on its category, unit and current price. "
    'Respond with JSON only: [{"product_id": str, "suggested_price": number, "reason": str}]'
)


class PriceSuggestion(BaseModel):
    product_id: str
    suggested_price: Decimal
    reason: str = ""


_suggestions_adapter = TypeAdapter(list[PriceSuggestion])


def parse_json(text: str):
    """Parse model output as JSON. Handles markdown code fences."""
    text = text.strip()
    if text.startswith("```"):
        lines = [line for line in text.split("\n") if not line.strip().startswith("```")]
        text = "\n".join(lines).strip()
    return json.loads(text)


def _messages(system_prompt: str, user_prompt: str) -> list[dict]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


async def _complete(system_prompt: str, user_prompt: str, model: Optional[str] = None) -> str:
    import litellm

    settings = get_settings()
    response = await litellm.acompletion(
        model=model or settings.AI_DEFAULT_MODEL,
        messages=_messages(system_prompt, user_prompt),
        temperature=0.2,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
    return response.choices[0].message.content or ""


async def _stream(
    system_prompt: str, user_prompt: str, model: Optional[str] = None
) -> AsyncIterator[str]:
    import litellm

    settings = get_settings()
    response = await litellm.acompletion(
        model=model or settings.AI_DEFAULT_MODEL,
        messages=_messages(system_prompt, user_prompt),
        stream=True,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
    async for chunk in response:
        content = chunk.choices[0].delta.content
        if content:
            yield content


class RecipeStreams:
    """Per-session recipe streams.

    Each new stream bumps the session's generation; an older stream notices
    on its next chunk and stops, so only the latest request keeps writing.
    """

    def __init__(self):
        self._generations: dict[str, int] = {}

    def current(self, session_id: str) -> int:
        return self._generations.get(session_id, 0)

    def _start(self, session_id: str) -> int:
        generation = self.current(session_id) + 1
        self._generations[session_id] = generation
        return generation

    async def stream(self, session_id: str, product_name: str) -> AsyncIterator[str]:
        generation = self._start(session_id)
        prompt = f"Ingredient: {product_name}"
        try:
            async for chunk in _stream(RECIPE_SYSTEM_PROMPT, prompt):
                if self.current(session_id) != generation:
                    logger.info("Recipe stream for %s superseded", session_id)
                    return
                yield chunk
        except Exception as e:
            logger.warning("Recipe generation failed for %s: %s", product_name, e)
            if self.current(session_id) == generation:
                yield t("assistant.recipeFallback")


class Assistant:
    def __init__(self, catalog: CatalogStore, audit: AuditTrail, notifier: Notifier):
        self._catalog = catalog
        self._audit = audit
        self._notifier = notifier
        self.recipes = RecipeStreams()

    async def suggest_prices(
        self, products: list[Product], actor: Optional[Account] = None
    ) -> list[PriceSuggestion]:
        if not products:
            return []
        listing = [
            {
                "product_id": p.id,
                "name": p.name,
                "category": p.category,
                "unit": p.unit,
                "current_price": str(p.price),
            }
            for p in products
        ]
        try:
            content = await _complete(PRICING_SYSTEM_PROMPT, json.dumps(listing))
            suggestions = _suggestions_adapter.validate_python(parse_json(content))
        except (ValueError, ValidationError) as e:
            logger.warning("Unparseable price suggestions: %s", e)
            raise self._notifier.reject(AssistantUnavailable()) from e
        except Exception as e:
            logger.error("Price suggestion call failed: %s", e)
            raise self._notifier.reject(AssistantUnavailable()) from e

        known = {p.id for p in products}
        suggestions = [
            s for s in suggestions if s.product_id in known and s.suggested_price >= 0
        ]
        await self._audit.record(
            actor,
            AuditAction.AI_PRICE_SUGGESTION,
            f"Requested price suggestions for {len(products)} products.",
        )
        return suggestions

    async def apply_price_suggestion(
        self, actor: Account, product_id: str, price: Decimal
    ) -> Product:
        """Apply a suggested price through the ordinary product update path."""
        product = self._catalog.require(product_id)
        if product.seller_id != actor.id and not actor.has_admin_access:
            raise self._notifier.reject(PermissionDenied())

        updated = await self._catalog.edit_product(
            product_id, lambda current: with_new_price(current, price, actor.id)
        )
        await self._audit.record(
            actor,
            AuditAction.PRICE_UPDATE,
            f"Applied AI price for {product.name} ({product.id}): "
            f"{product.price} -> {price}.",
        )
        self._notifier.success(
            "catalog.priceApplied", product_name=product.name, price=price
        )
        return updated

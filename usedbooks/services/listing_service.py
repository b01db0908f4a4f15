# usedbooks/services/listing_service.py
import re
from typing import Any, Dict, List, Tuple

from openai import OpenAIError
from sqlalchemy.orm import Session

from usedbooks.domain.context import RequestContext
from usedbooks.services.cover_service import (
    CoverClient,
    build_fallback_cover,
    normalize_isbn,
    pick_cover_image,
    sanitize_cover_image,
)
from usedbooks.services.openai_client import ListingModel
from usedbooks.services.product_service import ProductService, parse_price
from usedbooks.utils.settings import CAMPUS_NAME
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)

_ENDS_WITH_PUNCT = re.compile(r"[.?!]\s*$")


def dedupe_specs(specs: List[str]) -> List[str]:
    seen = set()
    out = []
    for spec in specs:
        spec = (spec or "").strip()
        key = spec.lower()
        if spec and key not in seen:
            seen.add(key)
            out.append(spec)
    return out


def ensure_course_and_isbn(description: str, title: str = "", isbn: str = "") -> str:
    text = (description or "").strip()
    if isbn and "isbn" not in text.lower():
        period = "." if text and not _ENDS_WITH_PUNCT.search(text) else ""
        text = f"{text}{period} ISBN: {isbn}."
    if title and CAMPUS_NAME.lower() not in text.lower():
        period = "." if text and not _ENDS_WITH_PUNCT.search(text) else ""
        text = f'{text}{period} Helpful for {CAMPUS_NAME} courses related to "{title}".'
    return text.strip()


def fallback_listing(title: str, edition: str, price, condition: str, authors: str) -> Dict[str, Any]:
    return {
        "headline": f"{title} ({edition})",
        "shortDescription": f"{title} {edition} edition textbook in {condition or 'used'} condition.",
        "description": (
            f"Used textbook titled {title} ({edition}). Condition: {condition or 'Used'}. "
            f"Authors: {authors or 'N/A'}. Priced at ${price:.2f}."
        ),
        "image": "",
        "isbn": "",
        "specs": [],
    }


class ListingService:
    """
    Generowanie ogloszenia z tytulu/wydania: tekst z modelu (albo
    deterministyczny fallback) + wybor okladki wg priorytetu:
    amazon (isbn) > google books > open library > model-only lookup
    > obrazek z odpowiedzi modelu > placeholder.
    """

    def __init__(self, db: Session, model: ListingModel | None = None, covers: CoverClient | None = None):
        self.products = ProductService(db)
        self.model = model or ListingModel()
        self.covers = covers or CoverClient()

    def generate(self, ctx: RequestContext, payload: Dict[str, Any]) -> Dict[str, Any]:
        title = (payload.get("title") or "").strip()
        edition = (payload.get("edition") or "").strip()
        condition = (payload.get("condition") or "").strip()
        authors = (payload.get("authors") or "").strip()

        if not title or not edition or not payload.get("price"):
            raise ValueError("Title, edition, and price are required.")
        price = parse_price(payload["price"])

        try:
            ai = self.model.generate_listing(title, edition, price, condition, authors)
        except (OpenAIError, RuntimeError, ValueError) as e:
            logger.error(f"Generate listing error (OpenAI): {e}")
            ai = fallback_listing(title, edition, price, condition, authors)

        image, isbn, resolved_authors = self.resolve_cover(ai, title, edition, authors)

        specs = [s for s in (ai.get("specs") or []) if isinstance(s, str)]
        prefix = []
        if isbn:
            prefix.append(f"ISBN: {isbn}")
        if resolved_authors:
            prefix.append(f"Authors: {resolved_authors}")
        if condition:
            prefix.append(f"Condition: {condition}")
        prefix.append(f"Edition: {edition}")
        specs = dedupe_specs(prefix + specs)

        base_description = (ai.get("description") or "")[:600] or (
            f"Used textbook titled {title} ({edition}). Condition: {condition or 'Used'}. "
            f"Authors: {resolved_authors or 'N/A'}."
        )

        return self.products.create_product(
            ctx,
            {
                "name": f"{title} ({edition})",
                "price": price,
                "short_description": (ai.get("shortDescription") or "")[:200]
                or f"{title} {edition} edition textbook.",
                "description": ensure_course_and_isbn(base_description, title, isbn),
                "headline": (ai.get("headline") or "")[:90]
                or f"{title} {edition} edition for your course",
                "image": image,
                "specs": specs,
            },
        )

    def resolve_cover(self, ai: Dict[str, Any], title: str, edition: str, authors: str) -> Tuple[str, str, str]:
        """Zwraca (image, isbn, authors). Szuka tylko do pierwszego trafienia."""
        ai_isbn = normalize_isbn(ai.get("isbn") or "")
        amazon = self.covers.try_amazon_cover(ai_isbn)

        google = self.covers.lookup_google_books(title, edition, authors, ai_isbn)
        isbn = ai_isbn or google["isbn"]
        ai_authors = ai.get("authors") if isinstance(ai.get("authors"), str) else ""
        resolved_authors = authors or google["authors"] or ai_authors
        if amazon:
            return amazon, isbn, resolved_authors

        google_image = self.covers.validate_image_url(google["image"]) if google["image"] else ""
        if google_image:
            return google_image, isbn, resolved_authors

        open_library = self.covers.try_open_library_cover(isbn)
        if open_library:
            return open_library, isbn, resolved_authors

        model_only = sanitize_cover_image(
            self.model.lookup_cover(title, edition, resolved_authors, isbn), title
        )
        model_only = self.covers.validate_image_url(model_only) if model_only else ""

        ai_image = sanitize_cover_image(ai.get("image") or "", title)
        ai_image = self.covers.validate_image_url(ai_image) if ai_image and not model_only else ""

        image = pick_cover_image(model_only, ai_image, build_fallback_cover(title, edition))
        return image, isbn, resolved_authors

# usedbooks/services/openai_client.py
import json
import re
from typing import Any, Dict

from openai import OpenAI, OpenAIError

from usedbooks.utils.settings import OPENAI_API_KEY, OPENAI_MODEL, HTTP_TIMEOUT_SECONDS, CAMPUS_NAME
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You write concise, accurate textbook listings and return strict JSON with no prose. "
    "Base every detail on the provided Title and Edition. Prefer trustworthy cover images "
    "that match the exact title/edition. If unsure about an image or ISBN, leave them empty."
)

LISTING_PROMPT = """
Generate a concise listing for a used college textbook.
Return a single JSON object with keys:
- headline: catchy but honest, max 80 chars
- shortDescription: 2 sentences max, under 160 chars
- description: 3-5 sentences, under 450 chars, mention edition/condition/authors, include a likely {campus} course/subject this book supports and include the ISBN if known.
- image: direct https URL to a front cover photo of THIS title/edition (avoid placeholders, plants/objects/abstracts; if unsure, leave empty string).
- isbn: 13-digit ISBN string if confident, else empty string
- specs: array of short bullet-style strings (e.g., "Edition: 3rd", "Condition: Gently used", "Authors: ...")

Input:
- Title: {title}
- Edition: {edition}
- Price: ${price}
- Condition: {condition}
- Authors: {authors}

Return ONLY the JSON object. Do not use markdown code fences.
"""

COVER_PROMPT = """
Give a direct https URL to the front cover image of this book.
- Title: {title}
- Edition: {edition}
- Authors: {authors}
- ISBN: {isbn}
Return ONLY a JSON object {{"image": "<url>"}}; use an empty string if you are not confident.
"""

_FENCED = re.compile(r"```(?:json)?\s*(.*?)```", re.IGNORECASE | re.DOTALL)
_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def extract_json(raw: str) -> str:
    """JSON z odpowiedzi modelu: blok ```json```, pierwszy obiekt {...} albo calosc."""
    fenced = _FENCED.search(raw or "")
    if fenced:
        return fenced.group(1)
    obj = _OBJECT.search(raw or "")
    if obj:
        return obj.group(0)
    return (raw or "").strip()


class ListingModel:
    """Cienka warstwa nad chat completions do generowania ogloszen."""

    def __init__(self, client: Any = None, api_key: str | None = None, model: str | None = None):
        self.model = model or OPENAI_MODEL
        key = OPENAI_API_KEY if api_key is None else api_key
        if client is None and key:
            client = OpenAI(api_key=key, timeout=HTTP_TIMEOUT_SECONDS * 6, max_retries=2)
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _complete(self, prompt: str, max_tokens: int) -> Dict[str, Any]:
        if not self.enabled:
            raise RuntimeError("Missing OpenAI API key.")

        res = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.4,
            max_tokens=max_tokens,
        )
        content = res.choices[0].message.content if res.choices else ""
        if not content:
            raise ValueError("Empty response from OpenAI.")

        try:
            data = json.loads(extract_json(content))
        except json.JSONDecodeError:
            raise ValueError("Unable to parse OpenAI response.")
        if not isinstance(data, dict):
            raise ValueError("Unable to parse OpenAI response.")
        return data

    def generate_listing(self, title: str, edition: str, price, condition: str = "", authors: str = "") -> Dict[str, Any]:
        prompt = LISTING_PROMPT.format(
            campus=CAMPUS_NAME,
            title=title,
            edition=edition,
            price=price,
            condition=condition or "Not provided",
            authors=authors or "Not provided (infer likely authors if confident)",
        )
        return self._complete(prompt, max_tokens=400)

    def lookup_cover(self, title: str, edition: str, authors: str = "", isbn: str = "") -> str:
        """Okladka wg samego modelu; "" przy braku klucza albo bledzie."""
        if not self.enabled:
            return ""
        prompt = COVER_PROMPT.format(
            title=title,
            edition=edition,
            authors=authors or "unknown",
            isbn=isbn or "unknown",
        )
        try:
            data = self._complete(prompt, max_tokens=120)
        except (OpenAIError, ValueError) as e:
            logger.warning(f"Model-only cover lookup failed: {e}")
            return ""
        image = data.get("image")
        return image if isinstance(image, str) else ""

# usedbooks/services/cover_service.py
import re
from typing import Dict, Optional
from urllib.parse import quote, urlparse

import requests
from requests import RequestException

from usedbooks.utils.retry import http_retry
from usedbooks.utils.settings import GOOGLE_BOOKS_API_KEY, HTTP_TIMEOUT_SECONDS
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)

GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"
OPEN_LIBRARY_URL = "https://covers.openlibrary.org/b/isbn/{isbn}-L.jpg?default=false"
AMAZON_PATTERNS = (
    "https://images-na.ssl-images-amazon.com/images/P/{isbn}.01._SL1200_.jpg",
    "https://images-na.ssl-images-amazon.com/images/P/{isbn}.01._SX500_.jpg",
    "https://m.media-amazon.com/images/P/{isbn}.01._SL1200_.jpg",
    "https://m.media-amazon.com/images/P/{isbn}.01._SX500_.jpg",
)
FALLBACK_URL = "https://placehold.co/600x800/0ea5e9/ffffff?text={text}"

# amazon zwraca 1x1 gif (43 bajty) zamiast 404 dla brakujacych okladek
MIN_IMAGE_BYTES = 800
RANGE_HEADER = "bytes=0-2047"

_IMAGE_EXT = re.compile(r"\.(jpe?g|png|webp|gif)$", re.IGNORECASE)
_CONTENT_RANGE_TOTAL = re.compile(r"/(\d+)$")
_NOT_ISBN = re.compile(r"[^0-9Xx]")

BANNED_WORDS = (
    "cactus", "succulent", "plant", "plants", "desert", "flower",
    "flowers", "vase", "pot", "potted", "tree", "trees",
)
TRUSTED_HOSTS = (
    "books.google",
    "gstatic",
    "googleusercontent",
    "amazon.com",
    "ssl-images-amazon.com",
    "openlibrary.org",
)


def is_likely_image(url: str) -> bool:
    if not isinstance(url, str) or not url.startswith("http"):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    host = parsed.netloc
    is_google_img = any(h in host for h in ("gstatic", "googleusercontent", "books.google"))
    has_img_param = "img=" in parsed.query or "zoom=" in parsed.query
    return bool(_IMAGE_EXT.search(parsed.path or "")) or is_google_img or has_img_param


def sanitize_cover_image(url: str, title: str = "") -> str:
    """
    Odrzuca adresy, ktore nie wygladaja na okladke: nie-obrazki, zdjecia
    roslin/dekoracji, hosty spoza zaufanej listy bez slowa z tytulu w URL.
    """
    if not is_likely_image(url):
        return ""
    lower = url.lower()
    if any(word in lower for word in BANNED_WORDS):
        return ""

    host = urlparse(url).netloc.lower()
    title_terms = [t for t in (title or "").lower().split() if t]
    title_matches = any(term in lower for term in title_terms)
    trusted_host = any(h in host for h in TRUSTED_HOSTS)

    if not title_matches and not trusted_host:
        return ""
    return url


def normalize_isbn(value: Optional[str]) -> str:
    digits = _NOT_ISBN.sub("", str(value or ""))
    if len(digits) in (10, 13):
        return digits.upper()
    return ""


def build_fallback_cover(title: str = "", edition: str = "") -> str:
    text = f"{title} {edition}".strip() or "Cover unavailable"
    return FALLBACK_URL.format(text=quote(text, safe="-_.!~*'()"))


def pick_cover_image(*candidates: str) -> str:
    """Pierwszy niepusty kandydat, w kolejnosci priorytetu."""
    return next((c for c in candidates if c), "")


def _content_range_total(header: str) -> int:
    match = _CONTENT_RANGE_TOTAL.search(header or "")
    return int(match.group(1)) if match else 0


def _size_headers(resp) -> tuple[str, int, int]:
    content_type = (resp.headers.get("content-type") or "").lower()
    try:
        length = int(resp.headers.get("content-length") or 0)
    except ValueError:
        length = 0
    return content_type, length, _content_range_total(resp.headers.get("content-range") or "")


class CoverClient:
    """
    Wyszukiwanie i walidacja okladek po HTTP.
    Kazdy kandydat jest sprawdzany HEAD-em, a gdy to nie wystarcza
    czesciowym GET-em z naglowkiem Range.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float | None = None,
        google_api_key: str | None = None,
        min_bytes: int = MIN_IMAGE_BYTES,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout or HTTP_TIMEOUT_SECONDS
        self.google_api_key = GOOGLE_BOOKS_API_KEY if google_api_key is None else google_api_key
        self.min_bytes = min_bytes

    @http_retry()
    def _head(self, url: str):
        return self.session.head(url, timeout=self.timeout, allow_redirects=True)

    @http_retry()
    def _get(self, url: str, **kwargs):
        return self.session.get(url, timeout=self.timeout, **kwargs)

    def validate_image_url(self, url: str) -> str:
        if not is_likely_image(url):
            return ""

        try:
            head = self._head(url)
            if head.ok:
                content_type, length, range_total = _size_headers(head)
                if "image" in content_type:
                    if length >= self.min_bytes or range_total >= self.min_bytes:
                        return url
                    if not length and not range_total:
                        # nie da sie ustalic rozmiaru - akceptujemy
                        return url
        except RequestException as e:
            logger.info(f"HEAD {url} failed ({e}), trying ranged GET")

        try:
            resp = self._get(url, headers={"Range": RANGE_HEADER}, stream=True)
        except RequestException as e:
            logger.info(f"GET {url} failed: {e}")
            return ""

        try:
            if not resp.ok:
                return ""
            content_type, length, range_total = _size_headers(resp)
            if "image" not in content_type:
                return ""
            if range_total:
                return url if range_total >= self.min_bytes else ""
            if length:
                return url if length >= self.min_bytes else ""

            received = 0
            for chunk in resp.iter_content(chunk_size=1024):
                received += len(chunk or b"")
                if received >= self.min_bytes:
                    break
            return url if received >= self.min_bytes else ""
        except RequestException as e:
            logger.info(f"Reading {url} failed: {e}")
            return ""
        finally:
            resp.close()

    def try_amazon_cover(self, isbn: str) -> str:
        if not isbn:
            return ""
        for pattern in AMAZON_PATTERNS:
            url = self.validate_image_url(pattern.format(isbn=isbn))
            if url:
                return url
        return ""

    def try_open_library_cover(self, isbn: str) -> str:
        if not isbn:
            return ""
        return self.validate_image_url(OPEN_LIBRARY_URL.format(isbn=isbn))

    def lookup_google_books(
        self,
        title: str,
        edition: str,
        authors: str = "",
        isbn: str = "",
    ) -> Dict[str, str]:
        """
        Google Books: pierwszy wolumen z sensowna okladka.
        Zwraca {"image", "isbn", "authors"} (puste stringi gdy brak).
        """
        empty = {"image": "", "isbn": "", "authors": ""}
        if not self.google_api_key:
            return empty

        query = f"{title} {edition} {authors or ''}".strip()
        if isbn:
            query = f"{query} isbn:{isbn}"

        try:
            resp = self._get(
                GOOGLE_BOOKS_URL,
                params={
                    "q": query,
                    "maxResults": 5,
                    "printType": "books",
                    "projection": "lite",
                    "key": self.google_api_key,
                },
            )
            if not resp.ok:
                return empty
            data = resp.json()
        except (RequestException, ValueError) as e:
            logger.error(f"Book cover lookup failed: {e}")
            return empty

        for item in data.get("items") or []:
            info = item.get("volumeInfo") or {}
            links = info.get("imageLinks") or {}
            sanitized = (
                sanitize_cover_image(link.replace("http://", "https://"), title)
                for link in (links.get(k) for k in ("large", "medium", "thumbnail", "smallThumbnail"))
                if link
            )
            match = next((s for s in sanitized if s), "")
            if not match:
                continue

            identifiers = info.get("industryIdentifiers") or []
            isbn13 = next(
                (i.get("identifier", "") for i in identifiers if re.search(r"isbn\s*_?13", i.get("type", ""), re.I)),
                "",
            )
            any_isbn = next(
                (i.get("identifier", "") for i in identifiers if "isbn" in i.get("type", "").lower()),
                "",
            )
            return {
                "image": match,
                "isbn": normalize_isbn(isbn13) or normalize_isbn(any_isbn),
                "authors": ", ".join(a for a in info.get("authors") or [] if a),
            }

        return empty

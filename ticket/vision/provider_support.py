"""
Provider Support - Behaviour shared by every vision provider

Composed into each provider rather than inherited: image encoding, retry with
exponential backoff, lenient JSON reply parsing and failure results.
"""
import base64
import json
import logging
import mimetypes
import time
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, TypeVar

import requests
from json_repair import repair_json

from ..errors import ImageReadError, ResponseParseError, TransientProviderError
from ..models import ExtractionResult, ProviderDescriptor, TicketFields

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_IMAGE_BYTES = 10 * 1024 * 1024
MAX_BACKOFF_SECONDS = 10.0
CONNECTION_TEST_TIMEOUT = 10


class VisionProvider(Protocol):
    """Contract every vision backend satisfies."""

    name: str

    def extract_ticket_data(self, image_path: str) -> ExtractionResult:
        ...

    def test_connection(self) -> bool:
        ...


def is_transient(error: Exception) -> bool:
    """Network failures, timeouts, 429 and 5xx replies are worth retrying."""
    if isinstance(error, TransientProviderError):
        return True
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(error, requests.HTTPError) and error.response is not None:
        status = error.response.status_code
        return status == 429 or status >= 500
    return False


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after a failed attempt (1-based)."""
    return min(1.0 * 2 ** attempt, MAX_BACKOFF_SECONDS)


class ProviderSupport:
    """Helpers one provider instance uses for a single descriptor."""

    def __init__(self, descriptor: ProviderDescriptor, name: str,
                 sleep: Callable[[float], None] = time.sleep):
        self.descriptor = descriptor
        self.name = name
        self.max_retries = max(1, descriptor.max_retries)
        self.timeout = descriptor.timeout
        self.sleep = sleep
        self.last_attempts = 0

    def encode_image(self, image_path: str) -> str:
        """Base64 of the image bytes. Unreadable or oversized images raise ImageReadError."""
        path = Path(image_path)
        try:
            size = path.stat().st_size
            if size > MAX_IMAGE_BYTES:
                raise ImageReadError(
                    f"Image {path.name} is {size} bytes, above the {MAX_IMAGE_BYTES} byte limit")
            with open(path, 'rb') as f:
                image_bytes = f.read()
        except OSError as e:
            raise ImageReadError(f"Failed to read image file {image_path}: {e}") from e
        return base64.b64encode(image_bytes).decode('ascii')

    @staticmethod
    def mime_type(image_path: str) -> str:
        guessed, _ = mimetypes.guess_type(str(image_path))
        return guessed if guessed and guessed.startswith('image/') else 'image/jpeg'

    def with_retry(self, fn: Callable[[], T]) -> T:
        """
        Call fn up to max_retries times.

        Only transient failures are retried; anything else propagates at once.
        Between attempts the wait doubles from 2s and is capped at 10s. The
        last transient error is re-raised once attempts are exhausted.
        """
        for attempt in range(1, self.max_retries + 1):
            self.last_attempts = attempt
            try:
                return fn()
            except Exception as e:
                if not is_transient(e):
                    raise
                logger.warning(f"[{self.name}] Attempt {attempt} failed: {e}")
                if attempt >= self.max_retries:
                    raise
                self.sleep(backoff_delay(attempt))
        raise TransientProviderError(f"All {self.max_retries} attempts failed")

    def parse_reply(self, text: Optional[str]) -> TicketFields:
        """
        Parse model text into ticket fields.

        Tries the whole reply as JSON, then the first balanced {...} block
        (strict first, json_repair second). Anything else is a ResponseParseError.
        """
        if not isinstance(text, str) or not text.strip():
            raise ResponseParseError("Empty reply from model", raw_content=text)

        cleaned = text.strip()
        try:
            data = json.loads(cleaned)
        except ValueError:
            data = self._parse_embedded_object(cleaned)

        if not isinstance(data, dict):
            raise ResponseParseError("Model reply is not a JSON object", raw_content=text)
        return TicketFields.from_dict(data)

    def _parse_embedded_object(self, text: str) -> Any:
        candidate = first_json_object(text)
        if candidate is None:
            raise ResponseParseError("Could not extract JSON from response", raw_content=text)
        try:
            return json.loads(candidate)
        except ValueError:
            pass
        try:
            repaired = repair_json(candidate, return_objects=True)
        except Exception as e:
            raise ResponseParseError(f"Could not repair JSON in response: {e}", raw_content=text) from e
        if isinstance(repaired, list) and repaired and isinstance(repaired[0], dict):
            repaired = repaired[0]
        if not isinstance(repaired, dict) or not repaired:
            raise ResponseParseError("Could not repair JSON in response", raw_content=text)
        return repaired

    def extract(self, image_path: str, session: requests.Session,
                build_request: Callable[[str, str], tuple],
                reply_text: Callable[[Any], str], error_message: str) -> ExtractionResult:
        """
        Shared extraction flow: encode, send with retry, pull the reply text, parse.

        Args:
            build_request: (image_b64, mime_type) -> (url, payload, headers, params)
            reply_text: decoded response body -> model text
            error_message: prefix for transport failures

        Never raises: every failure becomes a failed ExtractionResult.
        """
        logger.info(f"[{self.name}] Extracting ticket data from: {image_path}")
        try:
            image_b64 = self.encode_image(image_path)
        except ImageReadError as e:
            return self.failure("Failed to read ticket image", e)

        url, payload, headers, params = build_request(image_b64, self.mime_type(image_path))

        def call():
            resp = session.post(url, json=payload, headers=headers, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()

        self.last_attempts = 0
        try:
            data = self.with_retry(call)
        except (requests.RequestException, ValueError, TransientProviderError) as e:
            return self.failure(error_message, e, attempts=self.last_attempts)
        attempts = self.last_attempts
        logger.info(f"[{self.name}] API response received")
        logger.debug(f"[{self.name}] Raw response: {data}")

        try:
            text = reply_text(data)
        except (KeyError, IndexError, TypeError) as e:
            return self.failure("No content found in response", e, raw_response=data, attempts=attempts)
        try:
            fields = self.parse_reply(text)
        except ResponseParseError as e:
            logger.debug(f"[{self.name}] Raw content: {e.raw_content!r}")
            return self.failure("Failed to parse API response", e, raw_response=data, attempts=attempts)

        return ExtractionResult.ok(fields, raw_response=data, provider_name=self.name, attempts=attempts)

    def probe(self, request: Callable[[], requests.Response]) -> bool:
        """Run a lightweight authenticated request; any error means not connected."""
        try:
            resp = request()
            return resp.status_code == 200
        except requests.RequestException as e:
            logger.error(f"[{self.name}] Test connection failed: {e}")
            return False

    def failure(self, message: str, error: Optional[Exception] = None,
                raw_response: Any = None, attempts: int = 0) -> ExtractionResult:
        """Failed result carrying the message, the cause and any raw payload."""
        detail = f"{message}: {error}" if error else message
        logger.error(f"❌ [{self.name}] {detail}")
        return ExtractionResult.failure(detail, raw_response=raw_response,
                                        provider_name=self.name, attempts=attempts)


def first_json_object(text: str) -> Optional[str]:
    """Substring of the first balanced {...} block, honouring JSON strings."""
    start = text.find('{')
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    # Unbalanced: hand the tail to the repair step
    return text[start:]

"""
Gemini Provider - Google Gemini Vision ticket extraction
"""
import time
from typing import Callable, Optional

import requests

from ..models import ExtractionResult, ProviderDescriptor
from .prompts import build_prompt
from .provider_support import ProviderSupport, CONNECTION_TEST_TIMEOUT

GEMINI_PROVIDER = "Google Gemini Vision"


class GeminiVisionProvider:
    """Gemini generateContent with inline_data; the key travels as a query parameter."""

    DEFAULT_MODEL = "gemini-1.5-flash"
    API_BASE = "https://generativelanguage.googleapis.com/v1/models"

    def __init__(self, descriptor: ProviderDescriptor, session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.name = descriptor.name or GEMINI_PROVIDER
        self.api_key = descriptor.api_key
        self.model_version = descriptor.model_version or self.DEFAULT_MODEL
        self.session = session or requests.Session()
        self.support = ProviderSupport(descriptor, self.name, sleep=sleep)

    @property
    def api_endpoint(self) -> str:
        return f"{self.API_BASE}/{self.model_version}:generateContent"

    def extract_ticket_data(self, image_path: str) -> ExtractionResult:
        return self.support.extract(
            image_path, self.session, self._build_request, self._reply_text,
            "Failed to extract ticket data with Google Gemini Vision")

    def test_connection(self) -> bool:
        return self.support.probe(lambda: self.session.get(
            self.API_BASE,
            params={'key': self.api_key},
            headers={'Content-Type': 'application/json'},
            timeout=CONNECTION_TEST_TIMEOUT
        ))

    def _build_request(self, image_b64: str, mime_type: str):
        payload = {
            'contents': [{
                'parts': [
                    {'text': build_prompt(style="json")},
                    {'inline_data': {'mime_type': mime_type, 'data': image_b64}}
                ]
            }],
            'generationConfig': {
                'temperature': 0.1,
                'maxOutputTokens': 1000
            }
        }
        headers = {'Content-Type': 'application/json'}
        return self.api_endpoint, payload, headers, {'key': self.api_key}

    @staticmethod
    def _reply_text(data) -> str:
        return data['candidates'][0]['content']['parts'][0]['text']

"""
Anthropic Provider - Claude Vision ticket extraction
"""
import time
from typing import Callable, Optional

import requests

from ..models import ExtractionResult, ProviderDescriptor
from .prompts import build_prompt, USER_INSTRUCTION, CONNECTION_TEST_MESSAGE
from .provider_support import ProviderSupport, CONNECTION_TEST_TIMEOUT

ANTHROPIC_PROVIDER = "Anthropic Claude Vision"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicVisionProvider:
    """Anthropic messages API with a base64 image source block."""

    DEFAULT_MODEL = "claude-3-opus-20240229"
    API_ENDPOINT = "https://api.anthropic.com/v1/messages"

    def __init__(self, descriptor: ProviderDescriptor, session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.name = descriptor.name or ANTHROPIC_PROVIDER
        self.api_key = descriptor.api_key
        self.model_version = descriptor.model_version or self.DEFAULT_MODEL
        self.session = session or requests.Session()
        self.support = ProviderSupport(descriptor, self.name, sleep=sleep)

    def extract_ticket_data(self, image_path: str) -> ExtractionResult:
        return self.support.extract(
            image_path, self.session, self._build_request, self._reply_text,
            "Failed to extract ticket data with Anthropic Claude Vision")

    def test_connection(self) -> bool:
        payload = {
            'model': self.model_version,
            'max_tokens': 20,
            'messages': [{'role': 'user', 'content': [{'type': 'text', 'text': CONNECTION_TEST_MESSAGE}]}]
        }
        return self.support.probe(lambda: self.session.post(
            self.API_ENDPOINT, json=payload, headers=self._headers(), timeout=CONNECTION_TEST_TIMEOUT))

    def _headers(self):
        return {
            'Content-Type': 'application/json',
            'x-api-key': self.api_key,
            'anthropic-version': ANTHROPIC_VERSION
        }

    def _build_request(self, image_b64: str, mime_type: str):
        payload = {
            'model': self.model_version,
            'max_tokens': 1000,
            'temperature': 0.1,
            'system': build_prompt(style="list"),
            'messages': [{
                'role': 'user',
                'content': [
                    {'type': 'text', 'text': USER_INSTRUCTION},
                    {'type': 'image', 'source': {
                        'type': 'base64',
                        'media_type': mime_type,
                        'data': image_b64
                    }}
                ]
            }]
        }
        return self.API_ENDPOINT, payload, self._headers(), None

    @staticmethod
    def _reply_text(data) -> str:
        return data['content'][0]['text']

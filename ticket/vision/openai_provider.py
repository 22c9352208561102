"""
OpenAI Provider - GPT-4 Vision ticket extraction
"""
import time
from typing import Callable, Optional

import requests

from ..models import ExtractionResult, ProviderDescriptor
from .prompts import build_prompt, USER_INSTRUCTION
from .provider_support import ProviderSupport, CONNECTION_TEST_TIMEOUT

OPENAI_PROVIDER = "OpenAI GPT-4 Vision"


class OpenAIVisionProvider:
    """OpenAI chat completions with an image_url data URL."""

    DEFAULT_MODEL = "gpt-4-turbo"
    API_ENDPOINT = "https://api.openai.com/v1/chat/completions"
    MODELS_ENDPOINT = "https://api.openai.com/v1/models"

    def __init__(self, descriptor: ProviderDescriptor, session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.name = descriptor.name or OPENAI_PROVIDER
        self.api_key = descriptor.api_key
        self.model_version = descriptor.model_version or self.DEFAULT_MODEL
        self.session = session or requests.Session()
        self.support = ProviderSupport(descriptor, self.name, sleep=sleep)

    def extract_ticket_data(self, image_path: str) -> ExtractionResult:
        return self.support.extract(
            image_path, self.session, self._build_request, self._reply_text,
            "Failed to extract ticket data with OpenAI Vision")

    def test_connection(self) -> bool:
        # Model listing is the lightest authenticated call
        return self.support.probe(lambda: self.session.get(
            self.MODELS_ENDPOINT,
            headers={'Authorization': f'Bearer {self.api_key}'},
            timeout=CONNECTION_TEST_TIMEOUT
        ))

    def _build_request(self, image_b64: str, mime_type: str):
        payload = {
            'model': self.model_version,
            'messages': [
                {'role': 'system', 'content': build_prompt(style="json")},
                {'role': 'user', 'content': [
                    {'type': 'text', 'text': USER_INSTRUCTION},
                    {'type': 'image_url', 'image_url': {
                        'url': f'data:{mime_type};base64,{image_b64}',
                        'detail': 'high'
                    }}
                ]}
            ],
            'max_tokens': 1000,
            'temperature': 0
        }
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}'
        }
        return self.API_ENDPOINT, payload, headers, None

    @staticmethod
    def _reply_text(data) -> str:
        return data['choices'][0]['message']['content']

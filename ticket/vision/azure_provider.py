"""
Azure Provider - Azure OpenAI GPT-4 Vision deployment
"""
import time
from typing import Callable, Optional

import requests

from ..errors import ConfigurationError
from ..models import ExtractionResult, ProviderDescriptor
from .prompts import build_prompt, USER_INSTRUCTION, CONNECTION_TEST_MESSAGE
from .provider_support import ProviderSupport, CONNECTION_TEST_TIMEOUT

AZURE_PROVIDER = "Microsoft Azure Computer Vision"
AZURE_API_VERSION = "2023-12-01-preview"


class AzureVisionProvider:
    """Chat completions against a deployment on an Azure OpenAI resource."""

    DEFAULT_DEPLOYMENT = "gpt-4-vision"

    def __init__(self, descriptor: ProviderDescriptor, session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        if not descriptor.endpoint:
            raise ConfigurationError("Azure vision provider needs an endpoint")
        self.name = descriptor.name or AZURE_PROVIDER
        self.api_key = descriptor.api_key
        self.endpoint = descriptor.endpoint.rstrip('/')
        self.deployment_name = descriptor.deployment_name or self.DEFAULT_DEPLOYMENT
        self.session = session or requests.Session()
        self.support = ProviderSupport(descriptor, self.name, sleep=sleep)

    @property
    def api_url(self) -> str:
        return f"{self.endpoint}/openai/deployments/{self.deployment_name}/chat/completions"

    def extract_ticket_data(self, image_path: str) -> ExtractionResult:
        return self.support.extract(
            image_path, self.session, self._build_request, self._reply_text,
            "Failed to extract ticket data with Azure Vision")

    def test_connection(self) -> bool:
        payload = {
            'messages': [{'role': 'user', 'content': CONNECTION_TEST_MESSAGE}],
            'max_tokens': 20
        }
        return self.support.probe(lambda: self.session.post(
            self.api_url, json=payload, headers=self._headers(),
            params={'api-version': AZURE_API_VERSION}, timeout=CONNECTION_TEST_TIMEOUT))

    def _headers(self):
        return {'Content-Type': 'application/json', 'api-key': self.api_key}

    def _build_request(self, image_b64: str, mime_type: str):
        payload = {
            'messages': [
                {'role': 'system', 'content': build_prompt(style="list")},
                {'role': 'user', 'content': [
                    {'type': 'text', 'text': USER_INSTRUCTION},
                    {'type': 'image_url', 'image_url': {'url': f'data:{mime_type};base64,{image_b64}'}}
                ]}
            ],
            'max_tokens': 1000,
            'temperature': 0.1
        }
        return self.api_url, payload, self._headers(), {'api-version': AZURE_API_VERSION}

    @staticmethod
    def _reply_text(data) -> str:
        return data['choices'][0]['message']['content']

"""
Provider Registry - Owns the configured vision providers and the active selection
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Mapping, Optional

from ..models import ProviderDescriptor
from .provider_support import VisionProvider
from .openai_provider import OpenAIVisionProvider, OPENAI_PROVIDER
from .anthropic_provider import AnthropicVisionProvider, ANTHROPIC_PROVIDER
from .gemini_provider import GeminiVisionProvider, GEMINI_PROVIDER
from .azure_provider import AzureVisionProvider, AZURE_PROVIDER

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ProviderDescriptor], VisionProvider]

DEFAULT_PROVIDER_FACTORIES: Dict[str, ProviderFactory] = {
    OPENAI_PROVIDER: OpenAIVisionProvider,
    ANTHROPIC_PROVIDER: AnthropicVisionProvider,
    GEMINI_PROVIDER: GeminiVisionProvider,
    AZURE_PROVIDER: AzureVisionProvider,
}


class VisionProviderRegistry:
    """
    Provider instances keyed by name, in registration order.

    The active provider is the configured default when it is registered,
    otherwise the first registered one. Admin mutations hold a lock so a
    concurrent scan always sees a consistent active provider.
    """

    def __init__(self, config=None,
                 provider_factories: Optional[Mapping[str, ProviderFactory]] = None):
        self._providers: Dict[str, VisionProvider] = {}
        self._active_provider: Optional[str] = None
        self._lock = threading.Lock()
        self.provider_factories = dict(provider_factories or DEFAULT_PROVIDER_FACTORIES)

        if config is not None:
            self._initialize_providers(config)

    def _initialize_providers(self, config):
        for descriptor in config.provider_descriptors():
            factory = self.provider_factories.get(descriptor.name)
            if factory is None:
                logger.warning(f"No provider implementation for '{descriptor.name}'")
                continue
            self.register_provider(factory(descriptor))

        default_provider = getattr(config, 'default_provider', None) or GEMINI_PROVIDER
        with self._lock:
            if default_provider in self._providers:
                self._active_provider = default_provider
            elif self._providers:
                self._active_provider = next(iter(self._providers))

        logger.info(f"✅ Vision providers: {self.get_all_provider_names()} "
                    f"(active: {self._active_provider})")

    def register_provider(self, provider: VisionProvider) -> None:
        with self._lock:
            self._providers[provider.name] = provider
            if not self._active_provider:
                self._active_provider = provider.name

    def remove_provider(self, provider_name: str) -> None:
        with self._lock:
            self._providers.pop(provider_name, None)
            if self._active_provider == provider_name:
                self._active_provider = next(iter(self._providers), None)

    def set_active_provider(self, provider_name: str) -> bool:
        with self._lock:
            if provider_name in self._providers:
                self._active_provider = provider_name
                return True
        return False

    def get_provider(self, provider_name: str) -> Optional[VisionProvider]:
        return self._providers.get(provider_name)

    def get_active_provider(self) -> Optional[VisionProvider]:
        with self._lock:
            if not self._active_provider:
                return None
            return self._providers.get(self._active_provider)

    @property
    def active_provider_name(self) -> Optional[str]:
        return self._active_provider

    def get_all_provider_names(self) -> List[str]:
        return list(self._providers)

    def test_all_providers(self) -> Dict[str, bool]:
        """Connectivity of every provider, probed concurrently. Errors count as disconnected."""
        with self._lock:
            providers = list(self._providers.values())
        if not providers:
            return {}

        results = {}
        with ThreadPoolExecutor(max_workers=len(providers)) as executor:
            futures = {provider.name: executor.submit(provider.test_connection) for provider in providers}
            for name, future in futures.items():
                try:
                    results[name] = bool(future.result())
                except Exception as e:
                    logger.error(f"Connection test for {name} raised: {e}")
                    results[name] = False
        return results

"""
Vision Providers Package
"""
from .provider_support import VisionProvider, ProviderSupport, MAX_IMAGE_BYTES
from .openai_provider import OpenAIVisionProvider, OPENAI_PROVIDER
from .anthropic_provider import AnthropicVisionProvider, ANTHROPIC_PROVIDER
from .gemini_provider import GeminiVisionProvider, GEMINI_PROVIDER
from .azure_provider import AzureVisionProvider, AZURE_PROVIDER
from .provider_registry import VisionProviderRegistry, DEFAULT_PROVIDER_FACTORIES
from .provider_comparison import run_provider_comparison, compare_results

__all__ = [
    'VisionProvider',
    'ProviderSupport',
    'MAX_IMAGE_BYTES',
    'OpenAIVisionProvider',
    'AnthropicVisionProvider',
    'GeminiVisionProvider',
    'AzureVisionProvider',
    'OPENAI_PROVIDER',
    'ANTHROPIC_PROVIDER',
    'GEMINI_PROVIDER',
    'AZURE_PROVIDER',
    'VisionProviderRegistry',
    'DEFAULT_PROVIDER_FACTORIES',
    'run_provider_comparison',
    'compare_results'
]

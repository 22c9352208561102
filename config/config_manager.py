"""
Configuration Manager for the Ticket Scanning System
"""
import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

import yaml

from ticket.models import ProviderDescriptor
from ticket.vision import OPENAI_PROVIDER, ANTHROPIC_PROVIDER, GEMINI_PROVIDER, AZURE_PROVIDER

logger = logging.getLogger(__name__)

# Environment variable -> attribute
ENV_VARIABLES = {
    'OPENAI_API_KEY': 'openai_api_key',
    'OPENAI_MODEL_VERSION': 'openai_model_version',
    'ANTHROPIC_API_KEY': 'anthropic_api_key',
    'ANTHROPIC_MODEL_VERSION': 'anthropic_model_version',
    'GEMINI_API_KEY': 'gemini_api_key',
    'GEMINI_MODEL_VERSION': 'gemini_model_version',
    'AZURE_API_KEY': 'azure_api_key',
    'AZURE_ENDPOINT': 'azure_endpoint',
    'AZURE_DEPLOYMENT_NAME': 'azure_deployment_name',
    'DEFAULT_VISION_PROVIDER': 'default_provider',
    'TMDB_API_KEY': 'tmdb_api_key',
    'TMDB_BASE_URL': 'tmdb_base_url',
    'VISION_TIMEOUT': 'vision_timeout',
    'VISION_MAX_RETRIES': 'vision_max_retries',
    'OCR_FALLBACK_ENABLED': 'ocr_fallback_enabled',
    'TESSERACT_CMD': 'tesseract_cmd',
}

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


@dataclass
class ScannerConfig:
    """Configuration class for vision providers, catalog lookup and OCR fallback."""

    # Path configuration
    config_path: str = ""
    read_environment: bool = True

    # Vision provider credentials
    openai_api_key: Optional[str] = None
    openai_model_version: str = "gpt-4-turbo"
    anthropic_api_key: Optional[str] = None
    anthropic_model_version: str = "claude-3-opus-20240229"
    gemini_api_key: Optional[str] = None
    gemini_model_version: str = "gemini-1.5-flash"
    azure_api_key: Optional[str] = None
    azure_endpoint: Optional[str] = None
    azure_deployment_name: str = "gpt-4-vision"
    default_provider: str = GEMINI_PROVIDER

    # Transport
    vision_timeout: float = 30.0
    vision_max_retries: int = 3

    # Movie catalog
    tmdb_api_key: Optional[str] = None
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    catalog_timeout: float = 10.0
    similarity_threshold: float = 0.6
    popularity_threshold: float = 20.0

    # OCR fallback
    ocr_fallback_enabled: bool = False
    tesseract_cmd: Optional[str] = None
    ocr_max_size: List[int] = field(default_factory=lambda: [1500, 2000])

    def __post_init__(self):
        """Resolve the config path, then layer file values and environment over defaults."""
        current_file = Path(__file__).resolve()
        project_root = current_file.parent.parent

        if not self.config_path:
            self.config_path = os.environ.get('TICKET_SCANNER_CONFIG') or str(
                project_root / "config" / "ticket_scanner_config.json")

        self.load_config()
        if self.read_environment:
            self.load_environment()
        self._coerce_types()

    def load_config(self):
        """Load configuration from JSON or YAML if the file exists."""
        if not os.path.exists(self.config_path):
            return
        try:
            with open(self.config_path, 'r') as f:
                if self.config_path.endswith(('.yaml', '.yml')):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
            for key, value in data.items():
                if hasattr(self, key) and key not in ('config_path', 'read_environment'):
                    setattr(self, key, value)
            logger.info(f"Loaded scanner config from {self.config_path}")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config from {self.config_path}: {e}")

    def load_environment(self, environ: Optional[Dict[str, str]] = None):
        """Override values with any environment variables that are set."""
        environ = os.environ if environ is None else environ
        for variable, attribute in ENV_VARIABLES.items():
            value = environ.get(variable)
            if value:
                setattr(self, attribute, value)

    def _coerce_types(self):
        try:
            self.vision_timeout = float(self.vision_timeout)
        except (TypeError, ValueError):
            logger.warning(f"Invalid vision timeout {self.vision_timeout!r}, using 30s")
            self.vision_timeout = 30.0
        try:
            self.vision_max_retries = max(1, int(self.vision_max_retries))
        except (TypeError, ValueError):
            logger.warning(f"Invalid retry count {self.vision_max_retries!r}, using 3")
            self.vision_max_retries = 3
        if isinstance(self.ocr_fallback_enabled, str):
            self.ocr_fallback_enabled = self.ocr_fallback_enabled.strip().lower() in _TRUE_VALUES

    def provider_descriptors(self) -> List[ProviderDescriptor]:
        """Descriptors for every provider whose credentials are configured."""
        descriptors = []
        common = {'timeout': self.vision_timeout, 'max_retries': self.vision_max_retries}

        if self.openai_api_key:
            descriptors.append(ProviderDescriptor(
                name=OPENAI_PROVIDER, api_key=self.openai_api_key,
                model_version=self.openai_model_version, **common))
        if self.anthropic_api_key:
            descriptors.append(ProviderDescriptor(
                name=ANTHROPIC_PROVIDER, api_key=self.anthropic_api_key,
                model_version=self.anthropic_model_version, **common))
        if self.gemini_api_key:
            descriptors.append(ProviderDescriptor(
                name=GEMINI_PROVIDER, api_key=self.gemini_api_key,
                model_version=self.gemini_model_version, **common))
        # Azure needs both a key and a resource endpoint
        if self.azure_api_key and self.azure_endpoint:
            descriptors.append(ProviderDescriptor(
                name=AZURE_PROVIDER, api_key=self.azure_api_key,
                endpoint=self.azure_endpoint,
                deployment_name=self.azure_deployment_name, **common))

        return descriptors


class ConfigManager:
    """Wrapper for ScannerConfig giving a plain dict view for logging and the CLI."""
    def __init__(self, config_path=None):
        self.scanner_config = ScannerConfig(config_path=config_path) if config_path else ScannerConfig()
        self.config = self._to_dict()

    def _to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary format, never exposing secrets."""
        cfg = self.scanner_config
        return {
            'default_provider': cfg.default_provider,
            'configured_providers': [d.name for d in cfg.provider_descriptors()],
            'vision': {
                'timeout': cfg.vision_timeout,
                'max_retries': cfg.vision_max_retries
            },
            'catalog': {
                'base_url': cfg.tmdb_base_url,
                'enabled': bool(cfg.tmdb_api_key),
                'similarity_threshold': cfg.similarity_threshold
            },
            'ocr_fallback_enabled': cfg.ocr_fallback_enabled
        }

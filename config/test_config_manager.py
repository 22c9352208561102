"""
Tests for scanner configuration loading
"""
import json

import yaml

from config.config_manager import ConfigManager, ScannerConfig, ENV_VARIABLES
from ticket.vision import ANTHROPIC_PROVIDER, AZURE_PROVIDER, GEMINI_PROVIDER, OPENAI_PROVIDER


def test_defaults_without_file(tmp_path):
    config = ScannerConfig(config_path=str(tmp_path / "absent.json"), read_environment=False)

    assert config.default_provider == GEMINI_PROVIDER
    assert config.vision_timeout == 30.0
    assert config.vision_max_retries == 3
    assert config.similarity_threshold == 0.6
    assert config.ocr_fallback_enabled is False
    assert config.provider_descriptors() == []


def test_json_file_overrides_defaults(tmp_path):
    path = tmp_path / "scanner.json"
    path.write_text(json.dumps({
        'openai_api_key': 'sk-file',
        'openai_model_version': 'gpt-4o',
        'vision_max_retries': 5,
        'unknown_setting': 'ignored',
    }))

    config = ScannerConfig(config_path=str(path), read_environment=False)

    assert config.vision_max_retries == 5
    assert not hasattr(config, 'unknown_setting')
    descriptor = config.provider_descriptors()[0]
    assert descriptor.name == OPENAI_PROVIDER
    assert descriptor.model_version == 'gpt-4o'
    assert descriptor.max_retries == 5


def test_yaml_file_is_supported(tmp_path):
    path = tmp_path / "scanner.yaml"
    path.write_text(yaml.safe_dump({'anthropic_api_key': 'ant-file', 'vision_timeout': 12}))

    config = ScannerConfig(config_path=str(path), read_environment=False)

    assert config.vision_timeout == 12.0
    assert [d.name for d in config.provider_descriptors()] == [ANTHROPIC_PROVIDER]


def test_invalid_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    config = ScannerConfig(config_path=str(path), read_environment=False)

    assert config.vision_timeout == 30.0


def test_environment_overrides_file(tmp_path, monkeypatch):
    for variable in ENV_VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    path = tmp_path / "scanner.json"
    path.write_text(json.dumps({'gemini_api_key': 'g-file'}))
    monkeypatch.setenv('GEMINI_API_KEY', 'g-env')
    monkeypatch.setenv('VISION_MAX_RETRIES', '4')
    monkeypatch.setenv('VISION_TIMEOUT', 'soon')
    monkeypatch.setenv('OCR_FALLBACK_ENABLED', 'true')

    config = ScannerConfig(config_path=str(path))

    assert config.gemini_api_key == 'g-env'
    assert config.vision_max_retries == 4
    assert config.vision_timeout == 30.0
    assert config.ocr_fallback_enabled is True


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "from_env.json"
    path.write_text(json.dumps({'catalog_timeout': 3}))
    monkeypatch.setenv('TICKET_SCANNER_CONFIG', str(path))

    config = ScannerConfig(read_environment=False)

    assert config.config_path == str(path)
    assert config.catalog_timeout == 3


def test_azure_needs_endpoint(tmp_path):
    config = ScannerConfig(config_path=str(tmp_path / "absent.json"), read_environment=False)
    config.azure_api_key = 'az-key'
    assert config.provider_descriptors() == []

    config.azure_endpoint = 'https://example.openai.azure.com'
    descriptor = config.provider_descriptors()[0]
    assert descriptor.name == AZURE_PROVIDER
    assert descriptor.deployment_name == 'gpt-4-vision'


def test_config_manager_hides_secrets(tmp_path, monkeypatch):
    for variable in ENV_VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    path = tmp_path / "scanner.json"
    path.write_text(json.dumps({'openai_api_key': 'sk-secret', 'tmdb_api_key': 'tmdb-secret'}))

    manager = ConfigManager(str(path))

    assert manager.config['configured_providers'] == [OPENAI_PROVIDER]
    assert manager.config['catalog']['enabled'] is True
    assert 'sk-secret' not in json.dumps(manager.config)
    assert 'tmdb-secret' not in json.dumps(manager.config)

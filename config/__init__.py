"""
Configuration Package
"""
from .config_manager import ScannerConfig, ConfigManager, ENV_VARIABLES

__all__ = ['ScannerConfig', 'ConfigManager', 'ENV_VARIABLES']

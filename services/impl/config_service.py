"""
Config Service Implementation.

Centralized configuration management for the OCR preprocessing pipeline.
Loads configuration from application_config.json organized by stage.

Follows:
- SRP: Only handles configuration management
- DIP: Provides configuration to the orchestrator via interface
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List


from services.interfaces.config_service_interface import IConfigService


logger = logging.getLogger(__name__)


class ConfigService(IConfigService):
    """
    Implementation of IConfigService.

    Loads and manages pipeline configuration from application_config.json.
    Configuration is organized by stage section (s1_preprocessing,
    s2_enhancement, s3_normalization) plus debug and backends sections.
    """

    def __init__(self, configPath: str = "config/application_config.json"):
        """
        Initialize ConfigService.

        Args:
            configPath: Path to the configuration file.

        Raises:
            RuntimeError: If the file is missing or not valid JSON.
        """
        self._config: Dict[str, Any] = {}
        self._configPath = Path(configPath)
        self._debugEnabled = False

        if not self.loadConfig(configPath):
            raise RuntimeError(f"Failed to load configuration from: {configPath}")

    def loadConfig(self, configPath: str) -> bool:
        """Load configuration from JSON file."""
        try:
            path = Path(configPath)
            if not path.exists():
                logger.error(f"Config file not found: {configPath}")
                return False

            with open(path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)

            if not isinstance(loaded, dict):
                logger.error(f"Config root must be an object: {configPath}")
                return False

            self._config = loaded
            self._debugEnabled = bool(self.get("debug.enabled", False))

            logger.info(f"Configuration loaded from: {path.absolute()}")
            return True

        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}")
            return False
        except OSError as e:
            logger.error(f"Failed to read config: {e}")
            return False

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Generic Config Access
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key with dot notation support.

        Examples:
            get("s2_enhancement.contrast") -> 1.2
            get("s3_normalization.targetWidth") -> 320
            get("backends.rectify.modelPath") -> "models/..."
        """
        value = self._config
        for part in key.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(part)
            if value is None:
                return default
        return value

    def getServiceConfig(self, serviceName: str) -> Dict[str, Any]:
        """Get all configuration for a section, empty if absent."""
        config = self._config.get(serviceName, {})
        return config if isinstance(config, dict) else {}

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Debug Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getDebugBasePath(self) -> str:
        """Get base path for debug output."""
        return self.get("debug.basePath", "output/debug")

    def isDebugEnabled(self) -> bool:
        """Check if debug mode is enabled."""
        return self._debugEnabled

    def setDebugEnabled(self, enabled: bool) -> None:
        """Enable or disable debug mode at runtime."""
        self._debugEnabled = enabled
        logger.info(f"Debug mode {'enabled' if enabled else 'disabled'}")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S1 Preprocessing Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def isPreprocessingEnabled(self) -> bool:
        """Check if preprocessing (orientation + rectification) is enabled."""
        return self.get("s1_preprocessing.enabled", True)

    def isOrientationFixEnabled(self) -> bool:
        """Check if orientation backends should be consulted."""
        return self.get("s1_preprocessing.orientationFix", True)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S2 Enhancement Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def isEnhancementEnabled(self) -> bool:
        """Check if enhancement is enabled."""
        return self.get("s2_enhancement.enabled", True)

    def getContrast(self) -> float:
        """Get contrast gain."""
        return float(self.get("s2_enhancement.contrast", 1.2))

    def getBrightness(self) -> float:
        """Get brightness offset."""
        return float(self.get("s2_enhancement.brightness", 10))

    def getSharpenMaxPixels(self) -> int:
        """Get largest pixel count that is still sharpened."""
        return int(self.get("s2_enhancement.sharpenMaxPixels", 2000000))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S3 Normalization Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getTargetWidth(self) -> int:
        """Get recognition model input width."""
        return int(self.get("s3_normalization.targetWidth", 320))

    def getTargetHeight(self) -> int:
        """Get recognition model input height."""
        return int(self.get("s3_normalization.targetHeight", 48))

    def getNormalizationScheme(self) -> str:
        """Get normalization scheme: "fixed" or "meanStd"."""
        return self.get("s3_normalization.scheme", "fixed")

    def getNormalizationMean(self) -> List[float]:
        """Get per-channel mean for the meanStd scheme."""
        return self.get("s3_normalization.mean", [0.485, 0.456, 0.406])

    def getNormalizationStd(self) -> List[float]:
        """Get per-channel std for the meanStd scheme."""
        return self.get("s3_normalization.std", [0.229, 0.224, 0.225])

    def getDetMaxSideLen(self) -> int:
        """Get longest side for detector tensors."""
        return int(self.get("s3_normalization.detMaxSideLen", 960))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Backend Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getBackendsConfig(self) -> Dict[str, Any]:
        """Get the backends section (layout, orientation, textlineOrientation, rectify)."""
        return self.getServiceConfig("backends")

"""
Services Interfaces Package.

Exports all service interfaces for the OCR preprocessing pipeline.
"""

from services.interfaces.base_service_interface import (
    IBaseService,
    BaseService
)

from services.interfaces.config_service_interface import IConfigService

from services.interfaces.preprocessing_service_interface import (
    PreprocessingServiceResult,
    IPreprocessingService
)

from services.interfaces.enhancement_service_interface import (
    EnhancementServiceResult,
    IEnhancementService
)

from services.interfaces.normalization_service_interface import (
    NormalizationServiceResult,
    INormalizationService
)


__all__ = [
    # Base
    "IBaseService",
    "BaseService",
    # Config
    "IConfigService",
    # Step 1: Preprocessing
    "PreprocessingServiceResult",
    "IPreprocessingService",
    # Step 2: Enhancement
    "EnhancementServiceResult",
    "IEnhancementService",
    # Step 3: Normalization
    "NormalizationServiceResult",
    "INormalizationService",
]

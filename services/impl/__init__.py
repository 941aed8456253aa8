"""
Services Implementation Package.

Exports all service implementations for the OCR preprocessing pipeline.
"""

from services.impl.config_service import ConfigService
from services.impl.s1_preprocessing_service import S1PreprocessingService
from services.impl.s2_enhancement_service import S2EnhancementService
from services.impl.s3_normalization_service import S3NormalizationService


__all__ = [
    "ConfigService",
    "S1PreprocessingService",
    "S2EnhancementService",
    "S3NormalizationService",
]

# Services module for the OCR preprocessing pipeline
# Contains the staged pipeline services

# Pipeline services are in services/impl/
# Import them directly from there:
# from services.impl.s1_preprocessing_service import S1PreprocessingService
# from services.impl.s2_enhancement_service import S2EnhancementService
# etc.

__all__ = []

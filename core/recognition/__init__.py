"""
Recognition Package

Decoders for recognition and detection model outputs.
"""

from core.recognition.output_decoder import decodeCtc, decodeProbabilityMap


__all__ = [
    'decodeCtc',
    'decodeProbabilityMap',
]

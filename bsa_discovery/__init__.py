"""
BSA Discovery Questionnaire - simulated discovery wizard backend.

Three-step wizard (project configuration, topic areas and documents,
questionnaire generation) with simulated uploads and exports.
"""

__version__ = "1.0.0"

"""Models package"""
from .survey import (
    QuestionRequest,
    BulkDeleteRequest,
    SurveyResponseSubmitRequest,
    DEFAULT_OPTIONS
)

__all__ = [
    'QuestionRequest',
    'BulkDeleteRequest',
    'SurveyResponseSubmitRequest',
    'DEFAULT_OPTIONS'
]

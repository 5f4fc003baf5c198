"""
Unit tests for validation helpers.

Tests verify:
1. Valid data returns the parsed value
2. Invalid data raises SchemaValidationError carrying the pydantic errors
"""

import pytest

from src.schemas.curriculum import CURRICULUM_DATA_ADAPTER
from src.schemas.suggestion import SuggestionResponse
from src.utils.validation import SchemaValidationError, validate_schema, validate_with_adapter


class TestValidateSchema:

    def test_valid_data_returns_model(self) -> None:
        result = validate_schema(SuggestionResponse, {"suggestions": [{"code": "1.1.TC1a", "reason": "r"}]})
        assert isinstance(result, SuggestionResponse)
        assert result.suggestions[0].code == "1.1.TC1a"

    def test_invalid_data_raises_error(self) -> None:
        with pytest.raises(SchemaValidationError) as info:
            validate_schema(SuggestionResponse, {"suggestions": [{"reason": "no code"}]})
        assert info.value.schema_name == "SuggestionResponse"
        assert info.value.errors


class TestValidateWithAdapter:

    def test_valid(self) -> None:
        data = validate_with_adapter(CURRICULUM_DATA_ADAPTER, {"6": [{"topic": "T"}]}, "CurriculumData")
        assert data["6"][0].topic == "T"

    def test_invalid(self) -> None:
        with pytest.raises(SchemaValidationError) as info:
            validate_with_adapter(CURRICULUM_DATA_ADAPTER, {"6": "x"}, "CurriculumData")
        assert info.value.schema_name == "CurriculumData"

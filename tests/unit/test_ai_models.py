"""
Unit tests for selectable AI models.
"""
import pytest

from kidskills.config import get_settings
from kidskills.models.ai_models import (
    PREDEFINED_MODELS,
    DynamicModel,
    PredefinedModel,
    get_default_model,
    model_from_dict,
    model_to_dict,
    resolve_model,
)


class TestAIModels:
    """Test cases for model resolution."""

    @pytest.mark.unit
    def test_exactly_one_default(self):
        """The curated list has a single default model."""
        assert sum(1 for model in PREDEFINED_MODELS if model.is_default) == 1
        assert get_default_model().id == "openai/gpt-3.5-turbo"

    @pytest.mark.unit
    def test_resolve_predefined(self):
        """Known ids resolve to the curated entry."""
        model = resolve_model("anthropic/claude-3-haiku")
        assert isinstance(model, PredefinedModel)
        assert model.display_name == "Claude 3 Haiku"

    @pytest.mark.unit
    def test_resolve_dynamic(self):
        """Unknown ids become dynamic models."""
        model = resolve_model("mistralai/mistral-7b", "Mistral 7B")
        assert model == DynamicModel(id="mistralai/mistral-7b", display_name="Mistral 7B")
        assert resolve_model("x/y").display_name == "x/y"

    @pytest.mark.unit
    def test_serialization_keeps_variant(self):
        """Models survive a dict round trip with their variant intact."""
        dynamic = DynamicModel(id="google/gemma-7b", display_name="Gemma")
        assert model_to_dict(dynamic)["type"] == "dynamic"
        assert model_from_dict(model_to_dict(dynamic)) == dynamic

        predefined = resolve_model("meta-llama/llama-3-8b-instruct")
        assert model_to_dict(predefined) == {"type": "predefined", "id": predefined.id}
        assert model_from_dict(model_to_dict(predefined)) is predefined

    @pytest.mark.unit
    def test_configured_models_are_predefined(self):
        """Default and backup model ids come from settings and resolve to curated models."""
        settings = get_settings()
        assert isinstance(resolve_model(settings.DEFAULT_AI_MODEL), PredefinedModel)
        assert isinstance(resolve_model(settings.BACKUP_AI_MODEL), PredefinedModel)

"""
Selectable AI models.

A model is either one of the curated ``PredefinedModel`` entries or a
``DynamicModel`` discovered through the provider's model listing. The
variant is decided once, when the model is selected.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class PredefinedModel:
    id: str
    name: str
    description: str = ""
    is_default: bool = False

    @property
    def display_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class DynamicModel:
    id: str
    display_name: str


Model = Union[PredefinedModel, DynamicModel]

PREDEFINED_MODELS: List[PredefinedModel] = [
    PredefinedModel(
        id="openai/gpt-3.5-turbo",
        name="GPT-3.5 Turbo",
        description="Fast and reliable for most question types",
        is_default=True,
    ),
    PredefinedModel(
        id="anthropic/claude-3-haiku",
        name="Claude 3 Haiku",
        description="Quick responses with careful wording",
    ),
    PredefinedModel(
        id="meta-llama/llama-3-8b-instruct",
        name="Llama 3 8B Instruct",
        description="Open model, good for simple questions",
    ),
]


def get_predefined_model(model_id: str) -> Optional[PredefinedModel]:
    return next((model for model in PREDEFINED_MODELS if model.id == model_id), None)


def get_default_model() -> PredefinedModel:
    return next(model for model in PREDEFINED_MODELS if model.is_default)


def resolve_model(model_id: str, display_name: Optional[str] = None) -> Model:
    """Resolve a model identifier to its variant."""
    predefined = get_predefined_model(model_id)
    if predefined:
        return predefined
    return DynamicModel(id=model_id, display_name=display_name or model_id)


def model_to_dict(model: Model) -> Dict[str, Any]:
    if isinstance(model, PredefinedModel):
        return {"type": "predefined", "id": model.id}
    return {"type": "dynamic", "id": model.id, "display_name": model.display_name}


def model_from_dict(data: Dict[str, Any]) -> Model:
    if data.get("type") == "dynamic":
        return DynamicModel(id=data["id"], display_name=data.get("display_name") or data["id"])
    return resolve_model(data["id"])

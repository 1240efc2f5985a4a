"""
Provider Types and Data Models

Defines enums and Pydantic models for the translation provider layer.
"""
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ApiProtocol(str, Enum):
    """Supported wire protocol families"""
    OPENAI = "openai"           # Chat-completions style (OpenAI, llama.cpp, compatible servers)
    ANTHROPIC = "anthropic"     # Typed content-block events
    GEMINI = "gemini"           # Generative-content style
    OLLAMA = "ollama"           # Newline-delimited JSON chat


class ModelInfo(BaseModel):
    """One entry of a model listing."""
    value: str = Field(..., description="Model ID sent to the provider")
    label: str = Field(..., description="Display name")


class ProviderDefinition(BaseModel):
    """
    Built-in provider definition.

    Describes endpoint defaults and credential requirements of one provider id.
    The protocol selects the adapter class.
    """
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    protocol: ApiProtocol = Field(default=ApiProtocol.OPENAI, description="Wire protocol family")
    base_url: str = Field(default="", description="Default API base URL")
    url_suffix: str = Field(default="", description="Path inserted between base URL and endpoint")
    default_model: str = Field(default="", description="Model used when the config names none")
    requires_api_key: bool = Field(default=True, description="Fail before I/O when no API key is set")
    requires_base_url: bool = Field(default=False, description="Fail before I/O when no base URL is set")
    inline_thinking: bool = Field(
        default=False,
        description="Separate <think>-style markup from content (protocol has no reasoning field)",
    )
    model_include: List[str] = Field(default_factory=list, description="Listed model ids must contain one of these")
    model_exclude: List[str] = Field(default_factory=list, description="Listed model ids must contain none of these")
    model_sort_desc: bool = Field(default=False, description="Sort listed models descending by id")
    default_models: List[ModelInfo] = Field(
        default_factory=list,
        description="Static fallback model list",
    )


class ProviderConfig(BaseModel):
    """
    Per-request provider configuration.

    Owned by the caller and borrowed by an adapter for the duration of one call.
    """
    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = Field(default=None, description="Secret passed through to the provider")
    base_url: Optional[str] = Field(default=None, description="Override of the provider base URL")
    model: str = Field(default="", description="Model ID")
    sampling_params: Dict[str, Union[int, float]] = Field(
        default_factory=dict,
        description="Sampling parameters (temperature, top_p, top_k, max_tokens, thinking_budget)",
    )


class TranslationRequest(BaseModel):
    """One text to translate with the prompts that drive it."""
    model_config = ConfigDict(frozen=True)

    source_text: str
    source_lang: str = "auto"
    target_lang: str = "en"
    system_prompt: str = ""
    user_prompt_template: str = "{text}"


class ContentDelta(BaseModel):
    """Incremental visible text."""
    model_config = ConfigDict(frozen=True)

    type: Literal["content"] = "content"
    text: str


class ReasoningDelta(BaseModel):
    """Incremental reasoning/thinking text."""
    model_config = ConfigDict(frozen=True)

    type: Literal["reasoning"] = "reasoning"
    text: str


class Done(BaseModel):
    """Logical end of stream."""
    model_config = ConfigDict(frozen=True)

    type: Literal["done"] = "done"


class ErrorEvent(BaseModel):
    """Error reported inside the stream by the provider."""
    model_config = ConfigDict(frozen=True)

    type: Literal["error"] = "error"
    message: str


StreamEvent = Annotated[
    Union[ContentDelta, ReasoningDelta, Done, ErrorEvent],
    Field(discriminator="type"),
]

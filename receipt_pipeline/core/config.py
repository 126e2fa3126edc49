from functools import lru_cache
import json
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_list_value(value: str) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except ValueError:
            pass
        return [item.strip() for item in raw.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


def _parse_models_value(value: str) -> dict[str, list[str]]:
    """Parse ``AI_ALLOWED_MODELS``.

    Accepts JSON (``{"claude": ["m1", "m2"]}``) or the compact
    ``provider:model1|model2;provider2:model3`` form.
    """
    raw = (value or "").strip()
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
        if isinstance(parsed, dict):
            return {
                str(k).strip().lower(): _parse_list_value(v if isinstance(v, list) else str(v))
                for k, v in parsed.items()
            }
    except ValueError:
        pass
    models: dict[str, list[str]] = {}
    for chunk in raw.split(";"):
        if ":" not in chunk:
            continue
        name, _, rest = chunk.partition(":")
        items = [m.strip() for m in rest.split("|") if m.strip()]
        if name.strip() and items:
            models[name.strip().lower()] = items
    return models


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        validate_by_name=True,
        populate_by_name=True,
    )

    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = Field(default=False)

    enable_receipt_extraction: bool = Field(
        default=True,
        validation_alias=AliasChoices("ENABLE_RECEIPT_EXTRACTION"),
    )
    enable_ai_receipt_extraction: bool = Field(
        default=False,
        validation_alias=AliasChoices("ENABLE_AI_RECEIPT_EXTRACTION", "ENABLE_AI_RECEIPTS"),
    )

    # "provider" prompts an LLM directly, "remote" calls the OCR analysis backend.
    ai_receipt_backend: str = Field(
        default="provider",
        validation_alias=AliasChoices("AI_RECEIPT_BACKEND"),
    )
    ai_receipt_provider: str = Field(
        default="mock",
        validation_alias=AliasChoices("AI_RECEIPT_PROVIDER"),
    )
    ai_receipt_model: str = Field(
        default="",
        validation_alias=AliasChoices("AI_RECEIPT_MODEL"),
    )
    ai_receipt_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices("AI_RECEIPT_TIMEOUT_SECONDS"),
    )
    receipt_ai_backend_url: str = Field(
        default="http://localhost:5000",
        validation_alias=AliasChoices("RECEIPT_AI_BACKEND_URL", "VITE_BACKEND_URL"),
    )
    receipt_max_input_chars: int = Field(
        default=4000,
        validation_alias=AliasChoices("RECEIPT_MAX_INPUT_CHARS"),
    )

    ai_allowed_providers_raw: str = Field(
        default="mock,claude,openai",
        validation_alias=AliasChoices("AI_ALLOWED_PROVIDERS"),
    )
    ai_allowed_models_raw: str = Field(
        default="",
        validation_alias=AliasChoices("AI_ALLOWED_MODELS"),
    )
    enable_ai_overrides: bool = Field(
        default=False,
        validation_alias=AliasChoices("ENABLE_AI_OVERRIDES"),
    )
    ai_temperature: float = Field(
        default=0.1,
        validation_alias=AliasChoices("AI_TEMPERATURE"),
    )
    ai_max_tokens: int = Field(
        default=512,
        validation_alias=AliasChoices("AI_MAX_TOKENS"),
    )
    ai_debug_store_raw: bool = Field(
        default=False,
        validation_alias=AliasChoices("AI_DEBUG_STORE_RAW"),
    )

    anthropic_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("ANTHROPIC_API_KEY"),
    )
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENAI_API_KEY"),
    )

    cors_allow_origins: list[str] = Field(default_factory=list)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_csv(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            if value.strip() == "":
                return []
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("ai_receipt_backend", "ai_receipt_provider", mode="before")
    @classmethod
    def _lower(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def ai_allowed_providers(self) -> list[str]:
        return [p.lower() for p in _parse_list_value(self.ai_allowed_providers_raw)]

    @property
    def ai_allowed_models(self) -> dict[str, list[str]]:
        return _parse_models_value(self.ai_allowed_models_raw)


@lru_cache
def get_settings() -> Settings:
    return Settings()

"""
Request Validator - Pre-mutation validation of /init and /chat payloads

Checks every field before any session state or key material is touched
and reports all violations at once.

The model access token is read from GEMINI_API_KEY. OPENAI_API_KEY is
accepted as an alias so clients written against the earlier field name keep
working; missing-field errors always name GEMINI_API_KEY.
"""

from typing import Any, Dict, List, Optional
import logging
import math

from wallet_agent.core.config import Settings, settings as default_settings
from wallet_agent.core.exceptions import ValidationError
from wallet_agent.models.message import LLMConfig
from wallet_agent.models.session import SessionConfig

logger = logging.getLogger(__name__)

REQUIRED_INIT_FIELDS = ("GEMINI_API_KEY", "RPC_URL")

# Accepted names for each required field, in lookup order
FIELD_ALIASES = {
    "GEMINI_API_KEY": ("GEMINI_API_KEY", "OPENAI_API_KEY"),
    "RPC_URL": ("RPC_URL",),
}

TEMPERATURE_ERROR = "Temperature must be a number between 0 and 1"
MODEL_NAME_ERROR = "modelName must be a non-empty string"
LLM_ERROR = "llm must be an object"
BODY_ERROR = "Request body must be a JSON object"
MESSAGE_ERROR = "Message is required"


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _lookup(body: Dict[str, Any], field: str) -> Optional[str]:
    for name in FIELD_ALIASES[field]:
        if _is_present(body.get(name)):
            return body[name]
    return None


def _check_temperature(value: Any) -> bool:
    # bool is an int subclass but not a temperature
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if not math.isfinite(value):
        return False
    return 0 <= value <= 1


def validate_init_request(
    body: Any,
    settings: Optional[Settings] = None
) -> SessionConfig:
    """
    Validate an /init payload.

    Args:
        body: Decoded JSON request body
        settings: Source of llm defaults (module settings if None)

    Returns:
        SessionConfig ready for initialization

    Raises:
        ValidationError: listing every missing field and invalid value

    Usage:
        config = validate_init_request({
            "GEMINI_API_KEY": "key",
            "RPC_URL": "https://api.devnet.solana.com",
            "llm": {"modelName": "gemini-2.5-flash", "temperature": 0.2}
        })
    """
    settings = settings or default_settings

    if not isinstance(body, dict):
        raise ValidationError([BODY_ERROR])

    errors: List[str] = []
    values = {name: _lookup(body, name) for name in REQUIRED_INIT_FIELDS}
    missing = [name for name in REQUIRED_INIT_FIELDS if values[name] is None]
    if missing:
        errors.append(f"Missing required fields: {', '.join(missing)}")

    model_name = settings.llm_model
    temperature = settings.llm_temperature
    llm = body.get("llm")
    if llm is not None:
        if not isinstance(llm, dict):
            errors.append(LLM_ERROR)
        else:
            if "modelName" in llm:
                if _is_present(llm["modelName"]):
                    model_name = llm["modelName"].strip()
                else:
                    errors.append(MODEL_NAME_ERROR)
            if "temperature" in llm:
                if _check_temperature(llm["temperature"]):
                    temperature = float(llm["temperature"])
                else:
                    errors.append(TEMPERATURE_ERROR)

    if errors:
        logger.info(f"Rejected /init payload: {errors}")
        raise ValidationError(errors, missing_fields=missing)

    return SessionConfig(
        llm=LLMConfig(modelName=model_name, temperature=temperature),
        model_api_key=values["GEMINI_API_KEY"],
        rpc_url=values["RPC_URL"].strip(),
    )


def validate_chat_request(body: Any) -> str:
    """
    Validate a /chat payload and return the message text.

    Raises:
        ValidationError: when the message is absent, not a string, or blank
    """
    if not isinstance(body, dict):
        raise ValidationError([BODY_ERROR])

    message = body.get("message")
    if not _is_present(message):
        raise ValidationError([MESSAGE_ERROR])
    return message


__all__ = [
    "validate_init_request",
    "validate_chat_request",
    "REQUIRED_INIT_FIELDS",
    "FIELD_ALIASES",
    "TEMPERATURE_ERROR",
    "MESSAGE_ERROR",
]

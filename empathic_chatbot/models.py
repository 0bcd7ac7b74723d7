"""Pydantic models shared across application layers."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "model"]
ErrorKind = Literal[
    "invalid_input",
    "missing_credential",
    "provider_error",
    "empty_result",
    "abnormal_finish",
    "internal_error",
]


class Message(BaseModel):
    """One entry of a chat transcript."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class InferenceRequest(BaseModel):
    """Parameters of one outbound generateContent call."""

    user_text: str
    system_instruction: str
    max_output_tokens: int
    temperature: float

    def to_payload(self) -> dict:
        """Render the request in Gemini's wire shape."""

        return {
            "contents": [{"role": "user", "parts": [{"text": self.user_text}]}],
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
            "generationConfig": {
                "maxOutputTokens": self.max_output_tokens,
                "temperature": self.temperature,
            },
        }


class Usage(BaseModel):
    """Token counters reported by the provider."""

    model_config = ConfigDict(populate_by_name=True)

    prompt_tokens: int = Field(default=0, alias="promptTokens")
    candidates_tokens: int = Field(default=0, alias="candidatesTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")


class InferenceSuccess(BaseModel):
    kind: Literal["success"] = "success"
    text: str
    usage: Usage = Field(default_factory=Usage)


class InferenceFailure(BaseModel):
    kind: Literal["failure"] = "failure"
    error: ErrorKind
    message: str
    status_code: int = 500


InferenceResult = Annotated[
    Union[InferenceSuccess, InferenceFailure], Field(discriminator="kind")
]


class MessageIn(BaseModel):
    """Incoming relay payload."""

    text: str = Field(min_length=1, description="User supplied text prompt.")


class RelayResponse(BaseModel):
    """Successful relay reply."""

    response: str
    usage: Usage = Field(default_factory=Usage)


class ErrorResponse(BaseModel):
    """Error body returned to relay clients."""

    error: str

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

Language = Literal["javascript", "typescript"]

DEFAULT_CODE = "console.log('Hello from the playground!');"
DEFAULT_LANGUAGE: Language = "javascript"


TBaseSchema = TypeVar("TBaseSchema", bound="BaseSchema")


class BaseSchema(BaseModel):
    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()

    @classmethod
    def from_json(cls: type[TBaseSchema], data: str) -> TBaseSchema:
        return cls.model_validate_json(data)

    @classmethod
    def from_dict(cls: type[TBaseSchema], data: Mapping[str, object]) -> TBaseSchema:
        return cls.model_validate(data)


class PlaygroundState(BaseSchema):
    model_config = ConfigDict(frozen=True)

    code: str = DEFAULT_CODE
    language: Language = DEFAULT_LANGUAGE


class Example(BaseSchema):
    model_config = ConfigDict(frozen=True)

    title: str
    language: Language
    code: str


class _SandboxMessage(BaseSchema):
    model_config = ConfigDict(frozen=True, extra="ignore")

    payload: str
    generation: int = Field(ge=0)
    token: str


class LogMessage(_SandboxMessage):
    type: Literal["log"]


class ErrorMessage(_SandboxMessage):
    type: Literal["error"]


SandboxMessage = Annotated[Union[LogMessage, ErrorMessage], Field(discriminator="type")]

sandbox_message_adapter: TypeAdapter[LogMessage | ErrorMessage] = TypeAdapter(SandboxMessage)

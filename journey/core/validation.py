from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Optional, Protocol, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class ValidationResult(Generic[ModelT]):
    ok: bool
    value: Optional[ModelT] = None
    violations: List[str] = field(default_factory=list)


class InputValidator(Protocol):
    def validate(
        self, schema: Type[ModelT], data: Union[Mapping[str, Any], BaseModel]
    ) -> ValidationResult[ModelT]: ...


def format_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


class PydanticValidator:
    """Validates request payloads against the declared pydantic schemas."""

    def validate(
        self, schema: Type[ModelT], data: Union[Mapping[str, Any], BaseModel]
    ) -> ValidationResult[ModelT]:
        if isinstance(data, BaseModel):
            data = data.model_dump()
        if not isinstance(data, Mapping):
            return ValidationResult(ok=False, violations=["body: expected a JSON object"])

        try:
            value = schema.model_validate(dict(data))
        except ValidationError as e:
            return ValidationResult(
                ok=False,
                violations=[format_error(err) for err in e.errors()],
            )
        return ValidationResult(ok=True, value=value)

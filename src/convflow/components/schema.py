"""Pydantic schemas describing generic components."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..errors import UsageError

PRIMARY_KEY = "_primary"


class ComponentType(str, Enum):
    NULL = "Null"
    BOOL = "Bool"
    NUMBER = "Number"
    STRING = "String"
    ARRAY = "Array"
    OBJECT = "Object"


class Rule(BaseModel):
    """One step of a value rule: fetch another field and/or use a literal value."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    fetch: Optional[str] = Field(default=None, alias="$_get")
    value: Any = Field(default=None, alias="$_set")

    @property
    def has_value(self) -> bool:
        return "value" in self.model_fields_set

    @model_validator(mode="after")
    def check_not_empty(self) -> "Rule":
        if self.fetch is None and not self.has_value:
            raise ValueError("a rule needs '$_get' or '$_set'")
        return self


class FieldSpec(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: ComponentType
    required: bool = False
    default_value: List[Rule] = Field(default_factory=list)
    add_value: List[Rule] = Field(default_factory=list)


class ComponentSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    primary: Optional[str] = Field(default=None, alias=PRIMARY_KEY)
    specs: Dict[str, FieldSpec] = Field(default_factory=dict)

    @classmethod
    def parse(cls, header: Mapping[str, Any]) -> "ComponentSchema":
        """Validate a raw component header such as the JSON a bot ships."""
        data = dict(header)
        primary = data.pop(PRIMARY_KEY, None)
        try:
            return cls.model_validate({PRIMARY_KEY: primary, "specs": data})
        except ValidationError as exc:
            raise UsageError(f"invalid component schema: {exc}") from exc

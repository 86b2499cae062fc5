"""
User-related Pydantic models
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

# Range of the INTEGER columns (id, age)
INT32_MIN = -2147483648
INT32_MAX = 2147483647


class UserCreateRequest(BaseModel):
    # Presence of name/email is checked by the route so it can answer with a
    # single "required" message instead of a validation error list
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=100)
    age: Optional[StrictInt] = Field(None, ge=INT32_MIN, le=INT32_MAX)


class UserUpdateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=1, max_length=100)
    age: Optional[StrictInt] = Field(None, ge=INT32_MIN, le=INT32_MAX)

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for field_name in ("name", "email"):
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null")
        return self

    def supplied_fields(self) -> Dict[str, Any]:
        """Fields whose keys were present in the request body, in column order"""
        return self.model_dump(exclude_unset=True)

from typing import Literal, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Severity = Literal["Critical", "Major", "Minor", "Info"]

# Most to least severe.
SEVERITIES: Tuple[str, ...] = ("Critical", "Major", "Minor", "Info")

ALL = "All"
FILTER_OPTIONS: Tuple[str, ...] = (ALL,) + SEVERITIES


class Finding(BaseModel):
    """One issue reported by the reviewer.

    ``id`` is the position of the finding in the response it came from and is
    the only handle the UI uses to address it. ``resolved`` never travels to or
    from the provider.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = 0
    location: str = Field(..., validation_alias=AliasChoices("line", "location"))
    severity: Severity
    description: str = Field(..., min_length=1)
    suggestion: str = Field(..., min_length=1)
    resolved: bool = False

    @field_validator("location", mode="before")
    @classmethod
    def _line_to_str(cls, value):
        # the provider may send 12 instead of "12"
        if isinstance(value, bool):
            raise ValueError("line must be a number or a string")
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, (int, float)):
            return str(value)
        return value

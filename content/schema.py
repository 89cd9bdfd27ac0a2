"""Declarative schema for event records, expressed as a Django form."""
from __future__ import annotations

import re
from typing import Any

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator

from .models import EventRecord

UUID_V4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}\Z")

_DELTA_UNIT = r"(?:days?|hours?|weeks?|months?|years?)"
DELTA_RE = re.compile(rf"^-?\d+\s+{_DELTA_UNIT}(?:\s+\d+\s+{_DELTA_UNIT})*\Z")

IMAGE_PATH_RE = re.compile(r"^/images/.+\.(?:jpg|jpeg|png|gif|webp)\Z")

TAG_RE = re.compile(r"^(?:episode|season|character|location|theme|time|marker):\s*.+\Z")

SUMMARY_MAX_LENGTH = 200


class StrictCharField(forms.CharField):
    """CharField that refuses non-string JSON values instead of coercing them."""

    def to_python(self, value: Any) -> str:
        if value not in self.empty_values and not isinstance(value, str):
            raise ValidationError("Must be a string.", code="invalid")
        return super().to_python(value)


class DeltaField(forms.Field):
    """Optional delta expression; ``null`` and a missing key both mean unknown."""

    default_validators = [RegexValidator(DELTA_RE, "Invalid delta format")]

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("required", False)
        super().__init__(**kwargs)

    def to_python(self, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValidationError("Delta must be a string or null.", code="invalid")
        return value

    def validate(self, value: str | None) -> None:
        super().validate(value)
        # empty strings skip the regex validator
        if value == "":
            raise ValidationError("Invalid delta format", code="invalid")


class PatternListField(forms.Field):
    """A JSON list of strings, each of which must match *pattern*."""

    def __init__(self, *, pattern: re.Pattern[str], item_message: str, **kwargs: Any) -> None:
        self.pattern = pattern
        self.item_message = item_message
        super().__init__(**kwargs)

    def clean(self, value: Any) -> list[str]:
        if value is None:
            if self.required:
                raise ValidationError(self.error_messages["required"], code="required")
            return []
        if not isinstance(value, list):
            raise ValidationError("Expected a list of strings.", code="invalid")

        errors: list[ValidationError] = []
        for position, item in enumerate(value):
            if not isinstance(item, str) or not self.pattern.match(item):
                errors.append(
                    ValidationError(
                        "%(message)s at position %(position)s: %(value)r",
                        code="invalid_item",
                        params={"message": self.item_message, "position": position, "value": item},
                    )
                )
        if errors:
            raise ValidationError(errors)
        return list(value)


class EventForm(forms.Form):
    id = StrictCharField(
        strip=False,
        validators=[RegexValidator(UUID_V4_RE, "Must be a valid UUID v4")],
    )
    delta = DeltaField()
    summary = StrictCharField(
        strip=False,
        min_length=1,
        max_length=SUMMARY_MAX_LENGTH,
        error_messages={
            "required": "Summary must not be empty",
            "max_length": f"Summary must be {SUMMARY_MAX_LENGTH} characters or less",
        },
    )
    description = StrictCharField(
        strip=False,
        error_messages={"required": "Description must not be empty"},
    )
    images = PatternListField(pattern=IMAGE_PATH_RE, item_message="Invalid image path", required=False)
    tags = PatternListField(pattern=TAG_RE, item_message="Invalid tag format")


def clean_event(record: Any) -> tuple[EventRecord | None, dict[str, list[str]]]:
    """Validate one raw record.

    Returns ``(event, {})`` on success or ``(None, errors)`` where *errors*
    maps field names to messages.
    """
    if not isinstance(record, dict):
        return None, {"__all__": ["Event must be a JSON object."]}

    form = EventForm(data=record)
    if not form.is_valid():
        return None, {field: list(messages) for field, messages in form.errors.items()}

    data = form.cleaned_data
    event: EventRecord = {
        "id": data["id"],
        "delta": data["delta"],
        "summary": data["summary"],
        "description": data["description"],
        "images": data["images"],
        "tags": data["tags"],
    }
    return event, {}

"""Render module test fixtures."""

from __future__ import annotations

import pytest

from src.fields import (
    CheckboxField,
    ChoiceField,
    DateField,
    FileField,
    LongTextField,
    SectionField,
    ShortTextField,
)
from src.schema import FormSchema


@pytest.fixture
def every_type_schema() -> FormSchema:
    """One field of each catalog type, in palette order.

    Returns:
        A schema whose fields have ids equal to their lowercase type tag.
    """
    return FormSchema(
        [
            SectionField(id="section", header="Welcome", description="Read first"),
            ShortTextField(id="short_text", header="Name", required=True),
            LongTextField(id="long_text", header="Bio", placeholder="Tell us"),
            ChoiceField(id="choice", header="Meal", choices=["Veg", ""], required=True),
            CheckboxField(id="checkbox", header="Tags", choices=["", "b"]),
            FileField(id="file", header="Photo"),
            DateField(id="date", header="Arrival"),
        ],
        form_id="form-1",
    )


@pytest.fixture
def blank_fields_schema() -> FormSchema:
    """Fields with nothing filled in, to exercise fallback texts.

    Returns:
        A schema with an empty section and an empty short text field.
    """
    return FormSchema([SectionField(id="s"), ShortTextField(id="t")])

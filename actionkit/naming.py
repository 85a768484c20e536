"""Structural naming defaults derived from class names."""

import re

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake(value: str) -> str:
    """``ResetPassword`` -> ``reset_password``."""
    value = _WORD_BOUNDARY.sub("_", value.strip())
    value = re.sub(r"[\s\-]+", "_", value)
    return re.sub(r"_+", "_", value).lower().strip("_")


def slug(value: str) -> str:
    """``reset_password`` or ``Reset Password`` -> ``reset-password``."""
    value = re.sub(r"[^\w\s-]", "", value.lower())
    return re.sub(r"[\s_-]+", "-", value).strip("-")


def headline(value: str) -> str:
    """``ResetPassword`` or ``reset_password`` -> ``Reset Password``."""
    return " ".join(word.capitalize() for word in snake(value).split("_") if word)


def class_slug(obj: object) -> str:
    """Identifier default for an instance: slugified snake-case class name."""
    return slug(snake(type(obj).__name__))


def class_headline(obj: object) -> str:
    """Display-name default for an instance: title-cased class name words."""
    return headline(type(obj).__name__)


def field_label(name: str) -> str:
    """``password_confirmation`` -> ``Password confirmation``."""
    label = name.replace("_", " ")
    return label[:1].upper() + label[1:]

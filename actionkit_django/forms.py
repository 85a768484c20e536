"""Render UI field descriptors as Django form fields."""

from typing import Any, Callable, Dict, List

from django import forms

from actionkit.schema.fields import FieldDescriptor


def _common(descriptor: FieldDescriptor) -> Dict[str, Any]:
    return {
        "label": descriptor.label,
        "help_text": descriptor.help_text,
        "required": descriptor.required,
        "initial": descriptor.default,
    }


def _text(descriptor: FieldDescriptor) -> forms.Field:
    return forms.CharField(**_common(descriptor))


def _textarea(descriptor: FieldDescriptor) -> forms.Field:
    return forms.CharField(widget=forms.Textarea, **_common(descriptor))


def _password(descriptor: FieldDescriptor) -> forms.Field:
    return forms.CharField(widget=forms.PasswordInput, **_common(descriptor))


def _color(descriptor: FieldDescriptor) -> forms.Field:
    return forms.CharField(widget=forms.TextInput(attrs={"type": "color"}), **_common(descriptor))


def _number(descriptor: FieldDescriptor) -> forms.Field:
    if descriptor.step:
        return forms.DecimalField(
            decimal_places=2,
            widget=forms.NumberInput(attrs={"step": descriptor.step}),
            **_common(descriptor),
        )
    return forms.IntegerField(**_common(descriptor))


def _boolean(descriptor: FieldDescriptor) -> forms.Field:
    # An unchecked box submits nothing, so it can never be required
    options = _common(descriptor)
    options["required"] = False
    return forms.BooleanField(**options)


def _date(descriptor: FieldDescriptor) -> forms.Field:
    return forms.DateField(widget=forms.DateInput(attrs={"type": "date"}), **_common(descriptor))


def _datetime(descriptor: FieldDescriptor) -> forms.Field:
    return forms.DateTimeField(
        widget=forms.DateTimeInput(attrs={"type": "datetime-local"}),
        **_common(descriptor),
    )


def _code(descriptor: FieldDescriptor) -> forms.Field:
    if descriptor.language == "json":
        return forms.JSONField(**_common(descriptor))
    return forms.CharField(widget=forms.Textarea(attrs={"class": "vLargeTextField"}), **_common(descriptor))


def _select(descriptor: FieldDescriptor) -> forms.Field:
    choices = [(value, label) for value, label in descriptor.options.items()]
    if descriptor.multiple:
        return forms.MultipleChoiceField(choices=choices, **_common(descriptor))
    if not descriptor.required:
        choices = [("", "---------")] + choices
    return forms.ChoiceField(choices=choices, **_common(descriptor))


FIELD_BUILDERS: Dict[str, Callable[[FieldDescriptor], forms.Field]] = {
    "text": _text,
    "textarea": _textarea,
    "password": _password,
    "color": _color,
    "email": lambda d: forms.EmailField(**_common(d)),
    "url": lambda d: forms.URLField(**_common(d)),
    "number": _number,
    "boolean": _boolean,
    "date": _date,
    "datetime": _datetime,
    "file": lambda d: forms.FileField(**_common(d)),
    "image": lambda d: forms.ImageField(**_common(d)),
    "code": _code,
    "keyvalue": lambda d: forms.JSONField(**_common(d)),
    "select": _select,
}


def form_field(descriptor: FieldDescriptor) -> forms.Field:
    """Django form field for one descriptor (text input when the kind is unknown)."""
    return FIELD_BUILDERS.get(descriptor.kind, _text)(descriptor)


def build_form_class(descriptors: List[FieldDescriptor], name: str = "ActionForm") -> type:
    """Create a ``forms.Form`` subclass with one field per descriptor."""
    attrs = {descriptor.name: form_field(descriptor) for descriptor in descriptors}
    return type(name, (forms.Form,), attrs)


def submitted_values(form_class: type, data, files=None) -> Dict[str, Any]:
    """Raw submitted values for the form's fields.

    Values are read from the request data as-is; the action's own rules do
    the validation. Multiple-choice fields keep every selected value.
    """
    values: Dict[str, Any] = {}
    files = files or {}
    for name, field in form_class.base_fields.items():
        if isinstance(field, forms.MultipleChoiceField):
            if name in data:
                values[name] = data.getlist(name) if hasattr(data, "getlist") else data[name]
        elif isinstance(field, forms.BooleanField):
            values[name] = name in data and data.get(name) not in ("", "0", "false", "off")
        elif isinstance(field, forms.FileField):
            if name in files:
                values[name] = files[name]
        elif name in data:
            values[name] = data.get(name)
    return values

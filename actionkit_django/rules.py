"""Validation rules backed by the Django ORM.

- ``exists:app_label.Model,field`` - every given value matches a row
- ``unique:app_label.Model,field`` - no row holds the value yet

The column defaults to the attribute name.
"""

from typing import Optional, Tuple

from django.apps import apps
from django.db import models

from actionkit.actions.validation import RuleContext, ValidationEngine
from actionkit.exceptions import ConfigurationDefect


def _model_and_column(ctx: RuleContext) -> Tuple[type, str]:
    if not ctx.args or not ctx.args[0]:
        raise ConfigurationDefect(f"Rule on '{ctx.attribute}' needs a model label (app_label.Model)")
    try:
        model = apps.get_model(ctx.args[0])
    except (LookupError, ValueError) as e:
        raise ConfigurationDefect(f"Unknown model '{ctx.args[0]}' in rule on '{ctx.attribute}'") from e
    column = ctx.args[1] if len(ctx.args) > 1 and ctx.args[1] else ctx.attribute
    return model, column


def _normalize(value):
    if isinstance(value, models.Model):
        return value.pk
    return value


def rule_exists(ctx: RuleContext) -> Optional[str]:
    model, column = _model_and_column(ctx)
    values = ctx.value if isinstance(ctx.value, (list, tuple)) else [ctx.value]
    values = {_normalize(value) for value in values}
    found = model._default_manager.filter(**{f"{column}__in": values}).values_list(column, flat=True).distinct()
    if len(set(found)) < len(values):
        return f"The selected {ctx.label} is invalid."
    return None


def rule_unique(ctx: RuleContext) -> Optional[str]:
    model, column = _model_and_column(ctx)
    if model._default_manager.filter(**{column: _normalize(ctx.value)}).exists():
        return f"The {ctx.label} has already been taken."
    return None


def register_rules(engine: ValidationEngine) -> None:
    """Add the ORM-backed rules to ``engine``."""
    engine.extend("exists", rule_exists)
    engine.extend("unique", rule_unique)

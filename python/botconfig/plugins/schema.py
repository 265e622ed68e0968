"""
Validation of a plugin's entry config against the schema the plugin declares.

A plugin's ``config_schema`` may be:
    - an object (or dict) exposing ``validate(value)`` that returns
      ``{'ok': bool, 'errors': [...]}``
    - a pydantic model class
"""

from typing import Any, List, Tuple

from pydantic import BaseModel, ValidationError


def _format_pydantic_errors(exc: ValidationError) -> List[str]:
    errors = []
    for err in exc.errors():
        path = '.'.join(str(part) for part in err.get('loc', ()))
        errors.append(f"{path}: {err['msg']}" if path else err['msg'])
    return errors


def _read_result(result) -> Tuple[bool, List[str]]:
    if isinstance(result, dict):
        ok = bool(result.get('ok'))
        errors = result.get('errors') or []
    else:
        ok = bool(getattr(result, 'ok', False))
        errors = getattr(result, 'errors', None) or []
    if isinstance(errors, str):
        errors = [errors]
    return ok, [str(error) for error in errors]


def validate_plugin_config(schema: Any, value: Any) -> Tuple[bool, List[str]]:
    """Return (ok, errors). A plugin without a schema accepts any config."""
    if schema is None:
        return True, []
    if value is None:
        value = {}

    if isinstance(schema, type) and issubclass(schema, BaseModel):
        try:
            schema.model_validate(value)
        except ValidationError as e:
            return False, _format_pydantic_errors(e)
        return True, []

    validate = schema.get('validate') if isinstance(schema, dict) else getattr(schema, 'validate', None)
    if not callable(validate):
        return True, []
    ok, errors = _read_result(validate(value))
    if ok:
        return True, []
    if not errors:
        errors = ['invalid config']
    return ok, errors

import enum
from enum import Enum
from inspect import isclass
from io import StringIO
import json
import typing

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import PydanticUndefined
import ruamel
from ruamel.yaml import YAML


def enum_options(enum: type[Enum]) -> list[tuple[str, typing.Any]]:
    """Returns a list of tuples containing the name and value of each enum member."""
    return [(e.name, e.value) for e in enum]


def EnumField(enum: type[Enum], default: typing.Any = PydanticUndefined, *args, **kwargs):
    """
    An extension of pydantic's `Field` that adds 'options' to the json_schema_extra field,
    containing the available options of the specified enum.
    """
    extra = kwargs.get("json_schema_extra", {})
    extra.update(dict(options=enum_options(enum)))
    kwargs["json_schema_extra"] = extra
    return Field(default, *args, **kwargs)


class KaryoModel(BaseModel):
    """
    Base class for all karyocheck models.
    By default, extra fields are forbidden, attribute docstrings are used for field descriptions,
    enum member values instead of names are used, and default values are validated.
    """

    model_config = ConfigDict(
        extra="forbid",
        use_attribute_docstrings=True,
        use_enum_values=True,
        validate_default=True,
    )


# Generating an annotated default configuration YAML from a karyocheck pydantic model:
# field descriptions become comments, enum options and required fields are marked.

INDENTATION = 2  # Indentation used for YAML


def _yaml_instance():
    yaml = YAML(typ="rt")
    yaml.indent(mapping=INDENTATION, sequence=INDENTATION * 2, offset=INDENTATION)
    return yaml


def _is_model_class(annotation, clazz: type = BaseModel) -> bool:
    """Checks whether the given annotation is a class and is a subclass of `clazz`"""
    return isclass(annotation) and issubclass(annotation, clazz)


def _annotate_model(
    config_model: type[BaseModel],
    comment_map: ruamel.yaml.CommentedMap,
    max_column: int,
    level: int = 0,
):
    for key, field in config_model.model_fields.items():
        if key not in comment_map:
            continue
        comment = [] if not field.is_required() else ["REQUIRED"]
        if field.examples:
            comment.append(f"Examples: {', '.join(map(str, field.examples))}")
        options = (field.json_schema_extra or {}).get("options", [])
        if _is_model_class(field.annotation, enum.Enum):
            options = enum_options(field.annotation)
        if options:
            comment.append(f"Options: {', '.join(repr(value) for _, value in options)}")
        if comment:
            comment_map.yaml_add_eol_comment("; ".join(comment), key, column=max_column)
        if field.description:
            comment_map.yaml_set_comment_before_after_key(
                key, indent=INDENTATION * level, before="\n" + field.description
            )
        if _is_model_class(field.annotation):
            _annotate_model(field.annotation, comment_map[key], max_column, level=level + 1)


def default_config_yaml_string(model: type[BaseModel], root_key: str | None = None) -> str:
    """Render the default configuration of ``model`` as commented YAML

    Required fields without a default are rendered as ``null``.  If ``root_key`` is given, the
    configuration is nested below that key.
    """
    placeholders = {
        name: None
        for name, field in model.model_fields.items()
        if field.is_required() and field.default is PydanticUndefined
    }
    instance = model.model_construct(_fields_set=None, **placeholders)
    yaml = _yaml_instance()
    with StringIO() as s:
        yaml.dump(json.loads(instance.model_dump_json()), stream=s)
        plain = s.getvalue()
    max_column = max(50, max(map(len, plain.splitlines())) + 2)
    cfg = yaml.load(plain)
    _annotate_model(model, cfg, max_column, level=1 if root_key else 0)
    if root_key:
        wrapped = ruamel.yaml.CommentedMap()
        wrapped[root_key] = cfg
        cfg = wrapped
    with StringIO() as out:
        yaml.dump(cfg, stream=out)
        return out.getvalue()

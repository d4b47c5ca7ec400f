import pydantic
import pydantic_core

__all__ = ("convert_errors",)


CUSTOM_TYPES = {
    "dict_type": "mapping_type",
    "model_type": "mapping_type",
    "model_attributes_type": "mapping_type",
    "dataclass_type": "mapping_type",
    "int_parsing": "int_type",
    "int_from_float": "int_type",
    "union_tag_invalid": "enum_value_out_of_range",
    "union_tag_not_found": "missing",
    "extra_forbidden": "extra_field",
}
CUSTOM_MESSAGES = {
    # https://docs.pydantic.dev/latest/errors/validation_errors/
    "extra_field": "Unknown setting",
    "missing": "Field is required",
    "enum_value_out_of_range": (
        "Input must be set to one of the following values: {expected_tags}"
    ),
    "mapping_type": "Input must be a valid mapping",
    "int_type": "Input must be a valid integer",
    "greater_than_equal": "Input must be greater than or equal to {ge}",
    "less_than_equal": "Input must be less than or equal to {le}",
}


def convert_errors(
    ex: pydantic.ValidationError,
    custom_messages: dict[str, str] = CUSTOM_MESSAGES,
    custom_types: dict[str, str] = CUSTOM_TYPES,
) -> list[pydantic_core.ErrorDetails]:
    new_errors: list[pydantic_core.ErrorDetails] = []

    for error in ex.errors(include_url=False):
        ctx = error.get("ctx")

        # 'loc': ('secret', 'prehashed', 'scheme') => ('secret', 'scheme')
        if error["loc"][1:2] in (("plaintext",), ("prehashed",)):
            error["loc"] = (error["loc"][0], *error["loc"][2:])

        if error["type"] in ("union_tag_not_found", "union_tag_invalid") and ctx:
            error["loc"] += (str(ctx["discriminator"]).replace("'", ""),)

        if custom_type := custom_types.get(error["type"]):
            error["type"] = custom_type

        if custom_message := custom_messages.get(error["type"]):
            error["msg"] = custom_message.format(**ctx) if ctx else custom_message

        if ctx:
            # never echo the context back, it may hold the rejected input
            del error["ctx"]
        error.pop("input", None)  # type: ignore[misc]

        new_errors.append(error)

    return new_errors

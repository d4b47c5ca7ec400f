from collections.abc import Mapping
from typing import Annotated, Any, Self

import annotated_types
import pydantic
import pydantic_core
from pydantic import AliasChoices, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .exc import InconsistentThresholdsError, OutOfRangeError
from .util.model import convert_errors

__all__ = ("INT_MAX", "SETTING_NAMES", "PolicyConfiguration")

INT_MAX = 2**31 - 1

# Field name -> name of the setting in the host's runtime configuration.
SETTING_NAMES = {
    "min_length": "p_policy.min_password_len",
    "min_digits": "p_policy.min_numbers",
    "min_special": "p_policy.min_special_chars",
    "min_upper": "p_policy.min_uppercase_letter",
    "min_lower": "p_policy.min_lowercase_letter",
}


def _reject_bool(value: Any) -> Any:
    # YAML true/false load as booleans, which int validation takes as 1 and 0.
    if isinstance(value, bool):
        raise pydantic_core.PydanticCustomError(
            "int_type", "Input should be a valid integer"
        )
    return value


Threshold = Annotated[
    int,
    annotated_types.Ge(1),
    annotated_types.Le(INT_MAX),
    BeforeValidator(_reject_bool),
]


def _threshold(name: str, default: int, description: str) -> Any:
    return Field(
        default=default,
        description=description,
        validation_alias=AliasChoices(name, to_camel(name), SETTING_NAMES[name]),
    )


class PolicyConfiguration(pydantic.BaseModel):
    """
    The five thresholds of the password composition policy.

    Instances are immutable. Reconfiguring means building a new instance and
    publishing it (see :class:`passpolicy.state.PolicyState`), so concurrent
    evaluations never observe a half-updated threshold set.

    Each threshold accepts three spellings: the attribute name (``min_length``), its
    camelCase form (``minLength``) and the host setting name
    (``p_policy.min_password_len``).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_length: Threshold = _threshold("min_length", 8, "Minimum password length.")
    min_digits: Threshold = _threshold(
        "min_digits", 2, "Minimum number of numeric characters."
    )
    min_special: Threshold = _threshold(
        "min_special", 2, "Minimum number of special characters."
    )
    min_upper: Threshold = _threshold(
        "min_upper", 2, "Minimum number of upper case letters."
    )
    min_lower: Threshold = _threshold(
        "min_lower", 2, "Minimum number of lower case letters."
    )

    @property
    def total_minimum(self) -> int:
        return self.min_digits + self.min_special + self.min_upper + self.min_lower

    @pydantic.model_validator(mode="after")
    def check_consistency(self) -> Self:
        # pydantic re-raises anything other than ValueError and AssertionError as is.
        if self.min_length < self.total_minimum:
            raise InconsistentThresholdsError(
                "Configuration error: sum of minimum character requirements "
                "({ctx[total]}) exceeds minimum password length ({ctx[min_length]})",
                ctx=InconsistentThresholdsError.Context(
                    total=self.total_minimum, min_length=self.min_length
                ),
            )
        return self

    @classmethod
    def load(cls, values: Mapping[str, Any]) -> Self:
        """
        Builds a configuration from a mapping of settings.

        Raises:
            OutOfRangeError: A threshold is not an integer or falls outside
                ``[1, INT_MAX]``.
            InconsistentThresholdsError: The per-class minimums exceed the minimum
                length.
        """
        try:
            return cls.model_validate(dict(values))
        except pydantic.ValidationError as ex:
            errors = convert_errors(ex)
            settings = tuple(
                str(error["loc"][0]) for error in errors if error["loc"]
            )
            raise OutOfRangeError(
                "Invalid password policy setting(s): {ctx[settings]}",
                ctx=OutOfRangeError.Context(
                    settings=settings,
                    errors=[
                        "%s: %s" % (".".join(map(str, error["loc"])), error["msg"])
                        for error in errors
                    ],
                ),
            ) from ex

    def as_settings(self) -> dict[str, int]:
        """Returns the thresholds keyed by their host setting names."""
        return {
            setting: getattr(self, field) for field, setting in SETTING_NAMES.items()
        }

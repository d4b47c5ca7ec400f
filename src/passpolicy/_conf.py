from typing import Any, Literal

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from typing_extensions import TypedDict

__all__ = ("DictionaryFailureMode", "DictionarySettings", "Settings")

DictionaryFailureMode = Literal["error", "open", "closed"]


class DictionarySettings(TypedDict, total=False):
    __pydantic_config__ = ConfigDict(  # type: ignore[misc]
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    enabled: bool
    path: str | None
    failure_mode: DictionaryFailureMode


class Settings(BaseSettings):
    """
    Runtime configuration of the password policy.

    Values come from the environment first (``PASSPOLICY_`` prefix, ``__`` as the
    nested delimiter, e.g. ``PASSPOLICY_POLICY__MIN_LENGTH=12``), then from the YAML
    configuration file.

    The ``policy`` mapping is kept raw here. It is validated as a whole by
    :meth:`passpolicy.policy.PolicyConfiguration.load`, which also accepts the host
    setting names such as ``p_policy.min_password_len``.
    """

    model_config = SettingsConfigDict(
        extra="forbid",
        validate_default=False,
        env_prefix="PASSPOLICY_",
        env_nested_delimiter="__",
    )

    policy: dict[str, Any] = Field(default_factory=dict)
    dictionary: DictionarySettings = Field(
        default_factory=lambda: DictionarySettings(
            enabled=False, path=None, failure_mode="error"
        )
    )

    @property
    def dictionary_enabled(self) -> bool:
        return bool(self.dictionary.get("enabled", False))

    @property
    def dictionary_path(self) -> str | None:
        return self.dictionary.get("path")

    @property
    def dictionary_failure_mode(self) -> DictionaryFailureMode:
        return self.dictionary.get("failure_mode", "error")

    @classmethod
    def settings_customise_sources(
        cls,
        _: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, file_secret_settings, init_settings

import logging
import pathlib

import pydantic

from .._conf import Settings
from ..util.model import convert_errors
from .exc import ConfigReadError, ConfigSyntaxError, ConfigValidationError

__all__ = ("ConfigOption", "validate_config")

logger = logging.getLogger(__name__)

ConfigOption = pathlib.Path | None


def validate_config(fn: ConfigOption) -> Settings:
    payload = {}

    if fn is not None:
        from ruamel import yaml
        from ruamel.yaml.error import YAMLError

        _loader = yaml.YAML(typ="safe")

        logger.debug("loading configuration file %r", str(fn))
        try:
            raw = fn.read_bytes()
        except OSError as ex:
            raise ConfigReadError(
                ex.strerror or str(ex), ctx=ConfigReadError.Context(filename=fn)
            ) from ex

        try:
            payload = _loader.load(raw) or {}
        except YAMLError as ex:
            raise ConfigSyntaxError(
                str(ex), ctx=ConfigSyntaxError.Context(filename=fn)
            ) from ex

        if not isinstance(payload, dict):
            raise ConfigValidationError("Input must be a valid mapping")

    try:
        res = Settings(**payload)
    except pydantic.ValidationError as ex:
        raise ConfigValidationError(str(convert_errors(ex))) from ex

    assert isinstance(res, Settings), "Expected %r, got %r" % (
        Settings.__name__,
        res,
    )
    return res

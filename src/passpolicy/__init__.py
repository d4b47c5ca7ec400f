__all__ = (
    "dto",
    "exc",
    "CharacterCounts",
    "analyze",
    "contains_username",
    "CracklibDictionaryGuard",
    "DictionaryGuard",
    "HashVerifier",
    "PostgresHashVerifier",
    "PolicyConfiguration",
    "PolicyEvaluator",
    "evaluate",
    "PolicyState",
    "install_reload_handler",
    "PasswordCheckHook",
)
__version__ = "0.1.0"

from . import dto, exc
from .analyzer import CharacterCounts, analyze
from .dictionary import CracklibDictionaryGuard, DictionaryGuard
from .evaluator import PolicyEvaluator, evaluate
from .guard import contains_username
from .hashing import HashVerifier, PostgresHashVerifier
from .hook import PasswordCheckHook
from .policy import PolicyConfiguration
from .state import PolicyState, install_reload_handler

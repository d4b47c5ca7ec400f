from dataclasses import dataclass

__all__ = ("CharacterCounts", "analyze", "as_bytes")


@dataclass(slots=True, frozen=True)
class CharacterCounts:
    letters: int = 0
    digits: int = 0
    special: int = 0
    upper: int = 0
    lower: int = 0

    @property
    def total(self) -> int:
        return self.letters + self.digits + self.special


def as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def analyze(plaintext: str | bytes) -> CharacterCounts:
    """
    Classifies every byte of a password into exactly one character class.

    The scan works on the UTF-8 encoding of the password and only knows about
    ASCII. Letters are tested first, then decimal digits; everything else,
    including whitespace, punctuation and each byte of a multi-byte character,
    counts as a special character.

    Examples:
        >>> analyze("Ab1!")
        CharacterCounts(letters=2, digits=1, special=1, upper=1, lower=1)
        >>> analyze("é").special
        2
    """
    letters = digits = special = upper = lower = 0

    for byte in as_bytes(plaintext):
        char = chr(byte)
        if char.isascii() and char.isalpha():
            letters += 1
            if char.isupper():
                upper += 1
            elif char.islower():
                lower += 1
        elif char.isascii() and char.isdigit():
            digits += 1
        else:
            special += 1

    return CharacterCounts(
        letters=letters, digits=digits, special=special, upper=upper, lower=lower
    )

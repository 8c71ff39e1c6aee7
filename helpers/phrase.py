import secrets

CONSONANTS = "bcdfghjklmnprstvwz"
VOWELS = "aeiou"


def _fake_word(min_length: int, max_length: int) -> str:
    length = min_length + secrets.randbelow(max_length - min_length + 1)
    # alternate consonant/vowel so it can actually be read back and typed
    start_with_vowel = secrets.randbelow(2) == 0
    letters = []
    for i in range(length):
        use_vowel = (i % 2 == 0) == start_with_vowel
        letters.append(secrets.choice(VOWELS if use_vowel else CONSONANTS))
    return "".join(letters)


def generate_phrase(num_words: int) -> str:
    """Random nonsense words, 3-7 letters each, joined by single spaces."""
    return " ".join(_fake_word(3, 7) for _ in range(num_words))


def matches_phrase(expected: str, typed: str) -> bool:
    return typed.strip().lower() == expected.lower()

from concurrent.futures import ThreadPoolExecutor

import pytest

from qpass import qrng
from qpass.charsets import AMBIGUOUS, CONSONANTS, DIGITS, LOWERCASE, SYMBOLS, UPPERCASE, VOWELS
from qpass.config import GenerationConfig, InvalidArgument, Mode
from qpass.passwords import PasswordGenerator, generate, make_passwords
from qpass.qrng import NumpySource
from qpass.strength import Strength


def _has(pw, cls):
    return any(c in cls.chars for c in pw)


@pytest.mark.parametrize("mode", list(Mode))
@pytest.mark.parametrize("length", [1, 2, 3, 6, 12, 64, 200])
def test_length_invariant(mode, length, seeded):
    cfg = GenerationConfig(length=length, mode=mode)
    for _ in range(20):
        assert len(generate(cfg, seeded)) == length


@pytest.mark.parametrize("mode", list(Mode))
@pytest.mark.parametrize("length", [0, -1, -12])
def test_non_positive_length_is_rejected(mode, length):
    with pytest.raises(InvalidArgument):
        generate(GenerationConfig(length=length, mode=mode))


def test_non_integer_length_is_rejected():
    with pytest.raises(InvalidArgument):
        generate(GenerationConfig(length=12.0))
    with pytest.raises(InvalidArgument):
        generate(GenerationConfig(length=True))


def test_invalid_argument_is_a_value_error():
    with pytest.raises(ValueError):
        generate(GenerationConfig(length=0))


def test_all_classes_unrestricted_covers_every_class(seeded):
    cfg = GenerationConfig(length=12, mode=Mode.UNRESTRICTED)
    for _ in range(500):
        pw = generate(cfg, seeded)
        assert len(pw) == 12
        assert _has(pw, UPPERCASE)
        assert _has(pw, LOWERCASE)
        assert _has(pw, DIGITS)
        assert _has(pw, SYMBOLS)


@pytest.mark.parametrize("flags", [
    dict(allow_upper=True, allow_lower=False, allow_numbers=True, allow_symbols=False),
    dict(allow_upper=False, allow_lower=True, allow_numbers=False, allow_symbols=True),
    dict(allow_upper=False, allow_lower=False, allow_numbers=True, allow_symbols=True),
])
def test_coverage_for_partial_class_sets(flags, seeded):
    cfg = GenerationConfig(length=6, mode=Mode.UNAMBIGUOUS, **flags)
    wanted = [
        cls for on, cls in zip(
            (flags["allow_upper"], flags["allow_lower"], flags["allow_numbers"], flags["allow_symbols"]),
            (UPPERCASE, LOWERCASE, DIGITS, SYMBOLS),
        ) if on
    ]
    unwanted = [cls for cls in (UPPERCASE, LOWERCASE, DIGITS, SYMBOLS) if cls not in wanted]
    for _ in range(300):
        pw = generate(cfg, seeded)
        for cls in wanted:
            assert _has(pw, cls)
        for cls in unwanted:
            assert not _has(pw, cls)


def test_lowercase_only_unambiguous(seeded):
    cfg = GenerationConfig(
        length=10, allow_upper=False, allow_lower=True,
        allow_numbers=False, allow_symbols=False, mode=Mode.UNAMBIGUOUS,
    )
    for _ in range(300):
        pw = generate(cfg, seeded)
        assert len(pw) == 10
        assert pw.islower() and pw.isalpha()
        assert "l" not in pw and "o" not in pw


@pytest.mark.parametrize("enabled", [True, False])
def test_unambiguous_never_emits_ambiguous_glyphs(enabled, seeded):
    cfg = GenerationConfig(
        length=32, allow_upper=enabled, allow_lower=enabled,
        allow_numbers=enabled, allow_symbols=enabled, mode=Mode.UNAMBIGUOUS,
    )
    for _ in range(200):
        assert not set(generate(cfg, seeded)) & AMBIGUOUS


def test_no_class_falls_back_to_lowercase(seeded):
    cfg = GenerationConfig(
        length=16, allow_upper=False, allow_lower=False,
        allow_numbers=False, allow_symbols=False, mode=Mode.UNRESTRICTED,
    )
    for _ in range(50):
        pw = generate(cfg, seeded)
        assert len(pw) == 16
        assert set(pw) <= set(LOWERCASE.chars)


def test_pronounceable_alternates_consonant_vowel(seeded):
    cfg = GenerationConfig(length=8, allow_upper=True, allow_lower=True, mode=Mode.PRONOUNCEABLE)
    seen_upper = seen_lower = False
    for _ in range(200):
        pw = generate(cfg, seeded)
        assert len(pw) == 8
        for i, ch in enumerate(pw.lower()):
            assert ch in (VOWELS.chars if i % 2 else CONSONANTS.chars)
        seen_upper = seen_upper or any(c.isupper() for c in pw)
        seen_lower = seen_lower or any(c.islower() for c in pw)
    assert seen_upper and seen_lower


@pytest.mark.parametrize("upper, lower, check", [
    (True, False, str.isupper),
    (False, True, str.islower),
    (False, False, str.islower),
])
def test_pronounceable_casing(upper, lower, check, seeded):
    cfg = GenerationConfig(
        length=11, allow_upper=upper, allow_lower=lower,
        allow_numbers=True, allow_symbols=True, mode=Mode.PRONOUNCEABLE,
    )
    for _ in range(50):
        pw = generate(cfg, seeded)
        assert check(pw)
        assert pw.isalpha()


def test_pronounceable_draws_letter_then_coin(scripted):
    cfg = GenerationConfig(length=3, allow_upper=True, allow_lower=True, mode=Mode.PRONOUNCEABLE)
    source = scripted([0, 1, 0, 0, 20, 0])
    assert generate(cfg, source) == "Baz"
    assert source.calls == [21, 2, 5, 2, 21, 2]


def test_drawn_mode_with_scripted_source(scripted):
    cfg = GenerationConfig(
        length=4, allow_upper=False, allow_lower=True,
        allow_numbers=True, allow_symbols=False, mode=Mode.UNRESTRICTED,
    )
    # four pool draws, then (position, char) for lowercase and digits
    source = scripted([0, 1, 2, 3, 3, 25, 0, 7])
    assert generate(cfg, source) == "7bcz"
    assert source.calls == [36, 36, 36, 36, 4, 26, 4, 10]


def test_coverage_collision_can_drop_an_earlier_class(scripted):
    cfg = GenerationConfig(
        length=1, allow_upper=True, allow_lower=True,
        allow_numbers=False, allow_symbols=False, mode=Mode.UNRESTRICTED,
    )
    # Only one position: the lowercase overwrite replaces the uppercase one.
    source = scripted([0, 0, 1, 0, 2])
    assert generate(cfg, source) == "c"


def test_same_seed_same_output():
    cfg = GenerationConfig(length=24, mode=Mode.UNRESTRICTED)
    assert generate(cfg, NumpySource(seed=3)) == generate(cfg, NumpySource(seed=3))


def test_consecutive_calls_are_independent():
    cfg = GenerationConfig(length=32, mode=Mode.UNRESTRICTED)
    assert len({generate(cfg) for _ in range(5)}) == 5


def test_password_generator(seeded):
    gen = PasswordGenerator(GenerationConfig(length=20), source=seeded)
    batch = gen.passwords(5)
    assert len(batch) == 5
    assert all(len(pw) == 20 for pw in batch)
    assert gen.passwords(0) == []
    assert gen.strength().label is Strength.VERY_STRONG
    assert gen.entropy_bits() > 0


def test_password_generator_rejects_bad_input():
    with pytest.raises(InvalidArgument):
        PasswordGenerator(GenerationConfig(length=0))
    with pytest.raises(InvalidArgument):
        PasswordGenerator().passwords(-1)


def test_make_passwords(seeded):
    out = make_passwords(GenerationConfig(length=9, mode=Mode.PRONOUNCEABLE), 4, source=seeded)
    assert len(out) == 4 and all(len(pw) == 9 for pw in out)


def test_threads_get_their_own_default_source():
    cfg = GenerationConfig(length=16, mode=Mode.UNRESTRICTED)
    main_source = qrng.default_source()
    assert qrng.default_source() is main_source

    def work(_):
        return qrng.default_source(), [generate(cfg) for _ in range(50)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(work, range(8)))

    for source, passwords in results:
        assert source is not main_source
        assert all(len(pw) == 16 for pw in passwords)

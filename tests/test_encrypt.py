import os

import pytest

from ette.core import encrypt as encrypt_module
from ette.core.encrypt import CryptoResult, decrypt, encrypt, is_key_correct
from ette.core.errors import CryptoError, StatusCode
from ette.core.format_config import HEADER_SIZE, CryptoAlgorithm

FOX = b"The quick brown fox jumps over the lazy dog"


class _ExplodingEngine:
    def __init__(self, *args, **kwargs):
        raise AssertionError("cipher must not be used")


@pytest.mark.parametrize(
    "plaintext",
    [
        b"a",
        b"0123456789abcdef",
        b"first row\nsecond row\nthird row\n",
        "€100 ünïcødé\n".encode("utf-8"),
        b"x" * 10_000,
    ],
)
def test_round_trip(plaintext):
    result = encrypt(plaintext, "test")
    assert result.ok
    assert result.code == StatusCode.OK

    decrypted = decrypt(result.ciphertext, "test")
    assert decrypted.ok
    assert decrypted.plaintext == plaintext


def test_round_trip_with_long_passphrase():
    password = "correct horse battery staple " * 20
    container = encrypt(FOX, password).unwrap()
    assert decrypt(container, password).plaintext == FOX


def test_container_layout():
    iv = bytes(range(16))
    container = encrypt(FOX, "foo", iv=iv).unwrap()

    assert container[0:4] == b"ETTE"
    assert container[4] == CryptoAlgorithm.AES256_CBC.value
    assert container[5:8] == bytes([0, 0, 1])
    assert container[8:16] == len(FOX).to_bytes(8, "big")
    assert container[16:32] == iv
    assert len(container) == HEADER_SIZE + 48


def test_same_iv_is_deterministic_and_fresh_iv_is_not():
    iv = os.urandom(16)
    assert encrypt(FOX, "foo", iv=iv).ciphertext == encrypt(FOX, "foo", iv=iv).ciphertext
    assert encrypt(FOX, "foo").ciphertext != encrypt(FOX, "foo").ciphertext


def test_wrong_key_is_reported():
    container = encrypt(FOX, "foo").unwrap()
    result = decrypt(container, "bar")

    assert not result.ok
    assert result.code == StatusCode.INVALID_KEY
    assert result.plaintext == b""


def test_unwrap_raises_the_error():
    result = decrypt(encrypt(FOX, "foo").unwrap(), "bar")
    with pytest.raises(CryptoError) as excinfo:
        result.unwrap()
    assert excinfo.value.code == StatusCode.INVALID_KEY


def test_empty_passphrase_is_rejected():
    assert encrypt(FOX, "").code == StatusCode.INVALID_KEY_SIZE
    assert encrypt(FOX, None).code == StatusCode.INVALID_KEY_SIZE

    container = encrypt(FOX, "foo").unwrap()
    assert decrypt(container, "").code == StatusCode.INVALID_KEY_SIZE


def test_empty_plaintext_skips_the_cipher(monkeypatch):
    container = encrypt(b"", "foo").unwrap()
    assert len(container) == HEADER_SIZE + 16

    monkeypatch.setattr(encrypt_module, "CipherEngine", _ExplodingEngine)
    result = decrypt(container, "foo")
    assert result.ok
    assert result.plaintext == b""


def test_short_container():
    assert decrypt(b"ETTE", "foo").code == StatusCode.INVALID_DATA_SIZE
    assert decrypt(b"", "").code == StatusCode.INVALID_DATA_SIZE


def test_bad_magic_fails_before_decrypting(monkeypatch):
    container = bytearray(encrypt(FOX, "foo").unwrap())
    container[0:4] = b"XXXX"

    monkeypatch.setattr(encrypt_module, "CipherEngine", _ExplodingEngine)
    assert decrypt(bytes(container), "foo").code == StatusCode.HEADER_NO_MAGIC_NUMBER


def test_unknown_algorithm_byte():
    container = bytearray(encrypt(FOX, "foo").unwrap())
    container[4] = 0x09
    assert decrypt(bytes(container), "foo").code == StatusCode.HEADER_INVALID_ALGORITHM


def test_truncated_ciphertext():
    container = encrypt(FOX, "foo").unwrap()
    assert decrypt(container[:-1], "foo").code == StatusCode.INVALID_DATA_SIZE
    assert decrypt(container[:HEADER_SIZE], "foo").code == StatusCode.INVALID_DATA_SIZE


def test_bad_iv_length():
    assert encrypt(FOX, "foo", iv=b"short").code == StatusCode.INVALID_IV_SIZE


def test_argon2_round_trip():
    result = encrypt(FOX, "TestPassword123!", algorithm=CryptoAlgorithm.AES256_CBC_ARGON2ID)
    assert result.ok
    assert result.ciphertext[4] == CryptoAlgorithm.AES256_CBC_ARGON2ID.value

    assert decrypt(result.ciphertext, "TestPassword123!").plaintext == FOX
    assert decrypt(result.ciphertext, "WrongPassword").code == StatusCode.INVALID_KEY


def test_result_defaults():
    result = CryptoResult()
    assert result.ok
    assert result.unwrap() == b""


def test_is_key_correct(tmp_path):
    path = tmp_path / "notes.aes256cbc"
    path.write_bytes(encrypt(FOX, "foo").unwrap())

    assert is_key_correct("foo", str(path))
    assert not is_key_correct("bar", str(path))


def test_is_key_correct_on_malformed_or_missing_file(tmp_path):
    malformed = tmp_path / "malformed.aes256cbc"
    malformed.write_bytes(b"malformed")

    assert not is_key_correct("foo", str(malformed))
    assert not is_key_correct("foo", str(tmp_path / "missing.aes256cbc"))

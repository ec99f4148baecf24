"""Credential tests — salted bcrypt hashes through passlib."""

from registrar.core.credentials import hash_password, verify_password


def test_same_password_hashes_differently_and_both_verify():
    first, second = hash_password("password"), hash_password("password")
    assert first != second
    assert verify_password("password", first)
    assert verify_password("password", second)


def test_hash_is_bcrypt_not_plaintext():
    hashed = hash_password("S3cret!pass")
    assert hashed.startswith("$2")
    assert "S3cret!pass" not in hashed


def test_wrong_password_rejected():
    assert not verify_password("other", hash_password("password"))


def test_empty_or_foreign_hash_never_verifies():
    assert not verify_password("password", "")
    assert not verify_password("password", "5f4dcc3b5aa765d61d8327deb882cf99")

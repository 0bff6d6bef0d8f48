"""
Unit tests for password hashing and the strength policy.
"""

import pytest

from modules.password_security import (
    calculate_strength_score,
    generate_secure_password,
    hash_password,
    strength_label,
    validate_password_strength,
    verify_password,
)


class TestHashing:

    def test_hash_verifies(self):
        hashed = hash_password("Secret#123")
        assert verify_password("Secret#123", hashed)
        assert not verify_password("Secret#124", hashed)

    def test_salted(self):
        assert hash_password("Secret#123") != hash_password("Secret#123")

    def test_empty_password_not_hashed(self):
        assert hash_password("") is None
        assert hash_password(None) is None

    def test_malformed_hash_rejected(self):
        assert not verify_password("Secret#123", "not-a-hash")
        assert not verify_password("Secret#123", "")
        assert not verify_password(None, hash_password("Secret#123"))


class TestPolicy:

    def test_strong_password_valid(self):
        result = validate_password_strength("Tr1cky!Horse")
        assert result.is_valid
        assert result.errors == []

    @pytest.mark.parametrize("password,fragment", [
        ("Sh0rt!", "at least 8"),
        ("alllowercase1!", "uppercase"),
        ("ALLUPPERCASE1!", "lowercase"),
        ("NoDigits!!", "digit"),
        ("NoSymbols123", "special character"),
    ])
    def test_each_rule_reported(self, password, fragment):
        result = validate_password_strength(password)
        assert not result.is_valid
        assert any(fragment in e for e in result.errors)

    def test_too_long(self):
        result = validate_password_strength("Aa1!" * 33)
        assert any("no more than 128" in e for e in result.errors)

    def test_common_password(self):
        result = validate_password_strength("Password123")
        assert any("too common" in e for e in result.errors)

    def test_all_violations_listed(self):
        result = validate_password_strength("abc")
        assert len(result.errors) == 4

    def test_none(self):
        assert not validate_password_strength(None).is_valid


class TestStrength:

    def test_score_components(self):
        # 8 characters: no length bonus, four classes
        assert calculate_strength_score("Abcdef1!") == 60
        # 28 characters: full 40 point length bonus
        assert calculate_strength_score("Abcdef1!" + "a" * 20) == 100
        assert calculate_strength_score("abcdefgh") == 15

    @pytest.mark.parametrize("score,label", [
        (100, "Very Strong"), (80, "Very Strong"), (79, "Strong"), (60, "Strong"),
        (40, "Medium"), (20, "Weak"), (19, "Very Weak"), (0, "Very Weak"),
    ])
    def test_labels(self, score, label):
        assert strength_label(score) == label

    def test_result_carries_score(self):
        result = validate_password_strength("Abcdef1!")
        assert result.strength_score == 60
        assert result.strength_level == "Strong"


class TestGenerator:

    def test_generated_passwords_pass_policy(self):
        for _ in range(10):
            password = generate_secure_password()
            assert len(password) == 16
            assert validate_password_strength(password).is_valid

    def test_minimum_length_enforced(self):
        assert len(generate_secure_password(4)) == 8

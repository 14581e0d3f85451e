from __future__ import annotations

from chat_api.core.security import build_password_hasher, hash_password, verify_password


def test_hash_then_verify_accepts_the_same_password(settings):
    hasher = build_password_hasher(settings)
    stored = hash_password(hasher, "Passw0rd!")

    assert stored != "Passw0rd!"
    assert verify_password(hasher, "Passw0rd!", stored) is True


def test_verify_rejects_other_passwords_and_garbage(settings):
    hasher = build_password_hasher(settings)
    stored = hash_password(hasher, "Passw0rd!")

    assert verify_password(hasher, "Passw0rd?", stored) is False
    assert verify_password(hasher, "", stored) is False
    assert verify_password(hasher, "Passw0rd!", "not-a-hash") is False
    assert verify_password(hasher, "Passw0rd!", None) is False


def test_hashes_are_salted(settings):
    hasher = build_password_hasher(settings)
    first = hash_password(hasher, "Passw0rd!")
    second = hash_password(hasher, "Passw0rd!")

    assert first != second
    assert verify_password(hasher, "Passw0rd!", first)
    assert verify_password(hasher, "Passw0rd!", second)


def test_hasher_uses_configured_cost(settings):
    hasher = build_password_hasher(settings)
    assert hasher.time_cost == settings.password_time_cost
    assert hasher.memory_cost == settings.password_memory_cost

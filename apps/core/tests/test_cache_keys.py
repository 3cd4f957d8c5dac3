from common.cache_utils import MAX_KEY_LENGTH, build_cache_key


def test_cache_key_ignores_parameter_order():
    a = build_cache_key("/api/v1/organizations/x/analytics/performance", days="7", opponent="LOUD")
    b = build_cache_key("/api/v1/organizations/x/analytics/performance", opponent="LOUD", days="7")

    assert a == b
    assert a.startswith("prostaff:/api/v1/organizations/x/")


def test_long_cache_keys_are_hashed():
    key = build_cache_key("/api/v1/organizations/x/matches", opponent="x" * 400)

    assert len(key) <= MAX_KEY_LENGTH
    assert "x" * 300 not in key

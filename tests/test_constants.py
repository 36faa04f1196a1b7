import pytest

from ratedesk.core.errors import InvalidCurrencyCode
from ratedesk.models.constants import CURRENCY_NAMES, is_valid, name_of, normalize_code


def test_is_valid_accepts_lowercase_and_padding():
    assert is_valid("PKR")
    assert is_valid("pkr")
    assert is_valid("  eur ")
    assert not is_valid("XYZ")
    assert not is_valid("")
    assert not is_valid(None)


def test_name_of_known_and_unknown():
    assert name_of("usd") == "US Dollar"
    assert name_of(" pkr\n") == "Pakistani Rupee"
    assert name_of("xau") == "XAU"


def test_normalize_code():
    assert normalize_code(" gbp ") == "GBP"
    with pytest.raises(InvalidCurrencyCode) as exc_info:
        normalize_code(" abc ")
    assert exc_info.value.code == "ABC"
    with pytest.raises(ValueError):
        normalize_code("")


def test_table_size():
    assert len(CURRENCY_NAMES) == 22
    assert all(code == code.upper() and len(code) == 3 for code in CURRENCY_NAMES)

"""
Recipient Identity Unit Tests
Tests for distributor/crypto/pubkey.py
"""
import pytest

from distributor.crypto.pubkey import PUBKEY_LENGTH, Pubkey
from distributor.schemas.errors import InvalidRecipientException


ZERO_KEY_B58 = "11111111111111111111111111111111"


class TestConstruction:
    """Tests for the accepted input forms."""

    def test_from_bytes(self):
        key = Pubkey(bytes(32))
        assert key.to_bytes() == bytes(32)
        assert str(key) == ZERO_KEY_B58

    def test_from_base58(self):
        key = Pubkey(ZERO_KEY_B58)
        assert bytes(key) == bytes(32)

    def test_from_hex(self):
        raw = bytes(range(32))
        assert Pubkey("0x" + raw.hex()).to_bytes() == raw

    def test_from_pubkey(self):
        key = Pubkey(b"\x07" * 32)
        assert Pubkey(key) == key

    def test_base58_round_trip(self):
        raw = bytes(range(1, 33))
        key = Pubkey(raw)
        assert Pubkey.from_base58(key.to_base58()).to_bytes() == raw

    def test_wrong_length_raises(self):
        with pytest.raises(InvalidRecipientException):
            Pubkey(b"\x01" * (PUBKEY_LENGTH - 1))

    def test_invalid_base58_raises(self):
        """0, O, I and l are not in the base58 alphabet."""
        with pytest.raises(InvalidRecipientException):
            Pubkey("0OIl")

    def test_invalid_hex_raises(self):
        with pytest.raises(InvalidRecipientException):
            Pubkey("0xnothex")

    def test_unsupported_type_raises(self):
        with pytest.raises(InvalidRecipientException):
            Pubkey(12345)


class TestOrderingAndEquality:
    """Ordering and equality are by raw bytes."""

    def test_ordering_by_bytes(self):
        low = Pubkey(b"\x01" * 32)
        high = Pubkey(b"\x02" * 32)

        assert low < high
        assert sorted([high, low]) == [low, high]

    def test_equal_keys_hash_equal(self):
        a = Pubkey(b"\x05" * 32)
        b = Pubkey(str(a))

        assert a == b
        assert len({a, b}) == 1

    def test_byte_order_can_differ_from_text_order(self):
        """Sorting by bytes is not the same as sorting the base58 strings."""
        # 58**42 encodes as "1" + "2" + "1"*42, one less as "1" + "z"*42
        high = Pubkey((58**42).to_bytes(32, "big"))
        low = Pubkey((58**42 - 1).to_bytes(32, "big"))

        assert low < high
        assert str(low) > str(high)

    def test_immutable(self):
        key = Pubkey(bytes(32))
        with pytest.raises(AttributeError):
            key._bytes = b"\x01" * 32

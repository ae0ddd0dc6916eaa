"""
Tamper Self-Check Unit Tests
Tests for core/proofs/tamper.py
"""
import random

import pytest

from core.proofs.digest import verify_digest
from core.proofs.tamper import assert_tamper_evident, flip_random_bit
from core.schemas.errors import EmptyInputException, ErrorCodes, TamperCheckException

from fixtures.ledger_fixtures import EXPECTED_DIGEST_HEX, LEAF_HASH, ONES_HASH, TWOS_HASH


def _bit_difference(a: bytes, b: bytes) -> int:
    return sum(bin(x ^ y).count("1") for x, y in zip(a, b))


class TestFlipRandomBit:
    """Tests for flip_random_bit()."""

    @pytest.mark.parametrize("seed", range(20))
    def test_exactly_one_bit_differs(self, seed):
        altered = flip_random_bit(LEAF_HASH, random.Random(seed))
        assert len(altered) == len(LEAF_HASH)
        assert _bit_difference(altered, LEAF_HASH) == 1

    def test_input_not_mutated(self):
        original = bytes(ONES_HASH)
        flip_random_bit(original, random.Random(7))
        assert original == ONES_HASH

    def test_accepts_bytearray(self):
        source = bytearray(b"\x00")
        altered = flip_random_bit(source, random.Random(0))
        assert isinstance(altered, bytes)
        assert source == bytearray(b"\x00")

    def test_single_byte_flips_within_byte(self):
        altered = flip_random_bit(b"\x00", random.Random(3))
        assert altered[0] in {1 << i for i in range(8)}

    def test_deterministic_with_seeded_rng(self):
        assert flip_random_bit(LEAF_HASH, random.Random(42)) == flip_random_bit(
            LEAF_HASH, random.Random(42)
        )

    def test_default_rng(self):
        assert flip_random_bit(LEAF_HASH) != LEAF_HASH

    def test_empty_input_raises(self):
        with pytest.raises(EmptyInputException) as exc_info:
            flip_random_bit(b"")
        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT

    @pytest.mark.parametrize("seed", range(10))
    def test_flipped_leaf_never_verifies(self, seed):
        digest = bytes.fromhex(EXPECTED_DIGEST_HEX)
        proof = [ONES_HASH, TWOS_HASH]
        altered = flip_random_bit(LEAF_HASH, random.Random(seed))
        assert verify_digest(altered, proof, digest) is False


class TestAssertTamperEvident:
    """Tests for assert_tamper_evident()."""

    def test_honest_triple_passes(self, rng):
        digest = bytes.fromhex(EXPECTED_DIGEST_HEX)
        assert_tamper_evident(LEAF_HASH, [ONES_HASH, TWOS_HASH], digest, rng)

    def test_unverified_triple_raises(self, rng):
        with pytest.raises(TamperCheckException) as exc_info:
            assert_tamper_evident(LEAF_HASH, [ONES_HASH, TWOS_HASH], TWOS_HASH, rng)
        assert exc_info.value.code == ErrorCodes.TAMPER_CHECK_FAILED
        assert "Unaltered" in exc_info.value.message

"""
Digest Tree Unit Tests
Tests for core/proofs/tree.py

1. Root determinism
2. Odd node promotion
3. Proof round trip - every index folds back to the root
4. Tamper detection on leaves and proofs
5. Empty leaves / bad index
"""
import pytest

from core.crypto.hashing import join_hashes_pairwise, sha256
from core.proofs.digest import recompute_digest
from core.proofs.tree import build_digest_root, build_inclusion_proof


def _leaves(n: int) -> list[bytes]:
    return [sha256(f"leaf-{i}".encode()) for i in range(n)]


class TestBuildDigestRoot:
    """Tests for build_digest_root()."""

    def test_single_leaf_root_is_leaf(self):
        leaf = sha256(b"only")
        assert build_digest_root([leaf]) == leaf

    def test_two_leaves(self):
        a, b = _leaves(2)
        assert build_digest_root([a, b]) == join_hashes_pairwise(a, b)

    def test_odd_node_promoted(self):
        a, b, c = _leaves(3)
        assert build_digest_root([a, b, c]) == join_hashes_pairwise(join_hashes_pairwise(a, b), c)

    def test_deterministic(self):
        leaves = _leaves(7)
        assert build_digest_root(leaves) == build_digest_root(list(leaves))

    def test_leaf_order_matters(self):
        a, b, c = _leaves(3)
        assert build_digest_root([a, b, c]) != build_digest_root([c, a, b])

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            build_digest_root([])


class TestBuildInclusionProof:
    """Tests for build_inclusion_proof()."""

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 8, 13])
    def test_every_index_round_trips(self, n):
        leaves = _leaves(n)
        root = build_digest_root(leaves)
        for i, leaf in enumerate(leaves):
            proof = build_inclusion_proof(leaves, i)
            assert recompute_digest(leaf, proof) == root

    def test_single_leaf_proof_is_empty(self):
        assert build_inclusion_proof(_leaves(1), 0) == []

    def test_promoted_node_skips_level(self):
        leaves = _leaves(3)
        proof = build_inclusion_proof(leaves, 2)
        assert proof == [join_hashes_pairwise(leaves[0], leaves[1])]

    def test_tampered_leaf_fails(self):
        leaves = _leaves(5)
        root = build_digest_root(leaves)
        proof = build_inclusion_proof(leaves, 1)
        assert recompute_digest(sha256(b"forged"), proof) != root

    def test_tampered_sibling_fails(self):
        leaves = _leaves(5)
        root = build_digest_root(leaves)
        proof = build_inclusion_proof(leaves, 1)
        proof[0] = sha256(b"forged")
        assert recompute_digest(leaves[1], proof) != root

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            build_inclusion_proof([], 0)

    @pytest.mark.parametrize("index", [-1, 3])
    def test_index_out_of_range(self, index):
        with pytest.raises(IndexError):
            build_inclusion_proof(_leaves(3), index)

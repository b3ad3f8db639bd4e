"""Deterministic scoring and recommendation tiers."""

from .classifier import bucket, classify, tier_rank
from .engine import ScoreEngine
from .seeded import SeededSequence, hash_seed

__all__ = [
    "ScoreEngine",
    "SeededSequence",
    "hash_seed",
    "classify",
    "bucket",
    "tier_rank",
]

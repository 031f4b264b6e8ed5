"""Random sources for example generation.

Examples are reproducible per context: a non-empty context string is hashed
(SHA-1) into a seed for a private :class:`random.Random`, so the same context
always yields the same example while different contexts are independent.
Without a context an unseeded source is used.

String-ish examples come from Faker (words) and rstr (values matching a
regular expression); both are driven from the private random source so they
stay reproducible.
"""
from __future__ import annotations

import hashlib
import random
import re
import threading

import rstr
from faker import Faker

_local = threading.local()


def context_seed(context: str) -> int:
    """Derive a stable 64-bit seed from ``context``."""
    digest = hashlib.sha1(context.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def seeded_random(context: str | None = None) -> random.Random:
    """Return a private random source, seeded when ``context`` is non-empty."""
    if context:
        return random.Random(context_seed(context))
    return random.Random()


def _faker() -> Faker:
    # Faker instances carry seed state, so keep one per thread.
    fake = getattr(_local, "faker", None)
    if fake is None:
        fake = _local.faker = Faker()
    return fake


def fake_word(rng: random.Random) -> str:
    """Return a dictionary word chosen deterministically from ``rng``."""
    fake = _faker()
    fake.seed_instance(rng.getrandbits(32))
    return fake.word()


def string_matching(pattern: str | re.Pattern[str], rng: random.Random) -> str:
    """Return a string matching ``pattern``, generated from ``rng``."""
    if isinstance(pattern, re.Pattern):
        pattern = pattern.pattern
    return rstr.Rstr(rng).xeger(pattern)

"""
Random number generation for number pool shuffling.

Uses PCG64DXSM (Permuted Congruential Generator with DXSM output function):
1. Generate a cryptographic seed (64 bytes / 512 bits) via secrets module
2. Derive per-round RNG state via SHA512 with domain separation (versioned prefix)
3. Use PCG64DXSM to generate random uint64 values
4. Apply Fisher-Yates shuffle with rejection sampling for an unbiased permutation

A room keeps one seed; together with the round number it fully determines
that round's draw order, so it must never leave the server.
"""

import hashlib
import secrets

SEED_BYTES = 64  # 512 bits, exceeds log2(90!) ~ 459 bits of possible draw orders
_POOL_DOMAIN_PREFIX = b"housie-pool-v1:"

# PCG64DXSM constants
_PCG_MULTIPLIER = 0x2360ED051FC65DA44385DF649FCCF645
_PCG_DXSM_MUL = 0xDA942042E4DD58B5
_UINT128_MASK = (1 << 128) - 1
_UINT64_MASK = (1 << 64) - 1


def validate_seed_hex(seed_hex: str) -> None:
    """Validate that a seed string is the correct hex format.

    Raises TypeError for non-string input, ValueError for invalid length or characters.
    """
    if not isinstance(seed_hex, str):
        raise TypeError(f"Seed must be a string, got {type(seed_hex).__name__}")
    expected_length = SEED_BYTES * 2
    if len(seed_hex) != expected_length:
        raise ValueError(f"Seed must be exactly {expected_length} hex characters, got {len(seed_hex)}")
    try:
        bytes.fromhex(seed_hex)
    except ValueError:
        raise ValueError("Seed contains invalid hex characters") from None


class PCG64DXSM:
    """
    Pure Python PCG64DXSM.

    128-bit LCG state with the DXSM (double-xorshift-multiply) output
    permutation, producing 64-bit outputs.
    """

    def __init__(self, state: int, increment: int) -> None:
        self._inc = ((increment << 1) | 1) & _UINT128_MASK  # increment must be odd
        self._state = (state + self._inc) & _UINT128_MASK
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK

    def next_uint64(self) -> int:
        """Generate the next 64-bit unsigned integer and advance state."""
        state = self._state
        hi = (state >> 64) & _UINT64_MASK
        lo = (state & _UINT64_MASK) | 1

        hi ^= hi >> 32
        hi = (hi * _PCG_DXSM_MUL) & _UINT64_MASK
        hi ^= hi >> 48
        hi = (hi * lo) & _UINT64_MASK

        self._state = (state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK
        return hi


def generate_seed() -> str:
    """Generate a cryptographic seed as a hex string."""
    return secrets.token_bytes(SEED_BYTES).hex()


def _derive_round_pcg(seed_hex: str, round_number: int) -> PCG64DXSM:
    """
    Derive a per-round PCG64DXSM from the room seed.

    SHA512(prefix + seed + round) gives 64 bytes; the first 16 become the
    state and the next 16 the increment.
    """
    if not (0 <= round_number < 2**32):
        raise ValueError("round_number must be in [0, 2^32)")
    validate_seed_hex(seed_hex)
    data = bytes.fromhex(seed_hex) + round_number.to_bytes(4, byteorder="little")
    derived = hashlib.sha512(_POOL_DOMAIN_PREFIX + data).digest()
    state = int.from_bytes(derived[:16], byteorder="little")
    increment = int.from_bytes(derived[16:32], byteorder="little")
    return PCG64DXSM(state, increment)


def _bounded_uint64(pcg: PCG64DXSM, bound: int) -> int:
    """
    Generate an unbiased random integer in [0, bound) via rejection sampling.

    Values from the partial final bucket are rejected to remove modulo bias.
    """
    if bound <= 0 or bound > (1 << 64):
        raise ValueError("bound must be in (0, 2^64]")
    limit = (1 << 64) - ((1 << 64) % bound)
    while True:
        r = pcg.next_uint64()
        if r < limit:
            return r % bound


def _fisher_yates_shuffle(items: list[int], pcg: PCG64DXSM) -> list[int]:
    """
    Fisher-Yates (Knuth) shuffle driven by PCG64DXSM.

    For i in 0..n-2: swap items[i] with items[i + bounded_uint64(n - i)]
    """
    n = len(items)
    result = list(items)
    for i in range(n - 1):
        j = i + _bounded_uint64(pcg, n - i)
        result[i], result[j] = result[j], result[i]
    return result


def shuffled_number_range(seed_hex: str, round_number: int, low: int, high: int) -> list[int]:
    """Return every integer in [low, high] exactly once, in seed-determined order."""
    if low > high:
        raise ValueError(f"Empty number range {low}..{high}")
    pcg = _derive_round_pcg(seed_hex, round_number)
    return _fisher_yates_shuffle(list(range(low, high + 1)), pcg)


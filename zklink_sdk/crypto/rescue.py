"""
Rescue Hash over the BN254 Scalar Field

Rescue permutation and sponge used by the musig signature scheme, the
transaction message hash and the public key hash.

Parameters
----------
- state width 3 (rate 2, capacity 1)
- 22 rounds, each applying x^(1/5) then x^5 (44 S-box layers)
- 135 round constants drawn from Blake2s("Rescue_f") over the group hash
  seed block
- Cauchy MDS matrix whose points come from a ChaCha20 stream keyed by
  Blake2s("ResM0003") over the same seed block

The parameter set must match the circuit bit for bit; every signature and
public key hash depends on it. It is expensive to derive, so it is built
lazily exactly once per process and shared read-only by every thread.
"""

from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from py_ecc.bn128 import curve_order

# Rescue works in Fr of BN254, which is also the base field of the
# twisted Edwards curve used for signing.
FIELD_MODULUS = int(curve_order)

# First 64 hex characters of the Zcash "Powers of Tau" transcript hash.
# Shared by every Blake2s derivation of protocol parameters.
GH_FIRST_BLOCK = b"096b36a5804bfacef1691e173c366a47ff5ba84a44f26ddd7e8d9f79d5b42df0"

ROUND_CONSTANTS_PERSONALIZATION = b"Rescue_f"
MDS_PERSONALIZATION = b"ResM0003"

# Field elements are stored in Montgomery form with R = 2^256
_MONTGOMERY_R_INV = pow(1 << 256, -1, FIELD_MODULUS)
# Fr has 254 significant bits; sampled limbs lose the top two
_TOP_LIMB_MASK = 0xFFFFFFFFFFFFFFFF >> 2

_MASK32 = 0xFFFFFFFF
_CHACHA_CONSTANTS = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)
_CHACHA_ROUNDS = 20


def _scalar_product(row: Sequence[int], state: Sequence[int]) -> int:
    return sum(m * s for m, s in zip(row, state)) % FIELD_MODULUS


def _rotl32(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & _MASK32


def _quarter_round(x: List[int], a: int, b: int, c: int, d: int) -> None:
    x[a] = (x[a] + x[b]) & _MASK32
    x[d] = _rotl32(x[d] ^ x[a], 16)
    x[c] = (x[c] + x[d]) & _MASK32
    x[b] = _rotl32(x[b] ^ x[c], 12)
    x[a] = (x[a] + x[b]) & _MASK32
    x[d] = _rotl32(x[d] ^ x[a], 8)
    x[c] = (x[c] + x[d]) & _MASK32
    x[b] = _rotl32(x[b] ^ x[c], 7)


class ChaChaStream:
    """
    ChaCha20 keystream as a stream of 32-bit words.

    Word order and the 64-bit block counter in state words 12 and 13 follow
    the ``ChaChaRng`` generator the MDS matrix was originally drawn from; a
    64-bit draw takes the first word as its high half.
    """

    def __init__(self, key_words: Sequence[int]):
        if len(key_words) != 8:
            raise ValueError(f"ChaCha key must be 8 words, got {len(key_words)}")
        self._state = list(_CHACHA_CONSTANTS) + [w & _MASK32 for w in key_words] + [0, 0, 0, 0]
        self._buffer: List[int] = []
        self._index = 0

    def _refill(self) -> None:
        working = list(self._state)
        for _ in range(_CHACHA_ROUNDS // 2):
            _quarter_round(working, 0, 4, 8, 12)
            _quarter_round(working, 1, 5, 9, 13)
            _quarter_round(working, 2, 6, 10, 14)
            _quarter_round(working, 3, 7, 11, 15)
            _quarter_round(working, 0, 5, 10, 15)
            _quarter_round(working, 1, 6, 11, 12)
            _quarter_round(working, 2, 7, 8, 13)
            _quarter_round(working, 3, 4, 9, 14)
        self._buffer = [(w + s) & _MASK32 for w, s in zip(working, self._state)]
        self._index = 0

        self._state[12] = (self._state[12] + 1) & _MASK32
        if self._state[12] == 0:
            self._state[13] = (self._state[13] + 1) & _MASK32

    def next_u32(self) -> int:
        if self._index >= len(self._buffer):
            self._refill()
        word = self._buffer[self._index]
        self._index += 1
        return word

    def next_u64(self) -> int:
        high = self.next_u32()
        return (high << 32) | self.next_u32()

    def next_field_element(self) -> int:
        """
        Uniform element of Fr by rejection sampling.

        The sampled limbs are taken as a Montgomery representation, so the
        element itself is ``raw / 2^256``.
        """
        while True:
            limbs = [self.next_u64() for _ in range(4)]
            limbs[3] &= _TOP_LIMB_MASK
            raw = sum(limb << (64 * i) for i, limb in enumerate(limbs))
            if raw < FIELD_MODULUS:
                return raw * _MONTGOMERY_R_INV % FIELD_MODULUS


def blake2s_field_elements(personalization: bytes) -> Iterator[int]:
    """
    Endless stream of non-zero field elements.

    Each candidate is Blake2s(GH_FIRST_BLOCK || u32_be(counter)) read
    little-endian; zero and candidates outside the field are skipped.
    """
    nonce = 0
    while True:
        digest = hashlib.blake2s(
            GH_FIRST_BLOCK + nonce.to_bytes(4, "big"),
            digest_size=32,
            person=personalization,
        ).digest()
        nonce += 1
        value = int.from_bytes(digest, "little")
        if 0 < value < FIELD_MODULUS:
            yield value


def mds_stream() -> ChaChaStream:
    """
    ChaCha20 stream the MDS points are drawn from.

    Every key word is the first four digest bytes read big-endian.
    """
    digest = hashlib.blake2s(GH_FIRST_BLOCK, digest_size=32, person=MDS_PERSONALIZATION).digest()
    word = int.from_bytes(digest[:4], "big")
    return ChaChaStream([word] * 8)


@dataclass(frozen=True)
class RescueParams:
    """Immutable Rescue parameter set."""
    width: int
    rate: int
    rounds: int
    alpha: int
    alpha_inv: int
    round_constants: Tuple[Tuple[int, ...], ...]
    mds: Tuple[Tuple[int, ...], ...]

    @property
    def capacity(self) -> int:
        return self.width - self.rate

    @classmethod
    def generate(cls, width: int = 3, rate: int = 2, rounds: int = 22, alpha: int = 5) -> "RescueParams":
        """Derive the parameter set deterministically."""
        alpha_inv = pow(alpha, -1, FIELD_MODULUS - 1)

        stream = blake2s_field_elements(ROUND_CONSTANTS_PERSONALIZATION)
        round_constants = tuple(
            tuple(next(stream) for _ in range(width))
            for _ in range(1 + 2 * rounds)
        )

        return cls(
            width=width,
            rate=rate,
            rounds=rounds,
            alpha=alpha,
            alpha_inv=alpha_inv,
            round_constants=round_constants,
            mds=cauchy_mds(width, mds_stream()),
        )


def cauchy_mds(width: int, rng: ChaChaStream) -> Tuple[Tuple[int, ...], ...]:
    """
    Cauchy matrix ``M[i][j] = 1 / (x_i - y_j)``.

    ``width`` x-points then ``width`` y-points are drawn per attempt; the
    attempt is redrawn whole unless all of them are pairwise distinct, which
    makes every square submatrix non-singular.
    """
    while True:
        xs = [rng.next_field_element() for _ in range(width)]
        ys = [rng.next_field_element() for _ in range(width)]
        if len(set(xs)) == width and len(set(ys)) == width and not set(xs) & set(ys):
            break
    return tuple(
        tuple(pow((x - y) % FIELD_MODULUS, -1, FIELD_MODULUS) for y in ys)
        for x in xs
    )


_params: Optional[RescueParams] = None
_params_lock = threading.Lock()


def get_rescue_params() -> RescueParams:
    """Process-wide parameter set, built on first use."""
    global _params
    # Double-checked locking: concurrent first calls must not build two sets
    if _params is None:
        with _params_lock:
            if _params is None:
                _params = RescueParams.generate()
    return _params


def rescue_permutation(state: Sequence[int], params: Optional[RescueParams] = None) -> List[int]:
    """Apply the Rescue permutation to a full state vector."""
    params = params or get_rescue_params()
    if len(state) != params.width:
        raise ValueError(f"Rescue state must have {params.width} elements, got {len(state)}")

    state = [
        (s + c) % FIELD_MODULUS
        for s, c in zip(state, params.round_constants[0])
    ]
    for round_num in range(2 * params.rounds):
        exponent = params.alpha_inv if round_num % 2 == 0 else params.alpha
        state = [pow(s, exponent, FIELD_MODULUS) for s in state]

        constants = params.round_constants[round_num + 1]
        state = [
            (constants[i] + _scalar_product(params.mds[i], state)) % FIELD_MODULUS
            for i in range(params.width)
        ]
    return state


def rescue_sponge(inputs: Sequence[int], params: Optional[RescueParams] = None) -> int:
    """
    Hash field elements into one field element.

    The capacity element is specialized with the input length; the last
    partial block is padded with ones.
    """
    params = params or get_rescue_params()
    state = [0] * params.width
    state[-1] = len(inputs) % FIELD_MODULUS

    values = [int(v) % FIELD_MODULUS for v in inputs]
    if not values:
        return rescue_permutation(state, params)[0]

    for start in range(0, len(values), params.rate):
        block = values[start:start + params.rate]
        block += [1] * (params.rate - len(block))
        for i, value in enumerate(block):
            state[i] = (state[i] + value) % FIELD_MODULUS
        state = rescue_permutation(state, params)
    return state[0]


def rescue_hash_elements(elements: Sequence[int]) -> int:
    return rescue_sponge(elements)

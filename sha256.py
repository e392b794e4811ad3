"""SHA-256 digest of a byte string, built on the round function in `compress.py`.

This module provides the padding, block parsing and chaining around
`compress64`:

- `sha256(data: bytes) -> bytes`: compute the 32-byte digest of `data`.
- `hexdigest(data: bytes) -> str`: the same digest as 64 lowercase hex chars.
- `intermediate_states(data: bytes)`: every chaining value H(0)..H(N).

The 64-bit length field limits messages to fewer than 2**64 bits (2**61
bytes). Longer inputs are rejected with `ValueError` instead of having
their length truncated.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Tuple

from compress import MASK32, Word8, compress64, expand_message_schedule


logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

BLOCK_BYTES = 64
BLOCK_BITS = BLOCK_BYTES * 8
MAX_MESSAGE_BITS = 2**64 - 1

# Initial hash values (first 32 bits of the fractional parts of the
# square roots of the first 8 primes 2..19), as per FIPS 180-4.
H0: Word8 = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)


def _check_length(length_bits: int) -> None:
    if length_bits < 0:
        raise ValueError(f"Message length must be non-negative, got {length_bits}")
    if length_bits > MAX_MESSAGE_BITS:
        raise ValueError(
            f"Message of {length_bits} bits does not fit the 64-bit SHA-256 length field"
        )


def padded_length(length_bits: int) -> int:
    """Return the padded length in bits for a message of `length_bits` bits.

    This is the smallest multiple of 512 that leaves room for the '1' bit
    and the 64-bit length field.
    """
    _check_length(length_bits)
    return (length_bits + 1 + 64 + BLOCK_BITS - 1) // BLOCK_BITS * BLOCK_BITS


def pad_message(message: bytes) -> bytes:
    """Pad the input message according to FIPS 180-4 section 5.1.1.

    The result length is a multiple of 64 bytes (512 bits).
    """
    ml_bits = len(message) * 8
    _check_length(ml_bits)

    # Append the '1' bit (0x80), then zero bytes so that length ≡ 56 mod 64.
    padded = bytearray(message)
    padded.append(0x80)
    padded.extend(b"\x00" * ((56 - len(padded)) % BLOCK_BYTES))

    # Append 64-bit big-endian length in bits.
    padded.extend(ml_bits.to_bytes(8, byteorder="big"))
    return bytes(padded)


def block_count(padded_length_bits: int) -> int:
    """Number of 512-bit blocks in a padded message of the given bit length."""
    if padded_length_bits % BLOCK_BITS:
        raise ValueError(
            f"Padded length must be a multiple of {BLOCK_BITS} bits, got {padded_length_bits}"
        )
    return padded_length_bits // BLOCK_BITS


def _chunks(data: bytes, size: int) -> Iterable[bytes]:
    """Yield successive `size`-byte chunks from `data`."""
    for i in range(0, len(data), size):
        yield data[i : i + size]


def split_into_blocks(padded: bytes) -> List[Tuple[int, ...]]:
    """Split a padded message into blocks of sixteen big-endian 32-bit words.

    The input must already be padded so that its length is a multiple of 64.
    Content is not inspected, only sliced.
    """
    if len(padded) % BLOCK_BYTES != 0:
        raise ValueError(
            f"Padded message length must be a multiple of {BLOCK_BYTES} bytes, got {len(padded)}"
        )

    blocks: List[Tuple[int, ...]] = []
    for block in _chunks(padded, BLOCK_BYTES):
        blocks.append(
            tuple(int.from_bytes(word, byteorder="big") for word in _chunks(block, 4))
        )
    return blocks


def compress_block(state: Word8, block: Tuple[int, ...]) -> Word8:
    """Compress one parsed block and fold the result into the chaining value.

        H_{i+1}[j] = (H_i[j] + working[j]) mod 2^32
    """
    ws = expand_message_schedule(block)
    working = compress64(*state, ws)
    return tuple((h + x) & MASK32 for h, x in zip(state, working))


def _chain_states(data: bytes) -> Iterator[Word8]:
    """Yield H(0), then the chaining value after each block of `data`."""
    blocks = split_into_blocks(pad_message(data))
    logger.debug("hashing %d bytes in %d block(s)", len(data), len(blocks))

    state = H0
    yield state
    for block in blocks:
        state = compress_block(state, block)
        yield state


def intermediate_states(data: bytes) -> List[Word8]:
    """Return every chaining value H(0), H(1), ..., H(N) for `data`.

    H(0) is the initial hash value and H(N) is the final state from which
    the digest is taken.
    """
    return list(_chain_states(data))


def digest_words(data: bytes) -> Word8:
    """Compute the final SHA-256 state of `data` as eight 32-bit words."""
    *_, state = _chain_states(data)
    return state


def finalize_digest(state: Word8) -> bytes:
    """Convert a final chaining value H_N into the 32-byte SHA-256 digest."""
    return b"".join(word.to_bytes(4, byteorder="big") for word in state)


def sha256(data: bytes) -> bytes:
    """Compute the SHA-256 digest of `data`."""
    return finalize_digest(digest_words(data))


def hexdigest(data: bytes) -> str:
    """Convenience helper to return the SHA-256 hex digest of `data`."""
    return sha256(data).hex()

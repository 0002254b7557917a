import heapq
import logging
import sys
from collections import Counter
from itertools import count

import numpy as np

logger = logging.getLogger(__name__)

# input bytes encoded per packing step
CHUNK_SIZE = 64 * 1024


# -----------------------------------------------------------
# ERRORS
# -----------------------------------------------------------
class HuffmanError(Exception):
    """Base class for errors raised by the compressor."""


class EmptyInputError(HuffmanError, ValueError):
    def __init__(self, message="Cannot compress empty input"):
        super().__init__(message)


class MissingCodeError(HuffmanError, KeyError):
    """A symbol in the input has no entry in the code table."""

    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"No Huffman code for symbol {symbol!r}")

    def __str__(self):
        return self.args[0]


# -----------------------------------------------------------
# TREE NODES
# -----------------------------------------------------------
class Leaf:
    """Huffman tree leaf holding one byte value and its count."""

    def __init__(self, symbol, weight):
        self.symbol = symbol
        self.weight = weight

    def __repr__(self):
        return f"Leaf({self.symbol!r}, {self.weight})"


class Internal:
    """Internal node: owns exactly two children, weighs their sum."""

    def __init__(self, left, right):
        self.left = left
        self.right = right
        self.weight = left.weight + right.weight

    def __repr__(self):
        return f"Internal({self.weight}, {self.left!r}, {self.right!r})"


# -----------------------------------------------------------
# RESULT
# -----------------------------------------------------------
class CompressionResult:
    def __init__(self, original_size, data, bit_length):
        self.original_size = original_size
        self.data = data
        self.bit_length = bit_length
        self.compressed_size = len(data)
        saved = original_size - self.compressed_size
        self.compression_percentage = round(saved / original_size * 100, 2)

    def to_dict(self):
        """JSON shape returned by the upload endpoint."""
        return {
            "originalSize": self.original_size,
            "compressedSize": self.compressed_size,
            "compressionPercentage": self.compression_percentage,
            "compressedData": list(self.data),
        }

    def __eq__(self, other):
        if not isinstance(other, CompressionResult):
            return NotImplemented
        return (self.original_size, self.data, self.bit_length) == (
            other.original_size, other.data, other.bit_length)

    def __repr__(self):
        return (f"CompressionResult(original_size={self.original_size}, "
                f"compressed_size={self.compressed_size}, "
                f"compression_percentage={self.compression_percentage})")


def _as_bytes(data):
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Expected bytes or str, got {type(data).__name__}")


# -----------------------------------------------------------
# FREQUENCY ANALYSIS
# -----------------------------------------------------------
def build_frequency_table(data):
    """Count each byte value; keys keep first-occurrence order."""
    data = _as_bytes(data)
    if not data:
        raise EmptyInputError()
    return dict(Counter(data))


# -----------------------------------------------------------
# TREE CONSTRUCTION
# -----------------------------------------------------------
def build_huffman_tree(freq):
    """
    Merge the two lightest nodes until one remains and return it.

    Heap entries are (weight, seq, node). Leaves are numbered in table order
    and every merged node gets the next number, so equal weights always pop
    oldest first and the same table always gives the same tree.
    """
    if not freq:
        raise EmptyInputError("Cannot build a Huffman tree from an empty table")

    seq = count()
    heap = [(weight, next(seq), Leaf(symbol, weight)) for symbol, weight in freq.items()]
    heapq.heapify(heap)

    while len(heap) > 1:
        _, _, left = heapq.heappop(heap)
        _, _, right = heapq.heappop(heap)
        merged = Internal(left, right)
        heapq.heappush(heap, (merged.weight, next(seq), merged))

    root = heap[0][2]
    logger.debug("Built Huffman tree over %d symbols, root weight %d", len(freq), root.weight)
    return root


# -----------------------------------------------------------
# CODE ASSIGNMENT
# -----------------------------------------------------------
def generate_codes(node, prefix=""):
    """Map every leaf symbol to its root-to-leaf path ('0' left, '1' right)."""
    if isinstance(node, Leaf):
        # a lone root leaf has no path; give it one bit
        return {node.symbol: prefix or "0"}

    codes = generate_codes(node.left, prefix + "0")
    codes.update(generate_codes(node.right, prefix + "1"))
    return codes


# -----------------------------------------------------------
# BIT PACKING
# -----------------------------------------------------------
def encode_bits(data, codes):
    data = _as_bytes(data)
    try:
        return "".join([codes[symbol] for symbol in data])
    except KeyError as e:
        raise MissingCodeError(e.args[0]) from None


def pack_bits(bits):
    """Pack a '0'/'1' string MSB-first; the last byte is zero-padded."""
    if not bits:
        return b""
    # '0' → 0, '1' → 1
    arr = np.frombuffer(bits.encode("ascii"), dtype=np.uint8) - ord("0")
    return np.packbits(arr, bitorder="big").tobytes()


def pack_bitstream(data, codes, chunk_size=CHUNK_SIZE):
    """
    Encode and pack ``data`` a chunk at a time; return (packed, bit_length).

    Only whole bytes are packed per chunk. Leftover bits carry into the next
    chunk, so the output matches packing the full bitstream at once.
    """
    data = _as_bytes(data)
    out = bytearray()
    bit_length = 0
    carry = ""

    for start in range(0, len(data), chunk_size):
        bits = carry + encode_bits(data[start:start + chunk_size], codes)
        bit_length += len(bits) - len(carry)
        whole = len(bits) - len(bits) % 8
        out += pack_bits(bits[:whole])
        carry = bits[whole:]

    out += pack_bits(carry)
    return bytes(out), bit_length


# -----------------------------------------------------------
# COMPRESSION
# -----------------------------------------------------------
def compress(data):
    """
    Huffman-encode ``data`` (bytes, or str taken as UTF-8).

    Raises EmptyInputError for empty input and TypeError for anything that
    is not bytes-like or str. The tree and code table are not
    part of the result, so the packed bytes cannot be decoded on their own.
    """
    data = _as_bytes(data)
    freq = build_frequency_table(data)
    root = build_huffman_tree(freq)
    codes = generate_codes(root)
    packed, bit_length = pack_bitstream(data, codes)

    result = CompressionResult(len(data), packed, bit_length)
    logger.debug("Compressed %d bytes to %d bytes (%d bits, %d symbols)",
                 result.original_size, result.compressed_size, bit_length, len(codes))
    return result


# -----------------------------------------------------------
# COMMAND LINE
# -----------------------------------------------------------
def compress_file(input_path, output_path):
    with open(input_path, "rb") as f:
        data = f.read()

    result = compress(data)

    with open(output_path, "wb") as f:
        f.write(result.data)

    return result


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 2:
        print("Usage: python huffman.py input_file output_file")
        return 1

    inp, outp = argv
    try:
        result = compress_file(inp, outp)
    except (EmptyInputError, OSError) as e:
        print(f"Compression failed: {e}")
        return 1

    print(f"Compressed '{inp}' → '{outp}'")
    print(f"Original Size: {result.original_size} bytes")
    print(f"Compressed Size: {result.compressed_size} bytes")
    print(f"Compression Percentage: {result.compression_percentage:.2f}%")
    return 0


if __name__ == "__main__":
    sys.exit(main())

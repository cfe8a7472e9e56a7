"""Immutable byte-sequence container used as alignment input."""
from typing import Union, Final, Any

import numpy as np


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class SeqError(ValueError):
    """Raised when an object cannot be used as an alignment sequence."""


# Classes --------------------------------------------------------------------------------------------------------------
class Seq:
    """
    Immutable sequence of byte symbols stored as a read-only ``uint8`` array.

    Symbols are raw bytes; no alphabet is imposed and comparison is exact
    (case-sensitive). Use ``Seq.coerce()`` to build one from common Python objects.

    Args:
        data: A one-dimensional numpy uint8 array.

    Examples:
        >>> seq = Seq.coerce('ACGT')
        >>> len(seq)
        4
        >>> bytes(seq[1:3])
        b'CG'
    """
    DTYPE: Final = np.uint8
    ENCODING: Final = 'ascii'
    __slots__ = ('_data',)

    def __init__(self, data: np.ndarray):
        self._data = data
        self._data.flags.writeable = False

    @classmethod
    def coerce(cls, obj: Any) -> 'Seq':
        """
        Builds a ``Seq`` from bytes-like objects, ASCII strings or integer arrays.

        Args:
            obj: A ``Seq``, ``bytes``, ``bytearray``, ``memoryview``, ``str`` or 1D integer numpy array.

        Returns:
            A ``Seq`` sharing memory with ``obj`` where that is safe, otherwise a copy.

        Raises:
            SeqError: If the object type is unsupported, a string is not ASCII, or an array is
                not one-dimensional or holds values outside 0-255.
        """
        if isinstance(obj, cls): return obj
        if isinstance(obj, str):
            if not obj.isascii(): raise SeqError('String sequences must be ASCII')
            return cls(np.frombuffer(obj.encode(cls.ENCODING), dtype=cls.DTYPE))
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls(np.frombuffer(bytes(obj), dtype=cls.DTYPE))
        if isinstance(obj, np.ndarray):
            if obj.ndim != 1: raise SeqError(f'Sequence arrays must be one-dimensional, got {obj.ndim} dimensions')
            if not np.issubdtype(obj.dtype, np.integer):
                raise SeqError(f'Sequence arrays must hold integers, got {obj.dtype}')
            if obj.size and (obj.min() < 0 or obj.max() > np.iinfo(cls.DTYPE).max):
                raise SeqError('Sequence array values must fit in a byte (0-255)')
            return cls(obj.astype(cls.DTYPE, copy=True))
        raise SeqError(f'Cannot build a sequence from {type(obj).__name__}')

    @property
    def encoded(self) -> np.ndarray:
        """Returns the underlying read-only ``uint8`` array (zero-copy)."""
        return self._data

    def __array__(self, dtype=None, copy=None):
        return self._data.astype(dtype, copy=False) if dtype else self._data

    def __bytes__(self) -> bytes: return self._data.tobytes()
    def __str__(self): return self._data.tobytes().decode('latin-1')
    def __len__(self): return self._data.shape[0]
    def __iter__(self): return iter(self._data)
    def __bool__(self): return len(self._data) > 0
    def __repr__(self):
        if len(self) <= 14: return f'Seq({self})'
        return f'Seq({str(self[:7])}...{str(self[-7:])})'

    def __eq__(self, other):
        if isinstance(other, Seq): return np.array_equal(self._data, other._data)
        return NotImplemented

    def __hash__(self): return hash(self._data.tobytes())

    def __getitem__(self, item: Union[int, slice]) -> Union[int, 'Seq']:
        if isinstance(item, slice): return Seq(self._data[item])
        return int(self._data[item])

import operator
import pickle

import numpy as np


class SpinWeightMismatchError(TypeError):
    """Raised when an operation would combine incompatible spin weights."""


def _normalize_data_type(data):
    if isinstance(data, np.ndarray):
        return np.ndarray
    if isinstance(data, bool):
        return bool
    if isinstance(data, int):
        return int
    if isinstance(data, float):
        return float
    if isinstance(data, complex):
        return complex
    if isinstance(data, np.generic):
        return type(data.item())
    return type(data)


def _split(value):
    """Return (spin, data) for a spin-weighted or plain operand."""
    if isinstance(value, SpinWeighted):
        return value.spin, value.data
    return 0, value


def _is_operand(value):
    return isinstance(value, (SpinWeighted, np.ndarray, np.generic, int, float, complex))


class SpinWeighted:
    """
    Numeric value (scalar or numpy array) tagged with an integer spin weight.

    ``SpinWeighted[data_type, spin]`` returns a cached subclass carrying the
    tag as class attributes, so ``SpinWeighted[np.ndarray, 1]`` plays the
    role of a distinct type for each spin. Arithmetic follows the spin
    addition rules:

        s + s -> s,   s - s -> s,   s1 * s2 -> s1 + s2,   s1 / s2 -> s1 - s2

    A plain (unweighted) operand acts as spin 0. Adding or subtracting
    different spins raises SpinWeightMismatchError.

    Construction:
        SpinWeighted[complex, 2](1.0 + 2.0j)
        SpinWeighted[np.ndarray, 1](np.ones(4))
        SpinWeighted[np.ndarray, -2](size=5, fill=4.0)
    """
    data_type = None
    spin = None

    __slots__ = ("_data",)
    __array_ufunc__ = None   # numpy must defer to our reflected operators
    __hash__ = None

    _types = {}

    def __class_getitem__(cls, params):
        data_type, spin = params
        if not isinstance(data_type, type):
            raise TypeError(f"SpinWeighted data type must be a type, got {data_type!r}")
        if isinstance(spin, bool) or not isinstance(spin, (int, np.integer)):
            raise TypeError(f"Spin weight must be an integer, got {spin!r}")
        spin = int(spin)
        key = (data_type, spin)
        if key not in SpinWeighted._types:
            name = f"SpinWeighted[{data_type.__name__}, {spin}]"
            SpinWeighted._types[key] = type(
                name, (SpinWeighted,),
                {"data_type": data_type, "spin": spin, "__slots__": ()})
        return SpinWeighted._types[key]

    def __init__(self, data=None, size=None, fill=0.0, dtype=complex, copy=True):
        if self.spin is None:
            raise TypeError("Instantiate a tagged type, e.g. SpinWeighted[np.ndarray, 0]")
        if self.data_type is np.ndarray:
            if data is None:
                data = np.full(0 if size is None else size, fill, dtype=dtype)
            elif size is not None:
                raise ValueError("Pass either data or size, not both")
            else:
                data = np.array(data) if copy else np.asarray(data)
        else:
            if size is not None:
                raise ValueError(f"{type(self).__name__} holds a scalar and cannot be sized")
            data = self.data_type() if data is None else self.data_type(data)
        self._data = data

    @classmethod
    def _from_data(cls, data):
        obj = object.__new__(cls)
        obj._data = data
        return obj

    @staticmethod
    def _wrap(data, spin):
        return SpinWeighted[_normalize_data_type(data), spin]._from_data(data)

    # ---- Data access ----------------------------------------------------
    @property
    def data(self):
        return self._data

    @data.setter
    def data(self, value):
        self._data = value

    @property
    def size(self):
        if isinstance(self._data, np.ndarray):
            return self._data.size
        return 1

    def __len__(self):
        return len(self._data)

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value):
        self._data[index] = value

    def __iter__(self):
        return iter(self._data)

    def _require_array(self, new_size):
        if not isinstance(self._data, np.ndarray):
            raise TypeError(
                f"{type(self).__name__} holds a scalar and cannot be resized to {new_size}")

    def resize(self, new_size):
        """Resize keeping the lower-indexed elements; growth is zero-filled."""
        if new_size == self.size:
            return
        self._require_array(new_size)
        new_data = np.zeros(new_size, dtype=self._data.dtype)
        n_keep = min(new_size, self.size)
        new_data[:n_keep] = self._data[:n_keep]
        self._data = new_data

    def destructive_resize(self, new_size):
        """
        Resize without preserving contents. A no-op when the size does not
        change; otherwise the storage is replaced.
        """
        if new_size == self.size:
            return
        self._require_array(new_size)
        self._data = np.zeros(new_size, dtype=self._data.dtype)

    # ---- Arithmetic -----------------------------------------------------
    def _combine(self, other, op, reflected=False):
        if not _is_operand(other):
            return NotImplemented
        other_spin, other_data = _split(other)
        if reflected:
            spin = _result_spin(op, other_spin, self.spin)
            return SpinWeighted._wrap(op(other_data, self._data), spin)
        spin = _result_spin(op, self.spin, other_spin)
        return SpinWeighted._wrap(op(self._data, other_data), spin)

    def __add__(self, other):
        return self._combine(other, operator.add)

    def __radd__(self, other):
        return self._combine(other, operator.add, reflected=True)

    def __sub__(self, other):
        return self._combine(other, operator.sub)

    def __rsub__(self, other):
        return self._combine(other, operator.sub, reflected=True)

    def __mul__(self, other):
        return self._combine(other, operator.mul)

    def __rmul__(self, other):
        return self._combine(other, operator.mul, reflected=True)

    def __truediv__(self, other):
        return self._combine(other, operator.truediv)

    def __rtruediv__(self, other):
        return self._combine(other, operator.truediv, reflected=True)

    def __neg__(self):
        return SpinWeighted._wrap(-self._data, self.spin)

    def __pos__(self):
        return SpinWeighted._wrap(+self._data, self.spin)

    def _combine_inplace(self, other, op, inplace_op):
        if not _is_operand(other):
            return NotImplemented
        other_spin, other_data = _split(other)
        if op in (operator.mul, operator.truediv):
            # The left-hand spin cannot change in place
            if other_spin != 0:
                raise SpinWeightMismatchError(
                    f"In-place {op.__name__} of spin {self.spin} by spin {other_spin} "
                    f"would change the spin weight")
        else:
            _result_spin(op, self.spin, other_spin)
        if isinstance(self._data, np.ndarray):
            inplace_op(self._data, other_data)
        else:
            result = op(self._data, other_data)
            if _normalize_data_type(result) is not self.data_type:
                raise TypeError(
                    f"In-place {op.__name__} would turn the {self.data_type.__name__} data of "
                    f"{type(self).__name__} into {_normalize_data_type(result).__name__}")
            self._data = result
        return self

    def __iadd__(self, other):
        return self._combine_inplace(other, operator.add, operator.iadd)

    def __isub__(self, other):
        return self._combine_inplace(other, operator.sub, operator.isub)

    def __imul__(self, other):
        return self._combine_inplace(other, operator.mul, operator.imul)

    def __itruediv__(self, other):
        return self._combine_inplace(other, operator.truediv, operator.itruediv)

    # ---- Comparison & misc ----------------------------------------------
    def __eq__(self, other):
        if not isinstance(other, SpinWeighted):
            return NotImplemented
        if self.spin != other.spin:
            return False
        if isinstance(self._data, np.ndarray) or isinstance(other._data, np.ndarray):
            return bool(np.array_equal(self._data, other._data))
        return bool(self._data == other._data)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return f"{type(self).__name__}({self._data!r})"

    def __reduce__(self):
        return (_rebuild, (self.data_type, self.spin, self._data))


def _rebuild(data_type, spin, data):
    return SpinWeighted[data_type, spin]._from_data(data)


def _result_spin(op, lhs_spin, rhs_spin):
    if op in (operator.add, operator.sub):
        if lhs_spin != rhs_spin:
            raise SpinWeightMismatchError(
                f"Cannot {op.__name__} spin-weighted values of spin "
                f"{lhs_spin} and {rhs_spin}")
        return lhs_spin
    if op is operator.mul:
        return lhs_spin + rhs_spin
    if op is operator.truediv:
        return lhs_spin - rhs_spin
    raise ValueError(f"Unsupported spin-weighted operation: {op!r}")


_SCALAR_RANKS = {bool: 0, int: 1, float: 2, complex: 3}


def _plain_data_type(t):
    if is_any_spin_weighted(t):
        return t.data_type
    if issubclass(t, np.ndarray):
        return np.ndarray
    if issubclass(t, np.generic):
        return type(t(0).item())
    return t


def _result_data_type(op, lhs, rhs):
    if lhs is np.ndarray or rhs is np.ndarray:
        return np.ndarray
    if lhs not in _SCALAR_RANKS or rhs not in _SCALAR_RANKS:
        return lhs
    data_type = max(lhs, rhs, key=_SCALAR_RANKS.get)
    if data_type is bool:
        data_type = int
    if op is operator.truediv and data_type is int:
        data_type = float
    return data_type


def result_type(op, lhs_type, rhs_type):
    """
    Spin-weighted type produced by ``op(lhs, rhs)`` without evaluating it.

    Either argument may be a SpinWeighted type or a plain type (spin 0).
    The data type is promoted the way the operators promote it: an array
    on either side gives an array, otherwise the wider of bool, int, float
    and complex (true division of integers gives float). Raises
    SpinWeightMismatchError for the same combinations the operators reject.
    """
    lhs_spin = lhs_type.spin if is_any_spin_weighted(lhs_type) else 0
    rhs_spin = rhs_type.spin if is_any_spin_weighted(rhs_type) else 0
    spin = _result_spin(op, lhs_spin, rhs_spin)
    data_type = _result_data_type(op, _plain_data_type(lhs_type), _plain_data_type(rhs_type))
    return SpinWeighted[data_type, spin]


# ---- Type predicates ----------------------------------------------------
def _as_type(x):
    return x if isinstance(x, type) else type(x)


def is_any_spin_weighted(x):
    t = _as_type(x)
    return issubclass(t, SpinWeighted) and t.spin is not None


def is_spin_weighted_of(data_type, x):
    return is_any_spin_weighted(x) and _as_type(x).data_type is data_type


def is_spin_weighted_of_same_type(x, y):
    return (is_any_spin_weighted(x) and is_any_spin_weighted(y)
            and _as_type(x).data_type is _as_type(y).data_type)


# ---- Element-wise functions ---------------------------------------------
def _require_spin_zero(x, name):
    if x.spin != 0:
        raise SpinWeightMismatchError(f"{name} is only defined for spin 0, got spin {x.spin}")


def exp(x):
    _require_spin_zero(x, "exp")
    return SpinWeighted._wrap(np.exp(x.data), 0)


def sqrt(x):
    _require_spin_zero(x, "sqrt")
    return SpinWeighted._wrap(np.sqrt(x.data), 0)


def real(x):
    _require_spin_zero(x, "real")
    return SpinWeighted._wrap(np.real(x.data), 0)


def imag(x):
    _require_spin_zero(x, "imag")
    return SpinWeighted._wrap(np.imag(x.data), 0)


def conj(x):
    """Complex conjugation flips the sign of the spin weight."""
    return SpinWeighted._wrap(np.conj(x.data), -x.spin)


# ---- Views, sizing, serialization ---------------------------------------
def make_const_view(source, offset, size):
    """
    Read-only view of ``size`` elements of ``source`` starting at ``offset``.

    The view shares storage with ``source`` and must not outlive it.
    """
    if offset < 0 or offset + size > source.size:
        raise ValueError(
            f"View [{offset}, {offset + size}) out of range for size {source.size}")
    view = source.data[offset:offset + size].view()
    view.flags.writeable = False
    return type(source)._from_data(view)


def make_with_value(sw_type, used_for_size, value):
    """
    Build a ``sw_type`` filled with ``value``.

    ``used_for_size`` is an integer size or anything ``np.size`` accepts;
    scalar types ignore it.
    """
    if sw_type.data_type is np.ndarray:
        n = used_for_size if isinstance(used_for_size, (int, np.integer)) else np.size(used_for_size)
        dtype = complex if isinstance(value, complex) else float
        return sw_type(size=int(n), fill=value, dtype=dtype)
    return sw_type(value)


def set_number_of_grid_points(x, used_for_size):
    """Match the number of points of ``x``; scalars are left untouched."""
    if not isinstance(x.data, np.ndarray):
        return
    n = used_for_size if isinstance(used_for_size, (int, np.integer)) else np.size(used_for_size)
    x.destructive_resize(int(n))


def serialize(x):
    return pickle.dumps(x)


def deserialize(buffer):
    return pickle.loads(buffer)

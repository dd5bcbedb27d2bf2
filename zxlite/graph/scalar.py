import cmath
import copy
import math
from fractions import Fraction
from typing import Any, Dict, Mapping

from ..errors import InvalidArgumentError
from ..utils import FractionLike, normalize_phase, phase_to_str, parse_phase


class Scalar:
    """Global scalar factor of a diagram, kept exactly.

    Represents ``sqrt(2)**power2 * exp(i*pi*phase)``, or exactly zero when
    ``is_zero`` is set. This covers every factor produced by the Clifford
    rewrites, which is all the rules in this package introduce."""

    def __init__(self) -> None:
        self.power2: int = 0
        self.phase: Fraction = Fraction(0)
        self.is_zero: bool = False

    def __repr__(self) -> str:
        return f"Scalar({self})"

    def __str__(self) -> str:
        if self.is_zero:
            return "0"
        return f"sqrt(2)^{self.power2} * exp(i*pi*{phase_to_str(self.phase)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        if self.is_zero or other.is_zero:
            return self.is_zero == other.is_zero
        return self.power2 == other.power2 and self.phase == other.phase

    def copy(self) -> "Scalar":
        return copy.copy(self)

    def is_one(self) -> bool:
        return not self.is_zero and self.power2 == 0 and self.phase == 0

    def to_number(self) -> complex:
        if self.is_zero:
            return 0j
        return math.sqrt(2) ** self.power2 * cmath.exp(1j * math.pi * float(self.phase))

    def add_power(self, n: int) -> None:
        """Multiplies the scalar by ``sqrt(2)**n``."""
        self.power2 += n

    def add_phase(self, phase: FractionLike) -> None:
        """Multiplies the scalar by ``exp(i*pi*phase)``."""
        self.phase = normalize_phase(self.phase + phase)

    def set_zero(self) -> None:
        self.is_zero = True

    def add_spider(self, phase: FractionLike) -> None:
        """Multiplies the scalar by the value of an isolated spider, ``1 + exp(i*pi*phase)``.
        Only Clifford phases have a value of the tracked form."""
        p = normalize_phase(phase)
        if p == 0:
            self.add_power(2)
        elif p == 1:
            self.set_zero()
        elif p == Fraction(1, 2):
            self.add_power(1)
            self.add_phase(Fraction(1, 4))
        elif p == Fraction(3, 2):
            self.add_power(1)
            self.add_phase(Fraction(7, 4))
        else:
            raise InvalidArgumentError(f"Spider with phase {p} has no exact scalar value")

    def mult_with(self, other: "Scalar") -> None:
        """Multiplies this scalar in place with ``other``."""
        if other.is_zero:
            self.set_zero()
        self.add_power(other.power2)
        self.add_phase(other.phase)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "power2": self.power2,
            "phase": phase_to_str(self.phase),
            "is_zero": self.is_zero,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Scalar":
        s = cls()
        try:
            s.power2 = int(d.get("power2", 0))
            s.phase = parse_phase(str(d.get("phase", "0")))
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Malformed scalar: {d!r}") from e
        is_zero = d.get("is_zero", False)
        if not isinstance(is_zero, bool):
            raise InvalidArgumentError(f"Scalar field 'is_zero' must be a boolean, got {is_zero!r}")
        s.is_zero = is_zero
        return s



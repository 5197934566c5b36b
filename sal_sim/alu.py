"""
SAL Simulator - ALU Operations

ADD and SUB are the only flag-setting instructions. Each function here
returns (result, zero, overflow) and leaves it to the caller to store
the result and apply the flags.

Overflow is judged on the mathematical result, not on a wrapped one:
  V = result < -2**31 or result > 2**31 - 1
The result is returned unclamped so the accumulator keeps the raw value.
"""

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1


def in_int32(value: int) -> bool:
    return INT32_MIN <= value <= INT32_MAX


def add32(a: int, b: int) -> tuple:
    """A + B. Sets Z, V."""
    result = a + b
    return (result, result == 0, not in_int32(result))


def sub32(a: int, b: int) -> tuple:
    """A - B. Sets Z, V."""
    result = a - b
    return (result, result == 0, not in_int32(result))

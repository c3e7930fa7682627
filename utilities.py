"""
Utilities module for letadd
Contains common helper functions shared by the evaluator and the harness
"""

from typing import Callable, Tuple

from terms import ERROR, NumberValue, Value, is_integer, is_number


def parse_binding(text: str) -> Tuple[str, Value]:
  """
  Split a NAME=INT command line binding

  Args:
    text: Binding text such as "x=5"

  Returns:
    (name, NumberValue)

  Raises:
    ValueError if the text is not NAME=INT

  Examples:
    parse_binding("x=5") -> ("x", NumberValue(5))
    parse_binding("y=-2") -> ("y", NumberValue(-2))
  """
  name, sep, raw = text.partition('=')
  name = name.strip()
  if not sep or not name:
    raise ValueError(f"Expected NAME=INT, got '{text}'")
  try:
    number = int(raw.strip())
  except ValueError:
    raise ValueError(f"Binding '{name}' needs an integer value, got '{raw}'") from None
  return name, NumberValue(number)


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(
  op: Callable[[int, int], int]
) -> Callable[[Value, Value], Value]:
  """
  Factory for binary arithmetic operations over Values

  Args:
    op: Python operator function (e.g., operator.add)

  Returns:
    Function returning NumberValue(op(x, y)) when both operands are
    NumberValues, and ERROR otherwise. Never raises.

  Examples:
    add = binary_arithmetic_op(operator.add)
    add(NumberValue(1), NumberValue(2)) -> NumberValue(3)
    add(NumberValue(1), ERROR) -> ERROR
  """
  def arithmetic(x: Value, y: Value) -> Value:
    if not (is_number(x) and is_number(y)):
      return ERROR
    result = op(x.value, y.value)
    if not is_integer(result):
      return ERROR
    return NumberValue(result)

  arithmetic.__name__ = getattr(op, '__name__', 'arithmetic')
  return arithmetic

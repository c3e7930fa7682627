"""
letadd term and value model
Closed sets of immutable tagged variants: Term (syntax) and Value (results)
"""

from dataclasses import dataclass
from typing import Any, List, Tuple, Union


# ============================================================================
# TERMS (Immutable AST nodes)
# ============================================================================

@dataclass(frozen=True)
class Var:
  """Reference to a bound name"""
  name: str

  def __str__(self) -> str:
    return f"{self.name}"


@dataclass(frozen=True)
class Let:
  """Bind `name` to the value of `bound` while evaluating `body`"""
  name: str
  bound: 'Term'
  body: 'Term'

  def __str__(self) -> str:
    return format_term(self)


@dataclass(frozen=True)
class Add:
  """Integer addition of two subterms"""
  lhs: 'Term'
  rhs: 'Term'

  def __str__(self) -> str:
    return format_term(self)


@dataclass(frozen=True)
class Number:
  """Integer literal"""
  value: int

  def __str__(self) -> str:
    return str(self.value)


Term = Union[Var, Let, Add, Number]

TERM_TYPES = (Var, Let, Add, Number)


# ============================================================================
# VALUES
# ============================================================================

@dataclass(frozen=True)
class NumberValue:
  value: int

  def __str__(self) -> str:
    return str(self.value)


@dataclass(frozen=True)
class ErrorValue:
  """The uniform failure sentinel. Carries no cause."""

  def __str__(self) -> str:
    return "<error>"


Value = Union[NumberValue, ErrorValue]

ERROR = ErrorValue()


# ============================================================================
# PREDICATES AND FORMATTING
# ============================================================================

def is_integer(value: Any) -> bool:
  """True for int payloads; bool is not accepted as a number"""
  return isinstance(value, int) and not isinstance(value, bool)


def is_error(value: Any) -> bool:
  return isinstance(value, ErrorValue)


def is_number(value: Any) -> bool:
  return isinstance(value, NumberValue) and is_integer(value.value)


def node_kind(term: Any) -> str:
  """Upper-case tag name used in traces, e.g. LET or NUMBER"""
  if isinstance(term, TERM_TYPES):
    return type(term).__name__.upper()
  return "UNKNOWN"


def format_term(term: Any) -> str:
  """Render a term for humans; unknown objects fall back to repr.
  Iterative, so deeply nested terms render without recursion."""
  parts: List[str] = []
  # Each entry is (is_text, item): literal text, or a subterm still to render
  pending: List[Tuple[bool, Any]] = [(False, term)]

  while pending:
    is_text, item = pending.pop()
    if is_text:
      parts.append(item)
    elif isinstance(item, Let):
      pending.extend(reversed([
          (True, f"let {item.name} = "), (False, item.bound), (True, " in "), (False, item.body)
      ]))
    elif isinstance(item, Add):
      pending.extend(reversed([
          (True, "("), (False, item.lhs), (True, " + "), (False, item.rhs), (True, ")")
      ]))
    elif isinstance(item, Var):
      parts.append(f"{item.name}")
    elif isinstance(item, Number):
      parts.append(str(item.value))
    else:
      parts.append(f"<malformed {item!r}>")

  return "".join(parts)


def format_value(value: Any) -> str:
  if isinstance(value, (NumberValue, ErrorValue)):
    return str(value)
  return f"<not a value {value!r}>"

"""
JSON codec for letadd terms
Terms are tagged objects with a "kind" discriminator, e.g.
  {"kind": "Let", "name": "x", "value": {"kind": "Number", "value": 2},
   "body": {"kind": "Var", "name": "x"}}
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from error_handling import TermFormatError
from terms import Add, ErrorValue, Let, Number, NumberValue, Var, is_integer


# ============================================================================
# ENCODING
# ============================================================================

def term_to_dict(term: Any) -> Dict:
  """Convert a term tree to nested JSON-ready dicts"""
  if isinstance(term, Var):
    return {'kind': 'Var', 'name': term.name}
  elif isinstance(term, Let):
    return {
        'kind': 'Let',
        'name': term.name,
        'value': term_to_dict(term.bound),
        'body': term_to_dict(term.body)
    }
  elif isinstance(term, Add):
    return {'kind': 'Add', 'lhs': term_to_dict(term.lhs), 'rhs': term_to_dict(term.rhs)}
  elif isinstance(term, Number):
    return {'kind': 'Number', 'value': term.value}
  raise TermFormatError(f"Cannot encode {term!r}")


def value_to_dict(value: Any) -> Dict:
  if isinstance(value, NumberValue):
    return {'kind': 'NumberValue', 'value': value.value}
  elif isinstance(value, ErrorValue):
    return {'kind': 'ErrorValue'}
  raise TermFormatError(f"Cannot encode value {value!r}")


def dumps_term(term: Any, indent: Optional[int] = None) -> str:
  return json.dumps(term_to_dict(term), indent=indent)


# ============================================================================
# DECODING
# ============================================================================

def require_field(data: Dict, key: str, path: str) -> Any:
  if key not in data:
    raise TermFormatError(f"Missing field '{key}'", path)
  return data[key]


def require_name(data: Dict, path: str) -> str:
  name = require_field(data, 'name', path)
  if not isinstance(name, str):
    raise TermFormatError(f"Field 'name' must be a string, got {name!r}", f"{path}.name")
  return name


def term_from_dict(data: Any, path: str = "$") -> Union[Var, Let, Add, Number]:
  """Build a term tree from nested dicts, validating every node"""
  if not isinstance(data, dict):
    raise TermFormatError(f"Expected an object, got {type(data).__name__}", path)

  kind = require_field(data, 'kind', path)

  if kind == 'Var':
    return Var(require_name(data, path))
  elif kind == 'Let':
    name = require_name(data, path)
    bound = term_from_dict(require_field(data, 'value', path), f"{path}.value")
    body = term_from_dict(require_field(data, 'body', path), f"{path}.body")
    return Let(name, bound, body)
  elif kind == 'Add':
    lhs = term_from_dict(require_field(data, 'lhs', path), f"{path}.lhs")
    rhs = term_from_dict(require_field(data, 'rhs', path), f"{path}.rhs")
    return Add(lhs, rhs)
  elif kind == 'Number':
    value = require_field(data, 'value', path)
    if not is_integer(value):
      raise TermFormatError(f"Field 'value' must be an integer, got {value!r}", f"{path}.value")
    return Number(value)

  raise TermFormatError(f"Unknown term kind {kind!r}", f"{path}.kind")


def loads_term(text: str):
  try:
    data = json.loads(text)
  except json.JSONDecodeError as e:
    raise TermFormatError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
  return term_from_dict(data)


def load_term_file(file_path: Union[str, Path]):
  """Read and decode a JSON term file"""
  with open(file_path, 'r', encoding='utf-8') as f:
    return loads_term(f.read())

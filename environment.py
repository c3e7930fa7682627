"""
letadd persistent environment
Immutable singly-linked chain of bindings with structural sharing
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

from terms import Value


# ============================================================================
# DATA STRUCTURES (Immutable linked chain)
# ============================================================================

@dataclass(frozen=True)
class EmptyEnv:
  """Terminal node of every environment chain"""

  def __str__(self) -> str:
    return "{}"


@dataclass(frozen=True)
class Binding:
  """One binding node; `tail` is the environment it extends"""
  name: str
  value: Value
  tail: 'Environment'

  def __str__(self) -> str:
    pairs = ", ".join(f"{name} = {value}" for name, value in env_items(self))
    return "{" + pairs + "}"


Environment = Union[Binding, EmptyEnv]

EMPTY_ENV = EmptyEnv()


# ============================================================================
# CORE OPERATIONS
# ============================================================================

def new_env() -> Environment:
  """Return the empty environment"""
  return EMPTY_ENV


def extend(env: Environment, name: str, value: Value) -> Environment:
  """Return new environment with name bound to value; env is left untouched"""
  return Binding(name, value, env)


def lookup(env: Environment, name: str) -> Optional[Value]:
  """Look up the binding nearest the head; None if the name is unbound"""
  node = env
  while isinstance(node, Binding):
    if node.name == name:
      return node.value
    node = node.tail
  return None


# ============================================================================
# READ-ONLY HELPERS
# ============================================================================

def env_items(env: Environment) -> Iterator[Tuple[str, Value]]:
  """Yield (name, value) pairs head first, shadowed bindings included"""
  node = env
  while isinstance(node, Binding):
    yield node.name, node.value
    node = node.tail


def env_depth(env: Environment) -> int:
  return sum(1 for _ in env_items(env))


def env_visible_bindings(env: Environment) -> Dict[str, Value]:
  """Bindings currently in scope, nearest binding wins"""
  visible: Dict[str, Value] = {}
  for name, value in env_items(env):
    visible.setdefault(name, value)
  return visible


def env_from_bindings(pairs: Iterable[Tuple[str, Value]], base: Optional[Environment] = None) -> Environment:
  """Extend base with each pair in order; later pairs shadow earlier ones"""
  env = new_env() if base is None else base
  for name, value in pairs:
    env = extend(env, name, value)
  return env

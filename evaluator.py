"""
letadd Evaluator - Pure Functional Style
Reduces a Term in an Environment to a Value. Failures are values, never exceptions
"""

from typing import Any, Dict, List, Optional, Tuple

from environment import Environment, extend, lookup, new_env
from error_handling import make_evaluation_error
from stdlib import add_numbers
from terms import (
  ERROR,
  Add,
  Let,
  Number,
  NumberValue,
  Value,
  Var,
  format_term,
  format_value,
  is_integer,
  node_kind,
)


# ============================================================================
# EXECUTION CONTEXT
# ============================================================================

def make_execution_context(depth: int = 0) -> Dict:
  """Create an execution context; depth only drives trace indentation"""
  return {
      'depth': depth
  }


def nested_context(context: Dict) -> Dict:
  """Return a copy of context one level deeper"""
  return {**context, 'depth': context['depth'] + 1}


def trace(context: Dict, message: str) -> None:
  print(f"{'  ' * context['depth']}{message}")


# ============================================================================
# EVALUATION
# ============================================================================

# Work stack frame tags
EVAL = 'eval'        # (EVAL, term, env, context)
BIND = 'bind'        # (BIND, let_term, env, context): bound value is on the value stack
COMBINE = 'combine'  # (COMBINE,): both operands of an Add are on the value stack
RETURN = 'return'    # (RETURN, context): trace the finished result of a Let or Add


def evaluate(term: Any, env: Environment, debug: bool = False, context: Optional[Dict] = None) -> Value:
  """
  Evaluate a term in an environment and return its Value.
  Total: unbound names, malformed terms and bad operands all yield ERROR.

  Runs on an explicit work stack, so nesting depth is not limited by the
  Python call stack. Operands of Add are evaluated left to right.
  """
  if context is None:
    context = make_execution_context()

  values: List[Value] = []
  stack: List[Tuple] = [(EVAL, term, env, context)]

  while stack:
    frame = stack.pop()
    tag = frame[0]

    if tag == EVAL:
      _, node, node_env, node_context = frame
      if debug:
        trace(node_context, f"Evaluating: {node_kind(node)} {format_term(node)}")

      if isinstance(node, Let) and isinstance(node.name, str):
        inner = nested_context(node_context)
        stack.append((RETURN, node_context))
        stack.append((BIND, node, node_env, node_context))
        stack.append((EVAL, node.bound, node_env, inner))
      elif isinstance(node, Add):
        inner = nested_context(node_context)
        stack.append((RETURN, node_context))
        stack.append((COMBINE,))
        stack.append((EVAL, node.rhs, node_env, inner))
        stack.append((EVAL, node.lhs, node_env, inner))
      else:
        result = eval_leaf(node, node_env, debug, node_context)
        values.append(result)
        if debug:
          trace(node_context, f"=> {format_value(result)}")

    elif tag == BIND:
      _, node, node_env, node_context = frame
      bound_val = values.pop()
      if debug:
        trace(node_context, f"Bound: {node.name} = {format_value(bound_val)}")
      # The name is bound even when the bound value is ERROR
      body_env = extend(node_env, node.name, bound_val)
      stack.append((EVAL, node.body, body_env, nested_context(node_context)))

    elif tag == COMBINE:
      right_val = values.pop()
      left_val = values.pop()
      values.append(add_numbers(left_val, right_val))

    elif tag == RETURN:
      if debug:
        trace(frame[1], f"=> {format_value(values[-1])}")

  return values.pop()


def eval_leaf(term: Any, env: Environment, debug: bool = False, context: Optional[Dict] = None) -> Value:
  """Evaluate a term that has no subterms left to schedule"""
  if isinstance(term, Var):
    return eval_var(term, env, debug, context)
  elif isinstance(term, Number):
    return eval_number(term, env, debug, context)
  # Unknown objects, and a Let whose name is not a string
  return ERROR


def eval_var(term: Var, env: Environment, debug: bool = False, context: Optional[Dict] = None) -> Value:
  """Evaluate variable reference by looking it up in the environment"""
  if not isinstance(term.name, str):
    return ERROR

  value = lookup(env, term.name)
  if value is None:
    if debug:
      trace(context, f"Unbound variable {term.name}")
    return ERROR

  return value


def eval_number(term: Number, env: Environment, debug: bool = False, context: Optional[Dict] = None) -> Value:
  """Evaluate number literal"""
  if not is_integer(term.value):
    return ERROR
  return NumberValue(term.value)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def run_term(term: Any, env: Optional[Environment] = None, debug: bool = False) -> Value:
  """Evaluate term and raise EvaluationError if the result is ERROR"""
  if env is None:
    env = new_env()

  result = evaluate(term, env, debug)
  if isinstance(result, NumberValue):
    return result

  raise make_evaluation_error(term, env)


def create_evaluator(debug: bool = False):
  """Factory function returning an evaluator bound to a debug setting"""
  def evaluate_func(term, env=None):
    return evaluate(term, new_env() if env is None else env, debug)

  def run_func(term, env=None):
    return run_term(term, env, debug)

  return type('Evaluator', (), {
      'debug': debug,
      'evaluate': lambda self, term, env=None: evaluate_func(term, env),
      'run': lambda self, term, env=None: run_func(term, env),
  })()


def create_debug_evaluator():
  """Factory function returning a tracing evaluator"""
  return create_evaluator(debug=True)

"""
Evaluator tests for letadd
Covers the evaluation rules, error propagation and the example scenarios
"""

import pytest
from environment import env_from_bindings, extend, lookup, new_env
from error_handling import EvaluationError
from evaluator import create_debug_evaluator, create_evaluator, evaluate, run_term
from programs import (
  ERROR_BINDING_PROGRAM,
  NESTED_LET_PROGRAM,
  PROGRAM,
  PROGRAM2,
  SHADOWING_PROGRAM,
  UNBOUND_PROGRAM,
)
from stdlib import add_numbers
from terms import ERROR, Add, ErrorValue, Let, Number, NumberValue, Var


class TestScenarios:
  """Test the reference programs"""

  def test_program(self, empty_env):
    assert evaluate(PROGRAM, empty_env) == NumberValue(5)

  def test_program2(self, empty_env):
    assert evaluate(PROGRAM2, empty_env) == NumberValue(2)

  def test_unbound_variable(self, empty_env):
    assert evaluate(UNBOUND_PROGRAM, empty_env) == ERROR

  def test_nested_let_inside_addition(self, empty_env):
    assert evaluate(NESTED_LET_PROGRAM, empty_env) == NumberValue(5)

  def test_error_propagates_through_binding(self, empty_env):
    assert evaluate(ERROR_BINDING_PROGRAM, empty_env) == ERROR

  def test_shadowing_sees_outer_binding_in_bound_expression(self, empty_env):
    assert evaluate(SHADOWING_PROGRAM, empty_env) == NumberValue(11)


class TestRules:
  """Test each evaluation rule"""

  @pytest.mark.parametrize("k", [0, 1, -7, 2 ** 70])
  def test_number_literal(self, k):
    env = extend(new_env(), "x", NumberValue(99))
    assert evaluate(Number(k), env) == NumberValue(k)

  @pytest.mark.parametrize("a, b", [(1, 2), (-5, 5), (10 ** 20, 10 ** 20)])
  def test_addition(self, a, b, empty_env):
    assert evaluate(Add(Number(a), Number(b)), empty_env) == NumberValue(a + b)

  def test_addition_with_unbound_operand(self, empty_env):
    assert evaluate(Add(Number(1), Var("undefined")), empty_env) == ERROR
    assert evaluate(Add(Var("undefined"), Number(1)), empty_env) == ERROR

  def test_var_returns_bound_value_unchanged(self):
    env = extend(new_env(), "x", NumberValue(3))
    assert evaluate(Var("x"), env) == NumberValue(3)

  def test_var_not_in_env(self):
    env = env_from_bindings([("a", NumberValue(1)), ("b", NumberValue(2))])
    assert lookup(env, "c") is None
    assert evaluate(Var("c"), env) == ERROR

  def test_let_binds_error_value(self, empty_env):
    term = Let("z", Var("missing"), Add(Var("z"), Number(1)))
    assert evaluate(term, empty_env) == ERROR

  def test_let_bound_error_shadows_outer_number(self):
    env = extend(new_env(), "z", NumberValue(10))
    term = Let("z", Var("missing"), Var("z"))
    assert evaluate(term, env) == ERROR

  def test_let_body_independent_of_unused_error(self, empty_env):
    term = Let("unused", Var("missing"), Number(4))
    assert evaluate(term, empty_env) == NumberValue(4)

  def test_let_does_not_leak_outside_its_body(self, empty_env):
    term = Add(Let("y", Number(4), Var("y")), Var("y"))
    assert evaluate(term, empty_env) == ERROR

  def test_operands_share_the_same_environment(self):
    env = extend(new_env(), "x", NumberValue(1))
    term = Add(Let("x", Number(100), Var("x")), Var("x"))
    assert evaluate(term, env) == NumberValue(101)

  def test_evaluation_does_not_change_caller_env(self):
    env = extend(new_env(), "x", NumberValue(1))
    evaluate(Let("x", Number(2), Var("x")), env)
    assert lookup(env, "x") == NumberValue(1)


class TestTotality:
  """Test that malformed input yields ERROR instead of raising"""

  @pytest.mark.parametrize("term", [
      None,
      42,
      "x",
      ("Number", 1),
      NumberValue(1),
      ERROR,
      Number(True),
      Number("2"),
      Number(2.5),
      Var(3),
      Let(None, Number(1), Number(2)),
      Add(Number(1), object()),
      Let("x", "junk", Var("x")),
  ])
  def test_malformed_terms(self, term, empty_env):
    assert evaluate(term, empty_env) == ERROR

  def test_error_never_equals_a_number(self):
    assert ErrorValue() == ERROR
    assert ERROR != NumberValue(0)
    assert NumberValue(0) != ERROR

  def test_deep_let_chain(self, empty_env):
    term = Var("v0")
    for i in range(5000):
      term = Let(f"v{i}", Number(i), term)
    assert evaluate(term, empty_env) == NumberValue(0)


def left_nested_sum(depth):
  term = Number(0)
  for _ in range(depth):
    term = Add(term, Number(1))
  return term


class TestDeepNesting:
  """Test terms nested far beyond the interpreter recursion limit"""

  def test_left_nested_addition(self, empty_env):
    assert evaluate(left_nested_sum(5000), empty_env) == NumberValue(5000)

  def test_right_nested_addition(self, empty_env):
    term = Number(0)
    for _ in range(5000):
      term = Add(Number(1), term)
    assert evaluate(term, empty_env) == NumberValue(5000)

  def test_let_nested_in_bound_position(self, empty_env):
    term = Number(1)
    for _ in range(5000):
      term = Let("x", term, Add(Var("x"), Number(1)))
    assert evaluate(term, empty_env) == NumberValue(5001)

  def test_let_chain_reading_previous_binding(self, empty_env):
    body = Var("v4999")
    for i in range(4999, 0, -1):
      body = Let(f"v{i}", Add(Var(f"v{i - 1}"), Number(1)), body)
    assert evaluate(Let("v0", Number(0), body), empty_env) == NumberValue(4999)

  def test_deep_error_propagates(self, empty_env):
    term = Var("missing")
    for _ in range(5000):
      term = Add(term, Number(1))
    assert evaluate(term, empty_env) == ERROR

  def test_deep_debug_trace(self, capsys, empty_env):
    assert evaluate(left_nested_sum(1200), empty_env, debug=True) == NumberValue(1200)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("Evaluating: ADD (")
    assert lines[1200] == f"{'  ' * 1200}Evaluating: NUMBER 0"
    assert lines[-1] == "=> 1200"

  def test_run_term_on_deep_error(self, empty_env):
    term = Let("z", Var("missing"), left_nested_sum(1500))
    term = Add(term, Var("z"))
    with pytest.raises(EvaluationError) as exc_info:
      run_term(term, empty_env)
    assert "Unbound variable 'missing'" in str(exc_info.value)


class TestPurity:
  """Test determinism of evaluation"""

  def test_repeated_evaluation_is_identical(self):
    env = extend(new_env(), "x", NumberValue(3))
    term = Let("y", Add(Var("x"), Number(4)), Add(Var("y"), Var("x")))
    results = [evaluate(term, env) for _ in range(5)]
    assert results == [NumberValue(10)] * 5

  def test_debug_trace_does_not_change_result(self, capsys, empty_env):
    assert evaluate(PROGRAM, empty_env, debug=True) == evaluate(PROGRAM, empty_env)
    assert "Evaluating: LET" in capsys.readouterr().out


class TestAddNumbers:
  """Test the arithmetic combinator"""

  def test_two_numbers(self):
    assert add_numbers(NumberValue(2), NumberValue(3)) == NumberValue(5)

  @pytest.mark.parametrize("a, b", [
      (ERROR, NumberValue(1)),
      (NumberValue(1), ERROR),
      (ERROR, ERROR),
      (NumberValue(1), None),
      (NumberValue(True), NumberValue(1)),
  ])
  def test_non_numbers(self, a, b):
    assert add_numbers(a, b) == ERROR


class TestTrace:
  """Test debug trace output"""

  def test_trace_is_indented_and_left_to_right(self, capsys, empty_env):
    evaluate(Add(Number(1), Number(2)), empty_env, debug=True)
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "Evaluating: ADD (1 + 2)",
        "  Evaluating: NUMBER 1",
        "  => 1",
        "  Evaluating: NUMBER 2",
        "  => 2",
        "=> 3",
    ]

  def test_trace_reports_unbound_and_binding(self, capsys, empty_env):
    evaluate(ERROR_BINDING_PROGRAM, empty_env, debug=True)
    out = capsys.readouterr().out
    assert "Unbound variable missing" in out
    assert "Bound: z = <error>" in out

  def test_no_output_without_debug(self, capsys, empty_env):
    evaluate(PROGRAM, empty_env)
    assert capsys.readouterr().out == ""


class TestFactories:
  """Test evaluator factories and run_term"""

  def test_evaluator_defaults_to_empty_env(self):
    evaluator = create_evaluator()
    assert evaluator.debug is False
    assert evaluator.evaluate(PROGRAM) == NumberValue(5)

  def test_evaluator_uses_given_env(self):
    env = extend(new_env(), "x", NumberValue(40))
    assert create_evaluator().evaluate(Add(Var("x"), Number(2)), env) == NumberValue(42)

  def test_debug_evaluator_traces(self, capsys):
    evaluator = create_debug_evaluator()
    assert evaluator.debug is True
    assert evaluator.run(PROGRAM2) == NumberValue(2)
    assert "Evaluating: VAR x" in capsys.readouterr().out

  def test_run_term_success(self):
    assert run_term(PROGRAM) == NumberValue(5)

  def test_run_term_raises_on_error(self):
    with pytest.raises(EvaluationError) as exc_info:
      run_term(ERROR_BINDING_PROGRAM)
    assert exc_info.value.term == ERROR_BINDING_PROGRAM
    assert any("'missing'" in s for s in exc_info.value.suggestions)

  def test_run_term_snapshot(self):
    env = env_from_bindings([("a", NumberValue(1))])
    with pytest.raises(EvaluationError) as exc_info:
      create_evaluator().run(Var("b"), env)
    assert exc_info.value.env_snapshot == {"a": NumberValue(1)}

"""
Example letadd programs
Prebuilt terms used by the command line harness and the tests
"""

from typing import Dict, List

from terms import Add, Let, Number, Var


# let x = 2 in x + 3
PROGRAM = Let("x", Number(2), Add(Var("x"), Number(3)))

# let x = 2 in x
PROGRAM2 = Let("x", Number(2), Var("x"))

# x, with nothing bound
UNBOUND_PROGRAM = Var("x")

# 1 + (let y = 4 in y)
NESTED_LET_PROGRAM = Add(Number(1), Let("y", Number(4), Var("y")))

# let z = missing in z
ERROR_BINDING_PROGRAM = Let("z", Var("missing"), Var("z"))

# let x = 1 in let x = x + 10 in x
SHADOWING_PROGRAM = Let("x", Number(1), Let("x", Add(Var("x"), Number(10)), Var("x")))


EXAMPLE_PROGRAMS: Dict[str, object] = {
    'program': PROGRAM,
    'program2': PROGRAM2,
    'unbound': UNBOUND_PROGRAM,
    'nested-let': NESTED_LET_PROGRAM,
    'error-binding': ERROR_BINDING_PROGRAM,
    'shadowing': SHADOWING_PROGRAM,
}


def list_example_programs() -> List[str]:
  return sorted(EXAMPLE_PROGRAMS)


def get_example_program(name: str):
  """Look up an example program by name"""
  if name not in EXAMPLE_PROGRAMS:
    raise KeyError(f"Unknown example program: {name}")
  return EXAMPLE_PROGRAMS[name]

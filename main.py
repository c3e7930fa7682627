"""
letadd - Main Entry Point
Evaluates prebuilt example programs or JSON-encoded terms
"""

import sys
import argparse
import json
from typing import List, Optional, Tuple

from codec import load_term_file, dumps_term, value_to_dict
from environment import Environment, env_from_bindings
from error_handling import TermFormatError, find_unbound_names, make_evaluation_error
from evaluator import create_evaluator, create_debug_evaluator
from programs import EXAMPLE_PROGRAMS, get_example_program, list_example_programs
from terms import NumberValue, Value, format_term, format_value
from utilities import parse_binding
from workers import evaluate_concurrently


VERSION = 'letadd v0.1.0'


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='letadd - evaluate let/add terms over a persistent environment',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s program                        # Evaluate the example 'program'
  %(prog)s --list                         # List example programs
  %(prog)s --term-file term.json          # Evaluate a JSON-encoded term
  %(prog)s --term-file a.json b.json -j 4 # Evaluate several terms concurrently
  %(prog)s unbound --bind x=5             # Pre-bind x before evaluating
  %(prog)s --debug program                # Trace every evaluation step
        """
  )

  parser.add_argument(
      'program',
      nargs='?',
      help='Name of an example program to evaluate'
  )

  parser.add_argument(
      '-f', '--term-file',
      nargs='+',
      metavar='FILE',
      help='JSON term file(s) to evaluate'
  )

  parser.add_argument(
      '-b', '--bind',
      action='append',
      default=[],
      metavar='NAME=INT',
      help='Bind NAME to an integer in the starting environment (repeatable)'
  )

  parser.add_argument(
      '-j', '--jobs',
      type=int,
      default=1,
      help='Number of evaluator actors used for several term files'
  )

  parser.add_argument(
      '--list',
      action='store_true',
      help='List example programs'
  )

  parser.add_argument(
      '--dump',
      action='store_true',
      help='Print the selected terms as JSON instead of evaluating them'
  )

  parser.add_argument(
      '--json',
      action='store_true',
      help='Print results as JSON'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable evaluation trace output'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def build_environment(bindings: List[str]) -> Environment:
  """Build the starting environment from NAME=INT arguments"""
  return env_from_bindings(parse_binding(text) for text in bindings)


def load_terms(args: argparse.Namespace) -> List[Tuple[str, object]]:
  """Collect (label, term) pairs selected on the command line"""
  selected = []
  if args.program:
    selected.append((args.program, get_example_program(args.program)))
  for script_path in args.term_file or []:
    selected.append((script_path, load_term_file(script_path)))
  return selected


def show_examples() -> None:
  print("Example programs:")
  for name in list_example_programs():
    print(f"  {name:<14} {format_term(EXAMPLE_PROGRAMS[name])}")


def print_result(label: str, term, result: Value, as_json: bool) -> None:
  if as_json:
    print(json.dumps({'source': label, 'result': value_to_dict(result)}))
  else:
    print(f"{label}: {format_term(term)}")
    print(f"=> {format_value(result)}")


def evaluate_terms(selected: List[Tuple[str, object]], env: Environment, jobs: int, debug: bool) -> List[Value]:
  """Evaluate every selected term, through the actor pool when jobs > 1"""
  if jobs > 1 and len(selected) > 1:
    return evaluate_concurrently([(term, env) for _, term in selected], pool_size=jobs, debug=debug)

  evaluator = create_debug_evaluator() if debug else create_evaluator()
  return [evaluator.evaluate(term, env) for _, term in selected]


def run(args: argparse.Namespace) -> int:
  """Run the selected terms and return the process exit status"""
  try:
    env = build_environment(args.bind)
    selected = load_terms(args)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode term file: {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
    return 1
  except ValueError as e:
    print(f"Error: {e}")
    return 2
  except KeyError as e:
    print(f"Error: {e.args[0]}")
    print(f"  Hint: Use --list to see the available example programs")
    return 2
  except FileNotFoundError as e:
    print(f"Error: Term file '{e.filename}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    return 1
  except PermissionError as e:
    print(f"Error: Permission denied reading '{e.filename}'")
    return 1
  except TermFormatError as e:
    print(f"Error: {e}")
    return 1

  if args.dump:
    for _, term in selected:
      print(dumps_term(term, indent=2))
    return 0

  results = evaluate_terms(selected, env, args.jobs, args.debug)

  status = 0
  for (label, term), result in zip(selected, results):
    print_result(label, term, result, args.json)
    if not isinstance(result, NumberValue):
      if not args.json:
        print(f"\n{make_evaluation_error(term, env)}")
        for name in find_unbound_names(term, env):
          print(f"  Hint: pass --bind {name}=INT to bind '{name}' from the command line")
      status = 1
  return status


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for letadd"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.jobs < 1:
    arg_parser.error("--jobs must be at least 1")

  if args.list:
    show_examples()
    return

  if not args.program and not args.term_file:
    arg_parser.print_help()
    print()
    show_examples()
    return

  try:
    status = run(args)
  except Exception as e:
    print(f"Unexpected error: {e}")
    if args.debug:
      import traceback
      traceback.print_exc()
    status = 1

  if status:
    sys.exit(status)


if __name__ == "__main__":
  main()

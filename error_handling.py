"""
Error reporting for letadd callers
The evaluator itself never raises; these helpers explain an ERROR after the fact
"""

from typing import Any, Dict, List, Optional, Tuple

from environment import Environment, env_visible_bindings, extend, lookup
from terms import ERROR, Add, Let, Number, Var, format_term, format_value, is_error, is_integer


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_evaluation_report(
    message: str,
    term: Any = None,
    env_snapshot: Optional[Dict] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable evaluation failure report"""
    return {
        'message': message,
        'term': term,
        'env_snapshot': env_snapshot or {},
        'suggestions': suggestions or []
    }


def format_evaluation_report(report: Dict) -> str:
    """Format evaluation failure report as string"""
    error_msg = f"Evaluation error: {report['message']}\n"

    if report['term'] is not None:
        error_msg += f"  Term: {format_term(report['term'])}\n"

    if report['env_snapshot']:
        error_msg += f"  Bindings in scope:\n"
        for name, value in report['env_snapshot'].items():
            error_msg += f"    {name} = {format_value(value)}\n"

    if report['suggestions']:
        error_msg += f"  Suggestions:\n"
        for suggestion in report['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def find_unbound_names(term: Any, env: Environment) -> List[str]:
    """Names referenced where no binding is in scope, in first-use order"""
    found: List[str] = []
    pending: List[Tuple[Any, Environment]] = [(term, env)]

    while pending:
        node, scope = pending.pop()
        if isinstance(node, Var):
            if isinstance(node.name, str) and lookup(scope, node.name) is None and node.name not in found:
                found.append(node.name)
        elif isinstance(node, Let):
            if isinstance(node.name, str):
                # Placeholder value: only presence of the name matters here
                pending.append((node.body, extend(scope, node.name, ERROR)))
            pending.append((node.bound, scope))
        elif isinstance(node, Add):
            pending.append((node.rhs, scope))
            pending.append((node.lhs, scope))

    return found


def find_malformed_nodes(term: Any) -> List[str]:
    """Render every subterm the evaluator treats as malformed"""
    found: List[str] = []
    pending: List[Any] = [term]

    while pending:
        node = pending.pop()
        if isinstance(node, Var):
            if not isinstance(node.name, str):
                found.append(f"Var with non-string name {node.name!r}")
        elif isinstance(node, Let):
            if not isinstance(node.name, str):
                found.append(f"Let with non-string name {node.name!r}")
                continue
            pending.append(node.body)
            pending.append(node.bound)
        elif isinstance(node, Add):
            pending.append(node.rhs)
            pending.append(node.lhs)
        elif isinstance(node, Number):
            if not is_integer(node.value):
                found.append(f"Number with non-integer value {node.value!r}")
        else:
            found.append(f"Unknown term {node!r}")

    return found


def find_failing_lets(term: Any, env: Environment) -> List[str]:
    """Names of lets whose bound expression evaluates to ERROR in its scope,
    outermost first. Covers unbound names, malformed nodes and reads of
    names already bound to ERROR."""
    from evaluator import evaluate

    names: List[str] = []
    pending: List[Tuple[Any, Environment]] = [(term, env)]

    while pending:
        node, scope = pending.pop()
        if isinstance(node, Let) and isinstance(node.name, str):
            bound_val = evaluate(node.bound, scope)
            if is_error(bound_val):
                names.append(node.name)
            pending.append((node.body, extend(scope, node.name, bound_val)))
            pending.append((node.bound, scope))
        elif isinstance(node, Add):
            pending.append((node.rhs, scope))
            pending.append((node.lhs, scope))

    return names


def generate_suggestions(term: Any, env: Environment) -> List[str]:
    """Generate helpful suggestions explaining why a term evaluated to ERROR"""
    suggestions = []

    for name in find_unbound_names(term, env):
        suggestions.append(f"Unbound variable '{name}' - bind it with a Let or in the starting environment")

    for description in find_malformed_nodes(term):
        suggestions.append(f"Malformed term: {description}")

    for name in find_failing_lets(term, env):
        suggestions.append(f"'{name}' is bound to an error because its bound expression fails")

    for name, value in env_error_bindings(env):
        suggestions.append(f"'{name}' is already bound to an error in the starting environment")

    return suggestions


def env_error_bindings(env: Environment) -> List:
    """Visible bindings whose value is ERROR"""
    return [(name, value) for name, value in env_visible_bindings(env).items() if is_error(value)]


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class LetAddError(Exception):
    """Base class for errors raised at the letadd caller boundary"""


class EvaluationError(LetAddError):
    """Raised by callers that require a number when evaluation yields ERROR"""
    def __init__(self, message: str, term: Any = None, env_snapshot: Optional[Dict] = None,
                 suggestions: Optional[List[str]] = None):
        self.message = message
        self.term = term
        self.env_snapshot = env_snapshot or {}
        self.suggestions = suggestions or []
        super().__init__(message)

    def __str__(self) -> str:
        report = make_evaluation_report(
            self.message, self.term, self.env_snapshot, self.suggestions
        )
        return format_evaluation_report(report)


class TermFormatError(LetAddError):
    """Raised when a serialized term does not describe a valid term"""
    def __init__(self, message: str, path: str = "$"):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        return f"Invalid term at {self.path}: {self.message}"


def make_evaluation_error(term: Any, env: Environment) -> EvaluationError:
    """Build the EvaluationError a caller raises when term evaluated to ERROR in env"""
    return EvaluationError(
        "Evaluation could not produce a number",
        term=term,
        env_snapshot=env_visible_bindings(env),
        suggestions=generate_suggestions(term, env)
    )

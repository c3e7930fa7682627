"""
letadd standard library
Built-in value combinators used by the evaluator
"""

import operator

from utilities import binary_arithmetic_op


# ============================================================================
# ARITHMETIC
# ============================================================================

add_numbers = binary_arithmetic_op(operator.add)
add_numbers.__doc__ = "NumberValue(a + b) when both are NumberValues, ERROR otherwise"

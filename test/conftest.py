"""
Test configuration for letadd tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from environment import new_env


@pytest.fixture
def empty_env():
  """Provide the empty environment"""
  return new_env()

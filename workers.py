"""
Concurrent evaluation for letadd (Using Pykka)
Terms and environments are immutable, so actors share them without locking
"""

from typing import Dict, List, Optional, Sequence, Tuple

import pykka

from environment import Environment
from evaluator import evaluate
from terms import Value


DEFAULT_POOL_SIZE = 4
DEFAULT_TIMEOUT = 30.0


# ============================================================================
# ACTOR SYSTEM
# ============================================================================

class EvaluatorActor(pykka.ThreadingActor):
  """Actor that evaluates (term, environment) jobs"""

  def __init__(self, worker_id: int, debug: bool = False):
    super().__init__()
    self.worker_id = worker_id
    self.debug = debug

  def on_receive(self, message: Dict) -> Optional[Value]:
    """Handle an evaluate request and reply with the resulting Value"""
    if message.get('command') == 'evaluate':
      return evaluate(message['term'], message['env'], self.debug)
    return None


class ActorPool:
  """Fixed-size pool of evaluator actors, jobs assigned round-robin"""

  def __init__(self, size: int = DEFAULT_POOL_SIZE, debug: bool = False):
    if size < 1:
      raise ValueError(f"Pool size must be at least 1, got {size}")
    self.actors: List[pykka.ActorRef] = [
        EvaluatorActor.start(worker_id, debug) for worker_id in range(size)
    ]

  def submit(self, index: int, term, env: Environment) -> pykka.Future:
    actor_ref = self.actors[index % len(self.actors)]
    return actor_ref.ask({'command': 'evaluate', 'term': term, 'env': env}, block=False)

  def stop(self) -> None:
    """Terminate all actors"""
    for actor_ref in self.actors:
      actor_ref.stop()
    self.actors = []

  def __enter__(self) -> 'ActorPool':
    return self

  def __exit__(self, exc_type, exc, tb) -> None:
    self.stop()


# ============================================================================
# BATCH EVALUATION
# ============================================================================

def evaluate_concurrently(
    jobs: Sequence[Tuple[object, Environment]],
    pool_size: int = DEFAULT_POOL_SIZE,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    debug: bool = False
) -> List[Value]:
  """Evaluate (term, env) jobs on an actor pool; results keep job order"""
  if not jobs:
    return []

  with ActorPool(min(pool_size, len(jobs)), debug) as pool:
    futures = [pool.submit(i, term, env) for i, (term, env) in enumerate(jobs)]
    return pykka.get_all(futures, timeout=timeout)

"""
Convergence criteria for the Lloyd iteration.
"""

from typing import Dict, Any
from torch import Tensor

from ..base.interfaces import ConvergenceCriterion


class ChangeInAssignments(ConvergenceCriterion):
    """Convergence once labels stop changing between consecutive iterations.

    With the default ``max_changed=0`` this is the exact fixed-point test:
    the run stops when every point keeps its label.
    """

    def __init__(self, max_changed: int = 0, patience: int = 1):
        """
        Args:
            max_changed: Largest number of relabelled points still counted as stable
            patience: Number of consecutive stable iterations required
        """
        super().__init__()
        self.max_changed = max_changed
        self.patience = patience
        self._prev_assignments = None
        self._stable_count = 0

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if assignments have stabilized."""
        assignments = current_state['assignments']

        if isinstance(assignments, Tensor):
            current_assignments = assignments
        else:
            # AssignmentMatrix object
            current_assignments = assignments.get_hard()

        if self._prev_assignments is None:
            self._prev_assignments = current_assignments.clone()
            return False

        n_changed = (current_assignments != self._prev_assignments).sum().item()

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed
        })

        if n_changed <= self.max_changed:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        self._prev_assignments = current_assignments.clone()

        return converged

    @property
    def last_n_changed(self):
        """Number of labels changed at the most recent check, if any."""
        if not self.history:
            return None
        return self.history[-1]['n_changed']

    def reset(self):
        """Reset convergence history and the stored labels."""
        super().reset()
        self._prev_assignments = None
        self._stable_count = 0

"""
Budget allocation across groups.

Selection is greedy by priority: a group's sorted files are taken in order
until the next one would overflow the group's sub-budget, at which point the
walk stops. Multi-group runs hand each group a share of the remaining global
budget, in the order the groups were given.
"""

import logging
from enum import Enum
from typing import List, Sequence

from .models import ScoredFile, Selection

logger = logging.getLogger(__name__)


class BudgetPolicy(str, Enum):
    """How the remaining budget is divided between groups."""

    # share = remaining / total number of groups
    FIXED_DENOMINATOR = "fixed-denominator"
    # share = remaining / number of groups not yet processed
    REMAINING_COUNT = "remaining-count"


DEFAULT_POLICY = BudgetPolicy.FIXED_DENOMINATOR


def select_files(files: Sequence[ScoredFile], budget: float) -> Selection:
    """
    Select the longest prefix of ``files`` that fits in ``budget``.

    The walk stops at the first file that would overflow; smaller files
    further down are not considered. A budget of zero or less selects
    nothing, empty files included.

    Args:
        files: Files sorted by score descending.
        budget: Token allowance for this group.

    Returns:
        Selection holding the prefix and its consumed token count.
    """
    selected: List[ScoredFile] = []
    consumed = 0
    if budget <= 0:
        return Selection(files=selected, consumed=consumed, budget=budget)

    for f in files:
        if consumed + f.tokens > budget:
            break
        selected.append(f)
        consumed += f.tokens
    return Selection(files=selected, consumed=consumed, budget=budget)


def allocate(groups: Sequence[Sequence[ScoredFile]], budget: int,
             policy: BudgetPolicy = DEFAULT_POLICY) -> List[Selection]:
    """
    Allocate a global budget across groups, in order.

    Args:
        groups: One sorted file sequence per group, in processing order.
        budget: Global token budget.
        policy: Divisor used for each group's share.

    Returns:
        One selection per group, in the same order.
    """
    policy = BudgetPolicy(policy)
    total = len(groups)
    remaining = budget
    selections = []

    for index, files in enumerate(groups):
        if policy is BudgetPolicy.REMAINING_COUNT:
            divisor = total - index
        else:
            divisor = total
        share = remaining / divisor

        selection = select_files(files, share)
        remaining -= selection.consumed
        logger.debug(
            f"Group {index + 1}/{total}: share {share:.1f}, "
            f"selected {len(selection)}/{len(files)} files, {selection.consumed} tokens"
        )
        selections.append(selection)

    return selections

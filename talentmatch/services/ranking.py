"""
Ranking and shortlisting of scored candidates.

Order is overall score descending, then candidate id ascending, so the same
input always yields the same ranking.
"""
from typing import Dict, List, Sequence

from talentmatch.models.response import BulkDecision, MatchResult, ShortlistDecision
from talentmatch.utils.exceptions import InvalidArgument
from talentmatch.utils.logging_config import get_logger

logger = get_logger(__name__)


def _ordered(results: Sequence[MatchResult]) -> List[MatchResult]:
    return sorted(results, key=lambda r: (-r.overall, r.candidate_id))


def rank(results: Sequence[MatchResult], top_n: int) -> List[MatchResult]:
    if top_n <= 0:
        raise InvalidArgument("top_n must be positive", argument="top_n", value=top_n)
    return [
        r.model_copy(update={"rank": position})
        for position, r in enumerate(_ordered(results)[:top_n], start=1)
    ]


def bulk_decide(applications: Sequence[MatchResult], top_n: int) -> BulkDecision:
    """Select the first ``top_n`` applications by rank and reject the rest."""
    if top_n < 0:
        raise InvalidArgument("top_n must not be negative", argument="top_n", value=top_n)
    ids = [a.candidate_id for a in applications]
    if len(set(ids)) != len(ids):
        raise InvalidArgument("Duplicate application ids in bulk decision", argument="applications")

    ordered = [r.candidate_id for r in _ordered(applications)]
    decision = BulkDecision(selected=ordered[:top_n], rejected=ordered[top_n:])
    logger.info(
        f"Bulk decision: {decision.selected_count} selected, {decision.rejected_count} rejected"
    )
    return decision


def decisions_for(decision: BulkDecision) -> Dict[str, ShortlistDecision]:
    out = {cid: ShortlistDecision.SELECTED for cid in decision.selected}
    out.update({cid: ShortlistDecision.REJECTED for cid in decision.rejected})
    return out


def reject_pending(decisions: Dict[str, ShortlistDecision]) -> Dict[str, ShortlistDecision]:
    """Reject every application still pending; decided ones are left as they are."""
    return {
        cid: ShortlistDecision.REJECTED if status == ShortlistDecision.PENDING else status
        for cid, status in decisions.items()
    }

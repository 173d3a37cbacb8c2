"""
Dashboard and automation aggregates built on transient scoring.

Nothing here writes scores back; callers pass ORM rows and get counts.
"""

from typing import Iterable

from leadhub.services.scoring import score_record


def score_distribution(leads: Iterable, **score_kwargs) -> dict[str, int]:
    """Count leads per category after rescoring each one in memory."""
    distribution = {"hot": 0, "warm": 0, "cold": 0}
    for lead in leads:
        distribution[score_record(lead, **score_kwargs).category] += 1
    return distribution


def count_hot_pending(leads: Iterable, **score_kwargs) -> int:
    """Pending leads that currently score as hot."""
    return sum(
        1
        for lead in leads
        if lead.status == "pending" and score_record(lead, **score_kwargs).category == "hot"
    )


def build_recommendations(hot_leads: int, stale_leads: int, follow_up_leads: int) -> list[str]:
    recommendations = []
    if hot_leads > 0:
        recommendations.append(f"You have {hot_leads} hot leads that need immediate attention")
    if stale_leads > 0:
        recommendations.append(f"{stale_leads} leads haven't been contacted in 24+ hours")
    if follow_up_leads > 0:
        recommendations.append(f"{follow_up_leads} leads are ready for follow-up")
    return recommendations


def conversion_rate(converted: int, total: int) -> float:
    """Percentage rounded to one decimal place; 0.0 with no leads."""
    if total <= 0:
        return 0.0
    return round(converted / total * 100, 1)

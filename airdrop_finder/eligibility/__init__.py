"""
Airdrop eligibility engine.

Folds per-chain activity into one profile, evaluates project criteria, scores
and ranks projects. Modules: activity_aggregator, criteria_evaluator,
eligibility_scorer, opportunity_ranker, recommendations, pipeline.
"""

from airdrop_finder.eligibility.activity_aggregator import aggregate_activity
from airdrop_finder.eligibility.criteria_evaluator import evaluate_criterion, explain_criterion
from airdrop_finder.eligibility.eligibility_scorer import score_project, score_projects
from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities
from airdrop_finder.eligibility.recommendations import build_recommendations, summarize_recommendations
from airdrop_finder.eligibility.projects import project_from_dict, criterion_from_dict
from airdrop_finder.eligibility.pipeline import EligibilityPipeline, run_eligibility_analysis

__all__ = [
    "aggregate_activity",
    "evaluate_criterion",
    "explain_criterion",
    "score_project",
    "score_projects",
    "rank_opportunities",
    "build_recommendations",
    "summarize_recommendations",
    "project_from_dict",
    "criterion_from_dict",
    "EligibilityPipeline",
    "run_eligibility_analysis",
]

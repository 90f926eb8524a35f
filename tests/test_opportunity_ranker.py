"""
Pytest tests for the opportunity ranker: ordering, tie-breaks, category buckets.
"""

from __future__ import annotations


def _scored(project_id, opportunity, effort=0, current=50, value=None, days=None, status="rumored"):
    from airdrop_finder.eligibility.models import ProjectStatus, ScoredProject

    return ScoredProject(
        project_id=project_id,
        name=project_id.title(),
        status=ProjectStatus(status),
        current_score=current,
        opportunity_score=opportunity,
        effort_needed=effort,
        missing_criteria=tuple(f"c{i}" for i in range(effort)),
        estimated_value_usd=value,
        days_until_snapshot=days,
    )


def test_ties_broken_by_effort_then_id():
    """[90/e1, 90/e0, 70/e0] -> [90/e0, 90/e1, 70/e0]."""
    from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities

    ranked = rank_opportunities([
        _scored("a", 90, effort=1),
        _scored("b", 90, effort=0),
        _scored("c", 70, effort=0),
    ])
    assert [p.project_id for p in ranked.all] == ["b", "a", "c"]

    same = rank_opportunities([_scored("zeta", 80), _scored("alpha", 80)])
    assert [p.project_id for p in same.all] == ["alpha", "zeta"]


def test_fully_satisfied_projects_dropped():
    from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities

    ranked = rank_opportunities([_scored("done", 100, current=100), _scored("todo", 60)])
    assert [p.project_id for p in ranked.all] == ["todo"]


def test_all_capped_at_20():
    from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities

    ranked = rank_opportunities([_scored(f"p{i:02d}", i) for i in range(30)])
    assert len(ranked.all) == 20
    assert ranked.all[0].project_id == "p29"


def test_categories():
    """Easy wins, high value and quick actions follow their thresholds and may overlap."""
    from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities

    easy = _scored("easy", 80, effort=1, current=60)
    valuable = _scored("valuable", 70, effort=4, current=35, value=1200.0)
    soon = _scored("soon", 75, effort=3, current=40, days=7)
    everything = _scored("everything", 95, effort=2, current=50, value=300.0, days=30)
    none = _scored("none", 20, effort=5, current=10, days=60)

    ranked = rank_opportunities([easy, valuable, soon, everything, none])
    assert [p.project_id for p in ranked.easy_wins] == ["everything", "easy"]
    assert [p.project_id for p in ranked.high_value] == ["everything", "valuable"]
    assert [p.project_id for p in ranked.quick_actions] == ["everything", "soon"]


def test_quick_actions_exclude_past_snapshots():
    """Past snapshots have no days_until_snapshot and never count as quick actions."""
    from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities

    ranked = rank_opportunities([_scored("past", 70, current=60, days=None)])
    assert ranked.quick_actions == ()


def test_category_limit_five():
    from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities

    ranked = rank_opportunities([_scored(f"e{i}", 60 + i, effort=0, current=80) for i in range(8)])
    assert len(ranked.easy_wins) == 5
    assert ranked.easy_wins[0].project_id == "e7"


def test_to_dict_shape():
    from airdrop_finder.eligibility.opportunity_ranker import rank_opportunities

    d = rank_opportunities([_scored("a", 60)]).to_dict()
    assert set(d) == {"opportunities", "categories"}
    assert set(d["categories"]) == {"easy_wins", "high_value", "quick_actions"}
    assert d["opportunities"][0]["project_id"] == "a"

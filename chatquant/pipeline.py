"""
Shared analysis pipeline for chatquant
Used by both the CLI and library callers so results are always consistent
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from . import config
from .accumulator import ConversationAccumulator, accumulate
from .badges import compute_badges
from .bid_response import compute_bid_response
from .catchphrases import compute_best_time_to_text, compute_catchphrases
from .chronotype import compute_chronotype
from .conflicts import compute_conflicts
from .engagement import compute_engagement
from .intimacy import compute_intimacy
from .lsm import compute_lsm
from .milestones import compute_year_milestones
from .models import ParsedConversation, QuantitativeAnalysis
from .network import compute_network
from .parsers import decode_export, load_export, merge_exports
from .patterns import compute_heatmap, compute_patterns, compute_trends
from .person_metrics import compute_person_metrics
from .pronouns import compute_pronoun_analysis
from .pursuit_withdrawal import compute_pursuit_withdrawal
from .rankings import compute_rankings
from .reciprocity import compute_reciprocity
from .response_distribution import compute_response_time_distribution
from .sentiment import compute_sentiment
from .shift_support import compute_shift_support
from .timing import compute_timing
from .viral_scores import compute_viral_scores

logger = logging.getLogger(__name__)

# Independent derivers: each reads only the accumulator
DERIVERS: Dict[str, Callable[[ConversationAccumulator], Any]] = {
    "per_person": compute_person_metrics,
    "timing": compute_timing,
    "engagement": compute_engagement,
    "patterns": compute_patterns,
    "heatmap": compute_heatmap,
    "trends": compute_trends,
    "sentiment": compute_sentiment,
    "conflicts": compute_conflicts,
    "intimacy": compute_intimacy,
    "bid_response": compute_bid_response,
    "chronotype": compute_chronotype,
    "shift_support": compute_shift_support,
    "response_time_distribution": compute_response_time_distribution,
    "pursuit_withdrawal": compute_pursuit_withdrawal,
    "lsm": compute_lsm,
    "pronoun_analysis": compute_pronoun_analysis,
    "network": compute_network,
    "catchphrases": compute_catchphrases,
}


def _run_deriver(name: str, func: Callable, state: ConversationAccumulator) -> Any:
    logger.debug(f"Running deriver: {name}")
    return func(state)


def run_derivers(state: ConversationAccumulator, parallel: bool = False) -> Dict[str, Any]:
    """Run every independent deriver, optionally on a thread pool."""
    if not parallel:
        return {name: _run_deriver(name, func, state) for name, func in DERIVERS.items()}

    with ThreadPoolExecutor(max_workers=config.PARALLEL_WORKERS) as executor:
        futures = {
            name: executor.submit(_run_deriver, name, func, state)
            for name, func in DERIVERS.items()
        }
        return {name: future.result() for name, future in futures.items()}


def run_scorers(state: ConversationAccumulator, bundles: Dict[str, Any]) -> Dict[str, Any]:
    """Composite scores that read derived bundles; must run after the derivers."""
    names = state.names
    return {
        "reciprocity": compute_reciprocity(bundles["per_person"], bundles["timing"], bundles["engagement"], names),
        "ranking_percentiles": compute_rankings(bundles["per_person"], bundles["timing"], names),
        "year_milestones": compute_year_milestones(bundles["patterns"]),
        "best_time_to_text": compute_best_time_to_text(bundles["heatmap"], bundles["timing"], names),
        "viral_scores": compute_viral_scores(bundles, names, state.total_messages),
        "badges": compute_badges(state, bundles),
    }


def compute_quantitative_analysis(
    conversation: ParsedConversation,
    parallel: Optional[bool] = None,
) -> QuantitativeAnalysis:
    """
    Run the accumulation pass, the derivers and the composite scorers.

    Args:
        conversation: Normalized conversation from any decoder
        parallel: Run derivers on a thread pool (defaults to config.PARALLEL_DERIVERS)

    Returns:
        Frozen QuantitativeAnalysis; identical for identical input
    """
    if parallel is None:
        parallel = config.PARALLEL_DERIVERS

    logger.info(
        f"Analyzing {conversation.platform} conversation '{conversation.title}' "
        f"({conversation.metadata.total_messages} messages, parallel={parallel})"
    )
    state = accumulate(conversation)
    bundles = run_derivers(state, parallel=parallel)
    bundles.update(run_scorers(state, bundles))

    analysis = QuantitativeAnalysis(**bundles)
    logger.info(f"Analysis complete: {len(analysis.badges)} badges awarded")
    return analysis


def summarize_conversation(conversation: ParsedConversation) -> Dict[str, Any]:
    meta = conversation.metadata
    return {
        "platform": conversation.platform,
        "title": conversation.title,
        "participants": conversation.participant_names,
        "total_messages": meta.total_messages,
        "date_range": dict(meta.date_range),
        "duration_days": meta.duration_days,
        "is_group": meta.is_group,
    }


def load_conversation(
    paths: List[Union[str, Path]],
    platform: Optional[str] = None,
) -> ParsedConversation:
    """Decode one export, or merge several files of a multi-file export."""
    raws = [load_export(path) for path in paths]
    if len(raws) == 1:
        return decode_export(raws[0], platform)
    return merge_exports(raws, platform)


def run_full_analysis(
    paths: List[Union[str, Path]],
    platform: Optional[str] = None,
    parallel: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Run the complete pipeline on export files.

    Returns:
        Dictionary containing:
        - conversation: summary of the decoded conversation
        - analysis: the QuantitativeAnalysis as plain data
    """
    logger.info(f"Loading {len(paths)} export file(s)")
    conversation = load_conversation(paths, platform)
    analysis = compute_quantitative_analysis(conversation, parallel=parallel)
    return {
        "conversation": summarize_conversation(conversation),
        "analysis": analysis.to_dict(),
    }

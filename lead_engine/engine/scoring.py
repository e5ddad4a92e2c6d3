"""
Enrichment scoring — confidence, engagement, influencer, social activity.

Total followers (LinkedIn connections + Facebook + Twitter + Instagram
followers) picks a bucket; engagement and influencer scores are drawn
independently inside the bucket's range. Bucket thresholds are strict:
a total equal to a threshold lands in the lower bucket.
"""
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import yaml

from lead_engine.engine.base import ProfileBundle

logger = logging.getLogger('engine.scoring')

SCORE_MIN = 0
SCORE_MAX = 100


# ── Scoring config (YAML with hardcoded fallback) ────────────────────────────

_scoring_config = None


def _default_config():
    """Hardcoded fallback if YAML is missing."""
    return {
        'version': 'default',
        'confidence': {'min': 70, 'max': 100},
        'follower_buckets': [
            {'above': 5000, 'activity': 'very_high', 'engagement': [80, 100], 'influencer': [80, 100]},
            {'above': 2000, 'activity': 'high', 'engagement': [60, 80], 'influencer': [60, 80]},
            {'above': 500, 'activity': 'medium', 'engagement': [40, 60], 'influencer': [40, 60]},
            {'activity': 'low', 'engagement': [20, 50], 'influencer': [20, 50]},
        ],
        'recent_activity_counts': {'very_high': 5, 'high': 3, 'medium': 2, 'low': 1},
    }


def load_scoring_config():
    """Load scoring config from YAML, with in-memory cache and hardcoded fallback."""
    global _scoring_config
    if _scoring_config is not None:
        return _scoring_config

    config_path = os.path.join(os.path.dirname(__file__), 'scoring_config.yaml')
    try:
        with open(config_path, 'r') as f:
            _scoring_config = yaml.safe_load(f)
        logger.info("Config loaded from YAML (version=%s)", _scoring_config.get('version', '?'))
    except Exception as e:
        logger.warning("YAML config not found (%s), using defaults", e)
        _scoring_config = _default_config()

    return _scoring_config


# ── Scores ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Scores:
    confidence: int
    engagement_score: int
    influencer_score: int
    social_media_activity: str
    total_followers: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'confidence': self.confidence,
            'engagementScore': self.engagement_score,
            'influencerScore': self.influencer_score,
            'socialMediaActivity': self.social_media_activity,
        }


def clamp(value, low=SCORE_MIN, high=SCORE_MAX):
    return max(low, min(high, value))


def total_followers(bundle: ProfileBundle) -> int:
    total = 0
    if bundle.professional is not None:
        total += bundle.professional.linkedin_connections or 0
    if bundle.social is not None:
        total += bundle.social.facebook_followers or 0
        total += bundle.social.twitter_followers or 0
        total += bundle.social.instagram_followers or 0
    return total


def bucket_for(followers: int, cfg: Optional[dict] = None) -> Dict[str, Any]:
    """First bucket whose `above` threshold the follower total strictly exceeds."""
    cfg = cfg or load_scoring_config()
    buckets = cfg.get('follower_buckets') or _default_config()['follower_buckets']
    for bucket in buckets:
        above = bucket.get('above')
        if above is None or followers > above:
            return bucket
    return buckets[-1]


def _draw(rng, bounds) -> int:
    low, high = int(bounds[0]), int(bounds[1])
    return clamp(rng.randint(low, high))


def draw_confidence(rng, succeeded: bool, cfg: Optional[dict] = None) -> int:
    if not succeeded:
        return 0
    cfg = cfg or load_scoring_config()
    conf = cfg.get('confidence', {})
    return clamp(rng.randint(int(conf.get('min', 70)), int(conf.get('max', 100))))


def score(bundle: ProfileBundle, rng, succeeded: bool = True) -> Scores:
    """Score a synthesized bundle. Failed runs get zero confidence and the lowest bucket."""
    cfg = load_scoring_config()
    followers = total_followers(bundle)
    bucket = bucket_for(followers, cfg)

    return Scores(
        confidence=draw_confidence(rng, succeeded, cfg),
        engagement_score=_draw(rng, bucket['engagement']),
        influencer_score=_draw(rng, bucket['influencer']),
        social_media_activity=bucket['activity'],
        total_followers=followers,
    )


# ── Recent activity ──────────────────────────────────────────────────────────

ACTIVITY_PLATFORMS = ['LinkedIn', 'Twitter', 'Facebook', 'Instagram']
ACTIVITY_TYPES = ['post', 'share', 'comment', 'like']
_WEEK_SECONDS = 7 * 24 * 60 * 60


def last_activity_date(rng, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now - timedelta(seconds=rng.randint(0, _WEEK_SECONDS))


def recent_activity(activity_level: str, rng, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Activity feed items; count depends on the activity level."""
    counts = load_scoring_config().get('recent_activity_counts', {})
    count = int(counts.get(activity_level, 1))
    return [
        {
            'platform': rng.choice(ACTIVITY_PLATFORMS),
            'type': rng.choice(ACTIVITY_TYPES),
            'content': 'Business-related content engagement',
            'date': last_activity_date(rng, now).isoformat(),
            'engagement': rng.randint(10, 59),
        }
        for _ in range(count)
    ]

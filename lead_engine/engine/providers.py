"""
Profile providers — where enrichment data comes from.

SyntheticProfileProvider fabricates plausible-looking LinkedIn, social and
company data from canned parameter tables. It exists for demos and local
development; its records are tagged data_source='synthetic_demo' and must not
be shown as verified facts. A real provider implements the same
ProfileProvider interface and is registered in PROVIDERS.
"""
import logging
import time
from typing import Dict, List, Optional, Type

from lead_engine.engine.base import (
    Contact, ProfileProvider, ProfileBundle,
    ProfessionalProfile, SocialProfiles, CompanyProfile,
)
from lead_engine.engine.classifier import (
    classify_seniority, classify_department, estimate_company_size, extract_location, MAJOR_MARKETS,
)
from lead_engine.engine.errors import UnknownProviderError

logger = logging.getLogger('engine.providers')


# ── Parameter tables ─────────────────────────────────────────────────────────

LINKEDIN_PROFILES = [
    {'followers': 500, 'connections': 450, 'job_title': 'Marketing Director', 'company': 'Digital Solutions Inc'},
    {'followers': 1200, 'connections': 890, 'job_title': 'Operations Manager', 'company': 'TechStart LLC'},
    {'followers': 350, 'connections': 310, 'job_title': 'Business Owner', 'company': 'Local Services Co'},
    {'followers': 800, 'connections': 650, 'job_title': 'VP Sales', 'company': 'Growth Partners'},
    {'followers': 2100, 'connections': 1500, 'job_title': 'CEO', 'company': 'Innovation Labs'},
]

FACEBOOK_PROFILES = [
    {'likes': 1500, 'followers': 1200, 'rating': '4.8', 'checkins': 450},
    {'likes': 890, 'followers': 750, 'rating': '4.6', 'checkins': 230},
    {'likes': 2300, 'followers': 1800, 'rating': '4.9', 'checkins': 680},
    {'likes': 650, 'followers': 520, 'rating': '4.4', 'checkins': 150},
    {'likes': 3200, 'followers': 2500, 'rating': '4.7', 'checkins': 920},
]

TWITTER_PROFILES = [
    {'followers': 850, 'following': 420, 'tweets': 1200, 'verified': False},
    {'followers': 2400, 'following': 380, 'tweets': 850, 'verified': True},
    {'followers': 450, 'following': 290, 'tweets': 650, 'verified': False},
    {'followers': 1600, 'following': 520, 'tweets': 2100, 'verified': False},
    {'followers': 5200, 'following': 680, 'tweets': 3400, 'verified': True},
]

INSTAGRAM_PROFILES = [
    {'followers': 1200, 'following': 350, 'posts': 280, 'engagement_rate': '3.2%'},
    {'followers': 850, 'following': 290, 'posts': 150, 'engagement_rate': '4.1%'},
    {'followers': 2800, 'following': 420, 'posts': 420, 'engagement_rate': '2.8%'},
    {'followers': 650, 'following': 180, 'posts': 95, 'engagement_rate': '5.2%'},
    {'followers': 4200, 'following': 580, 'posts': 680, 'engagement_rate': '3.7%'},
]

COMPANY_PROFILES = [
    {'size': '11-50', 'revenue': '$2M-$5M', 'industry': 'Digital Marketing', 'founded': '2018',
     'technologies': ['WordPress', 'Google Analytics', 'HubSpot']},
    {'size': '1-10', 'revenue': '$500K-$1M', 'industry': 'Professional Services', 'founded': '2020',
     'technologies': ['QuickBooks', 'Slack', 'Zoom']},
    {'size': '51-200', 'revenue': '$10M-$25M', 'industry': 'Technology', 'founded': '2015',
     'technologies': ['Salesforce', 'AWS', 'React']},
    {'size': '11-50', 'revenue': '$3M-$8M', 'industry': 'Healthcare', 'founded': '2017',
     'technologies': ['Epic', 'Microsoft Teams', 'Tableau']},
    {'size': '201-500', 'revenue': '$50M+', 'industry': 'Manufacturing', 'founded': '2005',
     'technologies': ['SAP', 'Oracle', 'AutoCAD']},
]

# Headcount bands a company-size hint may draw from
SIZE_HEADCOUNTS = {
    'small': ('1-10', '11-50'),
    'medium': ('11-50', '51-200'),
    'large': ('51-200', '201-500'),
}

YOUTUBE_PROBABILITY = 0.3
TIKTOK_PROBABILITY = 0.2


# ── Role-derived attributes ──────────────────────────────────────────────────

def skills_for_role(job_title: str) -> List[str]:
    title = job_title.lower()
    if 'marketing' in title:
        return ['Digital Marketing', 'SEO', 'Social Media', 'Content Marketing', 'Google Analytics', 'PPC Advertising']
    if 'sales' in title:
        return ['Sales Management', 'Lead Generation', 'CRM', 'Negotiation', 'Customer Relations', 'Pipeline Management']
    if 'operations' in title:
        return ['Project Management', 'Process Improvement', 'Team Leadership', 'Strategic Planning', 'Operations Management']
    if 'ceo' in title or 'founder' in title:
        return ['Strategic Planning', 'Leadership', 'Business Development', 'Fundraising', 'Team Building', 'Vision Setting']
    return ['Leadership', 'Project Management', 'Strategic Planning', 'Team Collaboration', 'Problem Solving']


def certifications_for_role(job_title: str) -> List[str]:
    title = job_title.lower()
    if 'marketing' in title:
        return ['Google Analytics Certified', 'Google Ads Certified', 'HubSpot Marketing Certified']
    if 'sales' in title:
        return ['Salesforce Certified', 'HubSpot Sales Certified', 'Sales Management Certification']
    if 'operations' in title:
        return ['PMP Certified', 'Lean Six Sigma', 'Operations Management Certification']
    return ['MBA', 'Leadership Certification', 'Industry Certification']


def _slug(text: str) -> str:
    return ''.join(ch for ch in text.lower() if ch.isalnum())


# ── Synthetic provider ───────────────────────────────────────────────────────

class SyntheticProfileProvider(ProfileProvider):
    """Demo-data provider. Every value comes from the tables above and the rng."""
    name = 'synthetic'
    data_source = 'synthetic_demo'
    description = '[SYNTHETIC] Generated demo profiles, not verified data'

    def __init__(self, latency: float = 0.0):
        self.latency = latency

    def synthesize(self, contact: Contact, industry: str, rng) -> ProfileBundle:
        if self.latency > 0:
            self._simulate_delay(rng)
        location = extract_location(contact) or rng.choice(MAJOR_MARKETS)
        return ProfileBundle(
            professional=self.professional_profile(contact, industry, location, rng),
            social=self.social_profiles(contact, rng),
            company=self.company_profile(contact, location, rng),
        )

    def _simulate_delay(self, rng):
        """Stand-in for the remote call a real provider would make."""
        time.sleep(rng.uniform(self.latency * 0.5, self.latency))

    def professional_profile(self, contact: Contact, industry: str, location: str,
                             rng) -> Optional[ProfessionalProfile]:
        if not contact.first_name or not contact.last_name:
            return None

        entry = rng.choice(LINKEDIN_PROFILES)
        first = _slug(contact.first_name)
        last = _slug(contact.last_name)
        title = entry['job_title']

        return ProfessionalProfile(
            job_title=title,
            seniority=classify_seniority(title),
            department=classify_department(title),
            years_experience=rng.randint(3, 17),
            skills=tuple(skills_for_role(title)),
            certifications=tuple(certifications_for_role(title)),
            linkedin_url=f'https://linkedin.com/in/{first}-{last}-{rng.randint(0, 999)}',
            linkedin_followers=entry['followers'],
            linkedin_connections=entry['connections'],
            linkedin_company=entry['company'],
            linkedin_bio=f"{title} at {entry['company']}. Passionate about driving business growth and innovation.",
            linkedin_location=location,
            linkedin_industry=industry,
        )

    def social_profiles(self, contact: Contact, rng) -> Optional[SocialProfiles]:
        if not contact.first_name or not contact.last_name:
            return None

        first = _slug(contact.first_name)
        last = _slug(contact.last_name)
        fb = rng.choice(FACEBOOK_PROFILES)
        tw = rng.choice(TWITTER_PROFILES)
        ig = rng.choice(INSTAGRAM_PROFILES)
        handle = f'{first}_{last}{rng.randint(0, 999)}'

        has_youtube = rng.random() < YOUTUBE_PROBABILITY
        has_tiktok = rng.random() < TIKTOK_PROBABILITY

        return SocialProfiles(
            facebook_url=f'https://facebook.com/{first}.{last}{rng.randint(0, 99)}',
            facebook_likes=fb['likes'],
            facebook_followers=fb['followers'],
            facebook_checkins=fb['checkins'],
            facebook_rating=fb['rating'],
            twitter_url=f'https://twitter.com/{handle}',
            twitter_handle=f'@{handle}',
            twitter_followers=tw['followers'],
            twitter_following=tw['following'],
            twitter_tweets=tw['tweets'],
            twitter_verified=tw['verified'],
            instagram_url=f'https://instagram.com/{first}.{last}{rng.randint(0, 999)}',
            instagram_followers=ig['followers'],
            instagram_following=ig['following'],
            instagram_posts=ig['posts'],
            instagram_engagement_rate=ig['engagement_rate'],
            youtube_url=f'https://youtube.com/@{first}{last}business' if has_youtube else None,
            youtube_subscribers=rng.randint(500, 5499) if has_youtube else None,
            tiktok_url=f'https://tiktok.com/@{first}_{last}' if has_tiktok else None,
            tiktok_followers=rng.randint(1000, 10999) if has_tiktok else None,
        )

    def company_profile(self, contact: Contact, location: str, rng) -> Optional[CompanyProfile]:
        if not contact.company:
            return None

        size = estimate_company_size(contact)
        entry = rng.choice([e for e in COMPANY_PROFILES if e['size'] in SIZE_HEADCOUNTS[size]])
        technologies = entry['technologies']

        return CompanyProfile(
            website=f'https://www.{_slug(contact.company)}.com',
            size=entry['size'],
            revenue=entry['revenue'],
            industry=entry['industry'],
            founded=entry['founded'],
            location=location,
            description=(f"{contact.company} is a {entry['industry'].lower()} company "
                         f"focused on delivering exceptional services to clients."),
            technologies=tuple(technologies),
            tech_stack={
                'crm': 'Salesforce' if 'Salesforce' in technologies else 'HubSpot',
                'website': 'React' if 'React' in technologies else 'WordPress',
                'analytics': 'Google Analytics',
                'communication': 'Slack' if 'Slack' in technologies else 'Microsoft Teams',
            },
        )


# ── Registry ─────────────────────────────────────────────────────────────────

PROVIDERS: Dict[str, Type[ProfileProvider]] = {
    'synthetic': SyntheticProfileProvider,
}


def get_provider(name: str, **kwargs) -> ProfileProvider:
    """Look up and instantiate a provider by name."""
    provider_cls = PROVIDERS.get(name)
    if not provider_cls:
        raise UnknownProviderError(
            f"No profile provider registered as '{name}'. Available: {sorted(PROVIDERS)}"
        )
    return provider_cls(**kwargs)

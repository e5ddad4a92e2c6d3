"""
Engine contracts — contact input, synthesized profile pieces, provider interface.

Every profile provider implements ProfileProvider.synthesize() and returns a
ProfileBundle. Scoring, ranking and personalization only ever see the bundle,
so a real data provider can replace the synthetic one without touching them.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


def _clean(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


# Accepts both the CRM's camelCase payloads and snake_case dicts
_CONTACT_KEYS = {
    'id': ('id', 'contactId', 'contact_id'),
    'first_name': ('firstName', 'first_name'),
    'last_name': ('lastName', 'last_name'),
    'company': ('company', 'companyName', 'company_name'),
    'position': ('position', 'jobTitle', 'job_title'),
    'notes': ('notes',),
    'lead_status': ('leadStatus', 'lead_status'),
    'status': ('status',),
    'phone': ('phone',),
    'email': ('email',),
}


@dataclass(frozen=True)
class Contact:
    """Read-only contact record handed over by the CRM. Any field may be blank."""
    id: Optional[str] = None
    first_name: str = ''
    last_name: str = ''
    company: str = ''
    position: str = ''
    notes: str = ''
    lead_status: str = ''
    status: str = ''
    phone: str = ''
    email: str = ''

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Contact':
        data = data or {}
        values = {}
        for attr, keys in _CONTACT_KEYS.items():
            raw = next((data[k] for k in keys if data.get(k) not in (None, '')), None)
            values[attr] = _clean(raw)
        values['id'] = values['id'] or None
        return cls(**values)

    @property
    def effective_status(self) -> str:
        return self.lead_status or self.status or 'new'


@dataclass(frozen=True)
class ProfessionalProfile:
    """LinkedIn-style professional profile."""
    job_title: str
    seniority: str
    department: str
    years_experience: int
    skills: Tuple[str, ...]
    certifications: Tuple[str, ...]
    linkedin_url: str
    linkedin_followers: int
    linkedin_connections: int
    linkedin_company: str
    linkedin_bio: str
    linkedin_location: str
    linkedin_industry: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'linkedinUrl': self.linkedin_url,
            'linkedinFollowers': self.linkedin_followers,
            'linkedinConnections': self.linkedin_connections,
            'linkedinJobTitle': self.job_title,
            'linkedinCompany': self.linkedin_company,
            'linkedinBio': self.linkedin_bio,
            'linkedinLocation': self.linkedin_location,
            'linkedinIndustry': self.linkedin_industry,
            'jobTitle': self.job_title,
            'seniority': self.seniority,
            'department': self.department,
            'yearsExperience': self.years_experience,
            'skills': list(self.skills),
            'certifications': list(self.certifications),
        }


@dataclass(frozen=True)
class SocialProfiles:
    """Facebook / Twitter / Instagram counters, plus optional YouTube and TikTok."""
    facebook_url: str
    facebook_likes: int
    facebook_followers: int
    facebook_checkins: int
    facebook_rating: str
    twitter_url: str
    twitter_handle: str
    twitter_followers: int
    twitter_following: int
    twitter_tweets: int
    twitter_verified: bool
    instagram_url: str
    instagram_followers: int
    instagram_following: int
    instagram_posts: int
    instagram_engagement_rate: str
    youtube_url: Optional[str] = None
    youtube_subscribers: Optional[int] = None
    tiktok_url: Optional[str] = None
    tiktok_followers: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'facebookUrl': self.facebook_url,
            'facebookLikes': self.facebook_likes,
            'facebookFollowers': self.facebook_followers,
            'facebookCheckins': self.facebook_checkins,
            'facebookRating': self.facebook_rating,
            'twitterUrl': self.twitter_url,
            'twitterHandle': self.twitter_handle,
            'twitterFollowers': self.twitter_followers,
            'twitterFollowing': self.twitter_following,
            'twitterTweets': self.twitter_tweets,
            'twitterVerified': self.twitter_verified,
            'instagramUrl': self.instagram_url,
            'instagramFollowers': self.instagram_followers,
            'instagramFollowing': self.instagram_following,
            'instagramPosts': self.instagram_posts,
            'instagramEngagementRate': self.instagram_engagement_rate,
            'youtubeUrl': self.youtube_url,
            'youtubeSubscribers': self.youtube_subscribers,
            'tiktokUrl': self.tiktok_url,
            'tiktokFollowers': self.tiktok_followers,
        }


@dataclass(frozen=True)
class CompanyProfile:
    website: str
    size: str
    revenue: str
    industry: str
    founded: str
    location: str
    description: str
    technologies: Tuple[str, ...]
    tech_stack: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'companyWebsite': self.website,
            'companySize': self.size,
            'companyRevenue': self.revenue,
            'companyIndustry': self.industry,
            'companyFounded': self.founded,
            'companyLocation': self.location,
            'companyDescription': self.description,
            'technologies': list(self.technologies),
            'techStack': dict(self.tech_stack),
        }


@dataclass(frozen=True)
class ProfileBundle:
    """Uniform output from every profile provider. None = sub-profile unavailable."""
    professional: Optional[ProfessionalProfile] = None
    social: Optional[SocialProfiles] = None
    company: Optional[CompanyProfile] = None

    @property
    def is_empty(self) -> bool:
        return self.professional is None and self.social is None and self.company is None


class ProfileProvider(ABC):
    """
    Base class for enrichment data providers.

    A provider receives the contact and its classified industry and returns
    whatever sub-profiles it can build. Missing inputs mean a None sub-profile,
    not an exception; exceptions are reserved for the provider itself failing
    (network error, timeout, bad response). Providers never retry internally.
    """
    name: str = ''
    data_source: str = ''        # tag stored on every record this provider produces
    description: str = ''

    @abstractmethod
    def synthesize(self, contact: Contact, industry: str, rng) -> ProfileBundle:
        """
        Build a profile bundle for a contact.

        Args:
            contact:  The contact being enriched.
            industry: Industry label from the classifier.
            rng:      random.Random-compatible source. Providers that fabricate
                      data draw from it; real providers ignore it.
        """
        ...

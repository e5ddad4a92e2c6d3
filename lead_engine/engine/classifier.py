"""
Contact classifier — industry, seniority, department, company size, location.

Every classification is an ordered list of Rule(label, predicate). Rules are
evaluated top to bottom and the first match wins, so precedence is the list
order. Company size uses the same first-match order over two texts (notes and
company name). All functions are pure.
"""
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from lead_engine.engine.base import Contact


@dataclass(frozen=True)
class Rule:
    label: str
    predicate: Callable[[str], bool]

    def matches(self, text: str) -> bool:
        return self.predicate(text)


@dataclass(frozen=True)
class Classification:
    industry: str
    seniority: str
    department: str

    def to_dict(self):
        return {
            'industry': self.industry,
            'seniority': self.seniority,
            'department': self.department,
        }


def contains_any(*keywords: str) -> Callable[[str], bool]:
    """Predicate: any keyword appears as a substring."""
    return lambda text: any(k in text for k in keywords)


def has_word(*keywords: str) -> Callable[[str], bool]:
    """Predicate: any keyword appears as a whole word or phrase."""
    pattern = re.compile(r'\b(?:' + '|'.join(re.escape(k) for k in keywords) + r')\b')
    return lambda text: pattern.search(text) is not None


def first_match(rules: Iterable[Rule], text: str, default: str) -> str:
    for rule in rules:
        if rule.matches(text):
            return rule.label
    return default


# ── Industry ─────────────────────────────────────────────────────────────────

DEFAULT_INDUSTRY = 'General Business'

INDUSTRY_RULES: List[Rule] = [
    Rule('HVAC', contains_any('hvac', 'heating', 'cooling', 'air conditioning', 'furnace', 'ac repair')),
    Rule('Plumbing', contains_any('plumbing', 'plumber', 'pipes', 'drain', 'water heater', 'leak')),
    Rule('Electrical', contains_any('electrical', 'electrician', 'wiring', 'electric', 'generator', 'lighting')),
    Rule('Restaurant', contains_any('restaurant', 'food', 'dining', 'cafe', 'bistro', 'catering')),
    Rule('Healthcare', contains_any('medical', 'doctor', 'dental', 'dentist', 'clinic', 'health', 'physician')),
    Rule('Professional Services', contains_any('consulting', 'legal', 'accounting', 'financial', 'advisory')),
]

INDUSTRIES = [rule.label for rule in INDUSTRY_RULES]


def classify_industry(contact: Contact) -> str:
    """Scan notes and company text; the first industry with a keyword hit wins."""
    notes = contact.notes.lower()
    company = contact.company.lower()
    for rule in INDUSTRY_RULES:
        if rule.matches(notes) or rule.matches(company):
            return rule.label
    return DEFAULT_INDUSTRY


# ── Seniority ────────────────────────────────────────────────────────────────

DEFAULT_SENIORITY = 'mid'

_is_vp = has_word('vp', 'vice president', 'svp', 'evp')
_is_chief = has_word('ceo', 'cfo', 'coo', 'cto', 'cmo', 'chief', 'founder', 'co-founder', 'president', 'owner')

SENIORITY_RULES: List[Rule] = [
    Rule('c_level', lambda t: _is_chief(t) and not _is_vp(t)),
    Rule('vp', _is_vp),
    Rule('director', has_word('director', 'head of')),
    Rule('senior', has_word('manager', 'lead', 'senior', 'sr', 'principal')),
    Rule('entry', has_word('coordinator', 'assistant', 'intern', 'junior', 'jr', 'associate')),
]


def classify_seniority(job_title: Optional[str]) -> str:
    return first_match(SENIORITY_RULES, (job_title or '').lower(), DEFAULT_SENIORITY)


# ── Department ───────────────────────────────────────────────────────────────

DEFAULT_DEPARTMENT = 'operations'

DEPARTMENT_RULES: List[Rule] = [
    Rule('marketing', has_word('marketing', 'brand')),
    Rule('sales', has_word('sales', 'business development')),
    Rule('operations', has_word('operations', 'ops')),
    Rule('hr', has_word('hr', 'human resources', 'people')),
    Rule('finance', has_word('finance', 'financial', 'accounting', 'cfo')),
    Rule('it', has_word('it', 'technology', 'engineering', 'cto')),
]


def classify_department(job_title: Optional[str]) -> str:
    return first_match(DEPARTMENT_RULES, (job_title or '').lower(), DEFAULT_DEPARTMENT)


def classify(contact: Contact) -> Classification:
    """Industry from notes/company; seniority and department from the contact's position."""
    return Classification(
        industry=classify_industry(contact),
        seniority=classify_seniority(contact.position),
        department=classify_department(contact.position),
    )


# ── Company size ─────────────────────────────────────────────────────────────

# (label, notes predicate, company-name predicate). A size matches on either.
COMPANY_SIZE_RULES = [
    ('small', contains_any('small', 'startup'), has_word('llc')),
    ('medium', contains_any('medium', 'growing'), None),
    ('large', contains_any('large', 'enterprise'), has_word('inc')),
]


def estimate_company_size(contact: Contact) -> str:
    """Size hinted by notes keywords or a legal suffix on the company name; default small."""
    notes = contact.notes.lower()
    company = contact.company.lower()
    for label, notes_match, company_match in COMPANY_SIZE_RULES:
        if notes_match(notes) or (company_match is not None and company_match(company)):
            return label
    return 'small'


# ── Location ─────────────────────────────────────────────────────────────────

KNOWN_CITIES = [
    ('miami', 'Miami, FL'),
    ('new york', 'New York, NY'),
    ('los angeles', 'Los Angeles, CA'),
    ('chicago', 'Chicago, IL'),
    ('houston', 'Houston, TX'),
    ('phoenix', 'Phoenix, AZ'),
]

MAJOR_MARKETS = [city for _, city in KNOWN_CITIES]


def extract_location(contact: Contact) -> Optional[str]:
    """Known city mentioned in notes or company name, else None."""
    notes = contact.notes.lower()
    company = contact.company.lower()
    for needle, city in KNOWN_CITIES:
        if needle in notes or needle in company:
            return city
    return None

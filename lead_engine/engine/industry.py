"""
Industry knowledge used for personalization, tips, insights and send times.

Keyed by the labels the classifier produces. 'General Business' has no entry;
callers fall back to GENERIC_PROFILE.
"""
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class IndustryProfile:
    pain_points: Tuple[str, ...]
    solutions: Tuple[str, ...]
    results: Tuple[str, ...]
    service_keyword: str
    example: str
    tips: Tuple[str, ...]
    avg_customer_value: str
    additional_customers: str
    monthly_increase: str
    send_window: str


INDUSTRY_PROFILES: Dict[str, IndustryProfile] = {
    'HVAC': IndustryProfile(
        pain_points=('seasonal demand fluctuations', 'emergency call competition', 'customer acquisition cost'),
        solutions=('predictable lead flow', '24/7 online presence', 'customer retention systems'),
        results=('40% more service calls', 'reduced seasonal downtime', 'higher customer lifetime value'),
        service_keyword='HVAC repair',
        example='an HVAC company like Smith Heating & Air',
        tips=('Optimize for emergency repair searches',
              'Create seasonal maintenance campaigns',
              'Target energy efficiency keywords'),
        avg_customer_value='$850',
        additional_customers='25-40',
        monthly_increase='$21,250-$34,000',
        send_window='Tuesday-Thursday, 10 AM - 2 PM (before afternoon service calls)',
    ),
    'Plumbing': IndustryProfile(
        pain_points=('emergency competition', 'trust building', 'pricing transparency'),
        solutions=('local SEO dominance', 'review management', 'online booking systems'),
        results=('3x more emergency calls', 'improved online reputation', 'streamlined scheduling'),
        service_keyword='plumber',
        example='a plumbing company like Pro Plumbing Solutions',
        tips=('Focus on emergency plumbing keywords',
              'Build trust with customer testimonials',
              'Target water heater replacement searches'),
        avg_customer_value='$425',
        additional_customers='30-50',
        monthly_increase='$12,750-$21,250',
        send_window='Monday-Wednesday, 9 AM - 11 AM (before emergency calls)',
    ),
    'Electrical': IndustryProfile(
        pain_points=('safety concerns', 'licensing credibility', 'residential vs commercial'),
        solutions=('safety-focused marketing', 'credential highlighting', 'service specialization'),
        results=('enhanced credibility', 'premium pricing acceptance', 'specialized market leadership'),
        service_keyword='electrician',
        example='an electrical company like Sparks Electric',
        tips=('Emphasize safety and licensing',
              'Target panel upgrade keywords',
              'Focus on residential and commercial services'),
        avg_customer_value='$650',
        additional_customers='20-35',
        monthly_increase='$13,000-$22,750',
        send_window='Tuesday-Thursday, 1 PM - 3 PM (after morning installations)',
    ),
    'Restaurant': IndustryProfile(
        pain_points=('food delivery competition', 'customer retention', 'online ordering'),
        solutions=('local food marketing', 'loyalty programs', 'delivery optimization'),
        results=('increased repeat customers', 'higher order values', 'reduced delivery costs'),
        service_keyword='restaurant',
        example="a restaurant like Tony's Italian Kitchen",
        tips=('Optimize for food delivery searches',
              'Build strong Google My Business presence',
              'Target local dining keywords'),
        avg_customer_value='$35',
        additional_customers='200-400',
        monthly_increase='$7,000-$14,000',
        send_window='Tuesday-Thursday, 2 PM - 4 PM (between lunch and dinner)',
    ),
    'Healthcare': IndustryProfile(
        pain_points=('patient acquisition', 'HIPAA compliance', 'online reputation'),
        solutions=('compliant digital marketing', 'patient portal optimization', 'reputation management'),
        results=('more patient bookings', 'improved online presence', 'enhanced patient satisfaction'),
        service_keyword='doctor',
        example='a medical practice like Downtown Family Medicine',
        tips=('Optimize for health condition searches',
              'Build patient review base',
              'Target insurance and location keywords'),
        avg_customer_value='$300',
        additional_customers='40-80',
        monthly_increase='$12,000-$24,000',
        send_window='Wednesday-Friday, 11 AM - 1 PM (administrative time)',
    ),
    'Professional Services': IndustryProfile(
        pain_points=('lead qualification', 'expertise demonstration', 'client retention'),
        solutions=('thought leadership content', 'case study marketing', 'client success tracking'),
        results=('higher quality leads', 'increased authority', 'improved client lifetime value'),
        service_keyword='consultant',
        example='a firm like Johnson & Associates',
        tips=('Focus on practice area keywords',
              'Build authority with content marketing',
              'Target local professional service searches'),
        avg_customer_value='$2,500',
        additional_customers='8-15',
        monthly_increase='$20,000-$37,500',
        send_window='Tuesday-Thursday, 9 AM - 11 AM (start of business day)',
    ),
}

GENERIC_PROFILE = IndustryProfile(
    pain_points=('marketing challenges', 'inconsistent lead flow', 'standing out from competitors'),
    solutions=('grow your business', 'a steady stream of qualified leads', 'a stronger local presence'),
    results=('significant growth', 'increase their revenue by 40%', 'more booked appointments'),
    service_keyword='local business',
    example='a local business just like yours',
    tips=('Claim and complete your Google Business Profile',
          'Ask every happy customer for a review',
          'Add a clear call-to-action to your homepage'),
    avg_customer_value='$500',
    additional_customers='15-30',
    monthly_increase='$7,500-$15,000',
    send_window='Tuesday-Thursday, 10 AM - 2 PM (general business hours)',
)

GENERIC_INSIGHTS = [
    'Focus on ROI and measurable results',
    'Highlight competitive advantages',
    'Emphasize time-saving benefits',
]


def industry_profile(industry: str) -> IndustryProfile:
    return INDUSTRY_PROFILES.get(industry, GENERIC_PROFILE)


def has_profile(industry: str) -> bool:
    return industry in INDUSTRY_PROFILES

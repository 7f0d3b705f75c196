"""
Database entity models.

Modules:
- users: User accounts and their profiles
- countries: Country reference data
- firms: Firms subject to practice reviews
- practice_reviews: Scheduled practice reviews
- upcoming_review_notices: Notices moving through the generate/approve workflow
"""

from .countries import Country
from .firms import Firm
from .practice_reviews import PracticeReview, is_valid_email
from .upcoming_review_notices import UpcomingReviewNotice
from .users import Profile, User

__all__ = [
    "Country",
    "Firm",
    "PracticeReview",
    "Profile",
    "UpcomingReviewNotice",
    "User",
    "is_valid_email",
]

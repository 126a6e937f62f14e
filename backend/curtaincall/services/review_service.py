"""
Review Service for show ratings and moderation
"""
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.review import Review
from curtaincall.models.show import Show
from curtaincall.models.user import User
from curtaincall.utils.datetime_utils import utc_now
from curtaincall.utils.ids import new_id

logger = LoggingConfig.get_logger(__name__)

COMMENT_MIN_LENGTH = 10
COMMENT_MAX_LENGTH = 500


class ReviewService:
    """Service for reading, submitting and moderating reviews"""

    def __init__(self, db: Session):
        self.db = db

    def get_review(self, review_id: str) -> Optional[Review]:
        return self.db.get(Review, review_id)

    def reviews_for_show(self, show_id: str) -> List[Review]:
        return (
            self.db.query(Review)
            .filter(Review.show_id == show_id, Review.is_blocked.is_(False))
            .order_by(Review.created_at.desc())
            .all()
        )

    def average_rating(self, show: Show) -> float:
        """Mean of the visible review ratings, or the show's own rating when it has none"""
        reviews = self.reviews_for_show(show.id)
        if not reviews:
            return show.rating
        return round(sum(r.rating for r in reviews) / len(reviews), 1)

    def list_admin(self, show_id: Optional[str] = None, rating: Optional[int] = None) -> List[Review]:
        query = self.db.query(Review)
        if show_id and show_id != "all":
            query = query.filter(Review.show_id == show_id)
        if rating:
            query = query.filter(Review.rating == rating)
        return query.order_by(Review.created_at.desc()).all()

    def reviewed_shows(self) -> List[Tuple[str, str]]:
        """(show_id, title) of every show that has at least one review"""
        rows = (
            self.db.query(Show.id, Show.title)
            .join(Review, Review.show_id == Show.id)
            .distinct()
            .all()
        )
        return sorted(((r[0], r[1]) for r in rows), key=lambda pair: pair[1].lower())

    def submit_review(self, user: User, show_id: str, rating, comment: str) -> Optional[Review]:
        """
        Add a review for a show

        Args:
            user: Reviewer
            show_id: Reviewed show
            rating: Stars, 1 to 5
            comment: Between 10 and 500 characters

        Returns:
            New review, or None if the show does not exist

        Raises:
            ValueError: On an out-of-range rating or comment length
        """
        if self.db.get(Show, show_id) is None:
            return None

        try:
            stars = int(rating)
        except (TypeError, ValueError):
            raise ValueError("Rating must be a whole number between 1 and 5")
        if stars < 1 or stars > 5:
            raise ValueError("Rating must be between 1 and 5")

        comment = (comment or "").strip()
        if len(comment) < COMMENT_MIN_LENGTH:
            raise ValueError(f"Comment must be at least {COMMENT_MIN_LENGTH} characters")
        if len(comment) > COMMENT_MAX_LENGTH:
            raise ValueError(f"Comment must be at most {COMMENT_MAX_LENGTH} characters")

        review = Review(
            id=new_id("rev"),
            show_id=show_id,
            user_id=user.id,
            user_name=user.name,
            user_avatar=user.avatar_url,
            rating=stars,
            comment=comment,
            created_at=utc_now(),
            likes=0,
        )
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        logger.info(f"User {user.id} reviewed show {show_id} ({stars} stars)")
        return review

    def delete_review(self, review_id: str) -> bool:
        review = self.get_review(review_id)
        if not review:
            return False
        self.db.delete(review)
        self.db.commit()
        logger.info(f"Deleted review {review_id}")
        return True

    def block_review(self, review_id: str) -> bool:
        review = self.get_review(review_id)
        if not review:
            return False
        review.is_blocked = True
        self.db.commit()
        logger.info(f"Blocked review {review_id} by {review.user_id}")
        return True

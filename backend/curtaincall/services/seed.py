"""
Demo data generator

Fills an empty store with shows, bookings, payments, discounts, reviews,
users and wishlist entries so the public site and the back-office have
something to show. Dates are generated relative to "now".
"""
import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from curtaincall.core.config import get_settings
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.booking import Booking, BookingStatus, PaymentState
from curtaincall.models.discount import Discount
from curtaincall.models.payment import Payment, PaymentStatus
from curtaincall.models.review import Review
from curtaincall.models.show import Show, ShowStatus
from curtaincall.models.user import User, UserRole, UserStatus
from curtaincall.models.wishlist import WishlistItem
from curtaincall.services.seating import all_seat_ids, house_booked_seats, sort_seats
from curtaincall.utils.datetime_utils import parse_iso, to_iso_z, utc_now
from curtaincall.utils.ids import sequential_id

logger = LoggingConfig.get_logger(__name__)

GENRES = ["Drama", "Comedy", "Thriller", "Musical", "Mystery", "Historical", "Sci-Fi", "Romance"]
SHOW_STATUSES = [ShowStatus.UPCOMING, ShowStatus.ACTIVE, ShowStatus.CLOSED, ShowStatus.ENDED]
VENUES = ["Main Hall", "Grand Theatre", "Studio B", "Opera House", "The Black Box", "Amphitheatre"]
ACTORS = [
    "Alice Ray", "Bob Smith", "Charlie Green", "Diana Fox", "Ethan Hunt", "Fiona Blue",
    "George Moon", "Helen Star", "Ian Stone", "Julia Sky", "Kevin River", "Linda Brook",
]
DESCRIPTIONS = [
    "A gripping tale of betrayal and redemption.",
    "A hilarious journey through modern life.",
    "A nail-biting thriller that will keep you on the edge of your seat.",
    "A spectacular musical extravaganza with unforgettable songs.",
    "A baffling mystery where everyone is a suspect.",
    "An epic historical drama spanning generations.",
    "A thought-provoking sci-fi adventure to another world.",
    "A heartwarming story of love against all odds.",
    "An intense courtroom drama with shocking twists.",
    "A lighthearted comedy perfect for a night out.",
]

# (id, name, email, role, status, created_at, last_login)
NAMED_USERS = [
    ("user1", "Alice", "alice@example.com", UserRole.USER, UserStatus.ACTIVE, "2024-01-15T10:00:00Z", "2024-07-20T12:30:00Z"),
    ("user2", "Bob", "bob@example.com", UserRole.USER, UserStatus.ACTIVE, "2024-02-20T11:00:00Z", "2024-07-19T09:00:00Z"),
    ("user3", "Charlie Organizer", "charlie@org.com", UserRole.ORGANIZER, UserStatus.ACTIVE, "2024-01-01T08:00:00Z", "2024-07-21T08:00:00Z"),
    ("user4", "David Suspended", "david@example.com", UserRole.USER, UserStatus.SUSPENDED, "2024-03-10T14:00:00Z", None),
    ("user5", "Eve Handler", "eve@handler.com", UserRole.HANDLER, UserStatus.ACTIVE, "2024-05-05T16:00:00Z", "2024-07-18T15:00:00Z"),
    ("user6", "Frank Pending", "frank@pending.com", UserRole.USER, UserStatus.PENDING_VERIFICATION, "2024-07-21T10:00:00Z", None),
]
# Customers referenced by generated bookings, payments and reviews after the named six
CUSTOMER_NAMES = [
    "Alice", "Bob", "Charlie", "David", "Eve", "Frank", "Grace", "Henry",
    "Ivy", "Jack", "Kate", "Liam", "Mary", "Noah", "Olivia", "Peter",
]

REVIEW_COMMENTS = [
    "Absolutely fantastic performance! A must-see.",
    "Great show, enjoyed the story and acting. The venue was comfortable too.",
    "It was okay, had a few laughs but expected more.",
    "Disappointing plot, felt very predictable. Not worth the price.",
    "Incredible set design and powerful performances. Highly recommend!",
    "Terrible! Walked out halfway through. Complete waste of time and money.",
    "A solid performance, but nothing groundbreaking.",
    "The lead actor was phenomenal!",
    "Some technical issues, but the story was engaging.",
    "Good value for money. Entertaining evening.",
    "A bit slow in the first act, but picked up later.",
    "Loved the costumes and music.",
    "Not my cup of tea, but well-produced.",
    "Funny and heartwarming.",
    "Thought-provoking and moving.",
]

BOOKING_STATUSES = [BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.PENDING]
BOOKING_PAYMENT_STATES = [PaymentState.PAID, PaymentState.PENDING, PaymentState.FAILED, PaymentState.REFUNDED]
PAYMENT_METHODS = ["Card", "Card", "PayPal", "Card"]
DISCOUNT_PREFIXES = [
    "SUMMER", "WINTER", "FALL", "SPRING", "WELCOME",
    "SPECIAL", "FLASH", "MEMBER", "LOYALTY", "EARLYBIRD",
]
DISCOUNT_PERCENTAGES = [5, 10, 15, 20, 25]

_PAYMENT_FOR_BOOKING = {
    PaymentState.PAID.value: PaymentStatus.SUCCEEDED,
    PaymentState.PENDING.value: PaymentStatus.PENDING,
    PaymentState.FAILED.value: PaymentStatus.FAILED,
    PaymentState.REFUNDED.value: PaymentStatus.REFUNDED,
}


class DemoDataSeeder:
    """Generates a consistent demo data set"""

    def __init__(self, db: Session, random_seed: Optional[int] = None, now: Optional[datetime] = None):
        self.db = db
        self.rng = random.Random(random_seed)
        self.now = now or utc_now()
        self.settings = get_settings()

    def is_empty(self) -> bool:
        return self.db.query(Show).first() is None

    def seed_all(
        self,
        show_count: int = 25,
        booking_count: int = 30,
        payment_count: int = 40,
        discount_count: int = 20,
        review_count: int = 30,
    ) -> Dict[str, int]:
        """Generate every entity type and commit once"""
        try:
            users = self.seed_users()
            shows = self.seed_shows(show_count)
            bookings = self.seed_bookings(booking_count, shows, users)
            payments = self.seed_payments(payment_count, bookings)
            discounts = self.seed_discounts(discount_count)
            reviews = self.seed_reviews(review_count, shows[:10], users)
            wishlist = self.seed_wishlist(shows)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error seeding demo data: {e}", exc_info=True)
            raise

        counts = {
            "users": len(users),
            "shows": len(shows),
            "bookings": len(bookings),
            "payments": len(payments),
            "discounts": len(discounts),
            "reviews": len(reviews),
            "wishlist_items": len(wishlist),
        }
        logger.info(f"Seeded demo data: {counts}")
        return counts

    def _evening(self, day: datetime) -> datetime:
        """7:00, 7:30, 8:00 ... 9:30 PM on the given day"""
        return day.replace(
            hour=19 + self.rng.randint(0, 2),
            minute=self.rng.choice([0, 30]),
            second=0,
            microsecond=0,
        )

    def seed_users(self) -> List[User]:
        users = []
        for user_id, name, email, role, status, created, last_login in NAMED_USERS:
            users.append(User(
                id=user_id,
                name=name,
                email=email,
                avatar_url=f"https://picsum.photos/seed/{name.split()[0].lower()}/100",
                role=role.value,
                status=status.value,
                created_at=parse_iso(created),
                last_login=parse_iso(last_login) if last_login else None,
                booking_count=0,
            ))
        for index, name in enumerate(CUSTOMER_NAMES[len(NAMED_USERS):], start=len(NAMED_USERS) + 1):
            users.append(User(
                id=f"user{index}",
                name=name,
                email=f"{name.lower()}@example.com",
                avatar_url=f"https://picsum.photos/seed/user{index}/100",
                role=UserRole.USER.value,
                status=UserStatus.ACTIVE.value,
                created_at=self.now - timedelta(days=self.rng.randint(30, 365)),
                last_login=self.now - timedelta(days=self.rng.randint(0, 29)),
                booking_count=0,
            ))
        self.db.add_all(users)
        return users

    def seed_shows(self, count: int) -> List[Show]:
        shows = []
        for i in range(1, count + 1):
            status = SHOW_STATUSES[i % len(SHOW_STATUSES)]
            if status == ShowStatus.UPCOMING:
                base = self.now + timedelta(days=self.rng.uniform(7, 67))
            elif status == ShowStatus.ACTIVE:
                base = self.now + timedelta(days=self.rng.uniform(1, 14))
            else:
                base = self.now - timedelta(days=self.rng.uniform(1, 61))

            schedule = []
            for idx in range(self.rng.randint(1, 3)):
                step = self.rng.choice([1, 7])
                schedule.append(self._evening(base + timedelta(days=idx * step)))

            cast = []
            for _ in range(self.rng.randint(2, 4)):
                actor = self.rng.choice(ACTORS)
                if actor not in cast:
                    cast.append(actor)

            genre = GENRES[i % len(GENRES)]
            shows.append(Show(
                id=sequential_id("show", i),
                title=f"{genre} Show #{i}",
                cast=cast,
                genre=genre,
                rating=round(self.rng.uniform(3.0, 5.0), 1),
                description=f"{DESCRIPTIONS[i % len(DESCRIPTIONS)]} (Ref: {i})",
                status=status.value,
                schedule=[to_iso_z(d) for d in sorted(set(schedule))],
                venue=VENUES[i % len(VENUES)],
            ))
        self.db.add_all(shows)
        return shows

    def _pick_seats(self, schedule: datetime, taken: Dict[str, set], key: str, count: int) -> List[str]:
        unavailable = house_booked_seats(schedule) | taken.setdefault(key, set())
        free = [s for s in all_seat_ids() if s not in unavailable]
        seats = sort_seats(self.rng.sample(free, min(count, len(free))))
        taken[key].update(seats)
        return seats

    def seed_bookings(self, count: int, shows: List[Show], users: List[User]) -> List[Booking]:
        """
        Bookings spread over the first eight shows

        Every tenth booking belongs to the demo user so their booking history
        is never empty.
        """
        bookings = []
        taken: Dict[str, set] = {}
        demo_user = next((u for u in users if u.id == self.settings.demo_user_id), users[0])
        customers = [u for u in users if u.id != demo_user.id]
        bookable = [s for s in shows if s.status == ShowStatus.ACTIVE.value and s.schedule]

        for i in range(1, count + 1):
            status = BOOKING_STATUSES[i % len(BOOKING_STATUSES)]
            payment_state = BOOKING_PAYMENT_STATES[i % len(BOOKING_PAYMENT_STATES)]
            if status == BookingStatus.CANCELLED:
                payment_state = PaymentState.REFUNDED
            elif status == BookingStatus.PENDING:
                payment_state = PaymentState.PENDING
            elif payment_state == PaymentState.PENDING:
                payment_state = PaymentState.PAID

            if i % 10 == 0 and bookable:
                user = demo_user
                show = bookable[(i // 10 - 1) % len(bookable)]
                schedule = self.rng.choice(show.performances)
            else:
                user = customers[i % len(customers)]
                show = shows[i % 8]
                schedule = self.rng.choice(show.performances)

            seat_count = self.rng.randint(1, 4)
            seats = self._pick_seats(schedule, taken, f"{show.id}|{to_iso_z(schedule)}", seat_count)
            booking_date = min(self.now, schedule - timedelta(days=self.rng.uniform(1, 8)))

            booking = Booking(
                id=sequential_id("bk", i),
                show_id=show.id,
                show_title=show.title,
                user_id=user.id,
                user_name=user.name,
                venue=show.venue,
                schedule=schedule,
                seats=seats,
                total_price=round(len(seats) * self.rng.uniform(40, 70), 2),
                booking_date=booking_date,
                status=status.value,
                payment_status=payment_state.value,
            )
            bookings.append(booking)
            user.booking_count = (user.booking_count or 0) + 1

        self.db.add_all(bookings)
        return bookings

    def seed_payments(self, count: int, bookings: List[Booking]) -> List[Payment]:
        """
        One payment per booking, then earlier failed or pending attempts for
        the remaining count
        """
        payments = []
        retry_statuses = [PaymentStatus.FAILED, PaymentStatus.PENDING]
        for i in range(1, count + 1):
            booking = bookings[(i - 1) % len(bookings)]
            first_attempt = i <= len(bookings)
            if first_attempt:
                status = _PAYMENT_FOR_BOOKING[booking.payment_status]
                if status == PaymentStatus.SUCCEEDED and i % 7 == 0:
                    status = PaymentStatus.PARTIALLY_REFUNDED
                amount = booking.total_price
                created_at = booking.booking_date
            else:
                status = retry_statuses[i % len(retry_statuses)]
                amount = booking.total_price
                created_at = booking.booking_date - timedelta(minutes=self.rng.randint(5, 90))

            refund_amount = None
            if status == PaymentStatus.REFUNDED:
                refund_amount = amount
            elif status == PaymentStatus.PARTIALLY_REFUNDED:
                refund_amount = round(amount * self.rng.uniform(0.1, 0.6), 2)

            payments.append(Payment(
                id=f"pi_{self.rng.getrandbits(40):010x}{i}",
                booking_id=booking.id,
                user_id=booking.user_id,
                user_name=booking.user_name,
                amount=amount,
                currency=self.settings.currency,
                status=status.value,
                payment_method=PAYMENT_METHODS[i % len(PAYMENT_METHODS)],
                created_at=created_at,
                refund_amount=refund_amount,
                show_title=booking.show_title,
            ))
        self.db.add_all(payments)
        return payments

    def seed_discounts(self, count: int) -> List[Discount]:
        discounts = []
        one_year_ago = self.now - timedelta(days=365)
        for i in range(1, count + 1):
            prefix = DISCOUNT_PREFIXES[i % len(DISCOUNT_PREFIXES)]
            pct = DISCOUNT_PERCENTAGES[i % len(DISCOUNT_PERCENTAGES)]
            usage_limit = self.rng.randint(100, 1000) if self.rng.random() > 0.6 else None
            times_used = (
                self.rng.randint(0, usage_limit) if usage_limit else self.rng.randint(0, 299)
            )
            valid_until = (
                self.now + timedelta(days=self.rng.uniform(-30, 150))
                if self.rng.random() > 0.4 else None
            )
            is_active = (
                self.rng.random() > 0.3
                and (valid_until is None or valid_until > self.now)
                and (usage_limit is None or times_used < usage_limit)
            )
            discounts.append(Discount(
                id=sequential_id("disc", i),
                code=f"{prefix}{pct}_{i}",
                discount_percentage=pct,
                description=f"{prefix.title()} Offer {i}",
                is_active=is_active,
                valid_until=valid_until,
                usage_limit=usage_limit,
                times_used=times_used,
                created_at=one_year_ago + timedelta(days=self.rng.uniform(0, 365)),
            ))

        discounts += [
            Discount(
                id="disc_fixed_1", code="SUMMER20", discount_percentage=20,
                description="Summer Sale 20% Off", is_active=True,
                valid_until=self.now + timedelta(days=182), times_used=50,
                created_at=parse_iso("2024-06-01T10:00:00Z"),
            ),
            Discount(
                id="disc_fixed_2", code="WELCOME10", discount_percentage=10,
                description="New User Welcome Offer", is_active=True,
                usage_limit=1000, times_used=150,
                created_at=parse_iso("2024-01-01T00:00:00Z"),
            ),
            Discount(
                id="disc_fixed_3", code="EXPIRED5", discount_percentage=5,
                description="Old Offer", is_active=False,
                valid_until=one_year_ago, times_used=25,
                created_at=parse_iso("2023-11-01T00:00:00Z"),
            ),
            Discount(
                id="disc_fixed_4", code="LAUNCH15", discount_percentage=15,
                description="Launch Special (Used Up)", is_active=False,
                usage_limit=50, times_used=50,
                created_at=parse_iso("2024-05-01T00:00:00Z"),
            ),
            Discount(
                id="disc_fixed_5", code="SAMPLE", discount_percentage=10,
                description="Sample checkout code", is_active=True, times_used=0,
                created_at=parse_iso("2024-01-01T00:00:00Z"),
            ),
        ]
        self.db.add_all(discounts)
        return discounts

    def seed_reviews(self, count: int, shows: List[Show], users: List[User]) -> List[Review]:
        reviews = []
        authors = users[:len(REVIEW_COMMENTS)]
        for i in range(1, count + 1):
            user = authors[i % len(authors)]
            reviews.append(Review(
                id=sequential_id("rev", i),
                show_id=shows[i % len(shows)].id,
                user_id=user.id,
                user_name=user.name,
                user_avatar=f"https://picsum.photos/seed/{user.id}/100",
                rating=self.rng.randint(1, 5),
                comment=f"{REVIEW_COMMENTS[i % len(REVIEW_COMMENTS)]} (Review {i})",
                created_at=self.now - timedelta(days=self.rng.uniform(0, 60)),
                likes=self.rng.randint(0, 29),
            ))
        self.db.add_all(reviews)
        return reviews

    def seed_wishlist(self, shows: List[Show], count: int = 3) -> List[WishlistItem]:
        public = [
            s for s in shows
            if s.status in (ShowStatus.ACTIVE.value, ShowStatus.UPCOMING.value)
        ]
        items = [
            WishlistItem(user_id=self.settings.demo_user_id, show_id=s.id, created_at=self.now)
            for s in public[:count]
        ]
        self.db.add_all(items)
        return items

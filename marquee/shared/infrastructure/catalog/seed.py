"""Static seed data for the in-memory catalog."""

from __future__ import annotations

from datetime import date
from typing import Tuple

from marquee.shared.domain.catalog.models import (
    Category,
    ContentItem,
    SubscriptionPlan,
    UserProfile,
    VideoQuality,
)

IMAGE_URL = "https://picsum.photos/seed/{seed}/400/600"


def _item(
    item_id: int,
    title: str,
    category: str,
    rating: float,
    description: str,
    *,
    seed: str,
    featured: bool = False,
) -> ContentItem:
    return ContentItem(
        id=item_id,
        title=title,
        description=description,
        image_url=IMAGE_URL.format(seed=seed),
        category=category,
        is_featured=featured,
        rating=rating,
    )


CATEGORIES: Tuple[Category, ...] = (
    Category(id="1", name="Action"),
    Category(id="2", name="Drama"),
    Category(id="3", name="Comedy"),
    Category(id="4", name="Thriller"),
    Category(id="5", name="Sci-Fi"),
    Category(id="6", name="Romance"),
)

CONTENT: Tuple[ContentItem, ...] = (
    _item(
        1, "Fast & Furious", "Action", 8.5,
        "High-octane action thriller featuring incredible car chases and death-defying stunts. Follow the crew as they embark on their most dangerous mission yet.",
        seed="action1", featured=True
    ),
    _item(
        2, "Iron Guardian", "Action", 9.0,
        "A superhero must save the world from an alien invasion. Epic battles and stunning visual effects make this a must-watch action adventure.",
        seed="action2"
    ),
    _item(
        3, "Mission: Impossible Redux", "Action", 8.7,
        "Impossible missions, incredible stunts, and edge-of-your-seat action. The ultimate spy thriller that keeps you guessing until the end.",
        seed="action3"
    ),
    _item(
        4, "The Last Letter", "Drama", 9.2,
        "A deeply emotional story about love, loss, and redemption. This heart-wrenching drama explores the complexities of human relationships.",
        seed="drama1", featured=True
    ),
    _item(
        5, "Broken Dreams", "Drama", 8.8,
        "A powerful tale of resilience and hope in the face of adversity. This drama showcases outstanding performances and compelling storytelling.",
        seed="drama2"
    ),
    _item(
        6, "The Artist's Journey", "Drama", 8.4,
        "Follow a struggling artist as they navigate the challenges of pursuing their passion while dealing with personal and professional setbacks.",
        seed="drama3"
    ),
    _item(
        7, "Laugh Out Loud", "Comedy", 7.9,
        "A hilarious comedy that will keep you laughing from start to finish. Perfect for a light-hearted movie night with friends and family.",
        seed="comedy1", featured=True
    ),
    _item(
        8, "The Funny Guy", "Comedy", 8.1,
        "A stand-up comedian's journey to stardom filled with mishaps, misunderstandings, and lots of laughs. A feel-good comedy for all ages.",
        seed="comedy2"
    ),
    _item(
        9, "Office Shenanigans", "Comedy", 7.6,
        "Workplace comedy at its finest. Watch as office employees navigate ridiculous situations and office politics with humor and wit.",
        seed="comedy3"
    ),
    _item(
        16, "Comedy Central", "Comedy", 7.8,
        "The ultimate comedy experience with non-stop laughs and hilarious characters. A perfect blend of wit and humor.",
        seed="comedy4"
    ),
    _item(
        17, "Joke's On You", "Comedy", 8.0,
        "A comedy masterpiece that will have you rolling on the floor with laughter. Clever writing meets perfect timing.",
        seed="comedy5"
    ),
    _item(
        10, "Dark Secrets", "Thriller", 8.9,
        "A psychological thriller that will keep you on the edge of your seat. Uncover dark secrets and hidden truths in this suspenseful masterpiece.",
        seed="thriller1"
    ),
    _item(
        11, "The Hunter", "Thriller", 9.1,
        "A cat-and-mouse game between a detective and a serial killer. This intense thriller features unexpected twists and shocking revelations.",
        seed="thriller2", featured=True
    ),
    _item(
        18, "Midnight Terror", "Thriller", 8.7,
        "A spine-chilling thriller that will keep you awake at night. Suspense builds with every scene in this masterpiece.",
        seed="thriller3"
    ),
    _item(
        19, "The Chase", "Thriller", 8.9,
        "High-stakes thriller with non-stop action and unexpected plot twists. Every moment counts in this edge-of-your-seat experience.",
        seed="thriller4"
    ),
    _item(
        20, "Silent Killer", "Thriller", 9.0,
        "A psychological thriller that explores the darkest corners of the human mind. Prepare for shocking revelations.",
        seed="thriller5"
    ),
    _item(
        12, "Galaxy Wars", "Sci-Fi", 8.6,
        "Epic space battles and alien encounters in this stunning sci-fi adventure. The future of humanity hangs in the balance.",
        seed="scifi1"
    ),
    _item(
        13, "Time Paradox", "Sci-Fi", 8.8,
        "A mind-bending time travel story that explores the consequences of altering the past. Prepare for a thought-provoking sci-fi experience.",
        seed="scifi2", featured=True
    ),
    _item(
        14, "Love Actually Happens", "Romance", 8.3,
        "A beautiful love story that spans different timelines and locations. This romantic drama will touch your heart and soul.",
        seed="romance1"
    ),
    _item(
        15, "Second Chances", "Romance", 8.5,
        "Two people get a second chance at love after years apart. A heartwarming romance that believes in the power of true love.",
        seed="romance2", featured=True
    ),
    _item(
        21, "Eternal Love", "Romance", 8.4,
        "A timeless love story that transcends all boundaries. Romance at its most beautiful and touching form.",
        seed="romance3"
    ),
    _item(
        22, "Heart to Heart", "Romance", 8.6,
        "An emotional journey of two souls finding each other against all odds. Love conquers all in this touching tale.",
        seed="romance4"
    ),
    _item(
        23, "Perfect Match", "Romance", 8.2,
        "A romantic comedy that perfectly balances humor and heart. Sometimes love finds you when you least expect it.",
        seed="romance5"
    ),
)

DEFAULT_PROFILE = UserProfile(
    username="John Doe",
    email="john.doe@example.com",
    avatar_url="https://picsum.photos/seed/profile/200/200",
    notifications_enabled=True,
    dark_mode_enabled=True,
    language="English",
    video_quality=VideoQuality.AUTO,
    subscription_plan=SubscriptionPlan.PREMIUM,
    join_date=date(2023, 1, 15),
    watchlist=(1, 4, 7, 11, 15),
    watched_movies=127,
    watched_hours=203,
)

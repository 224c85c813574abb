import logging
from datetime import timedelta
from sqlalchemy.orm import Session
from studyflow.models.enums import ClassLevel, ClassType, SessionStatus
from studyflow.models.language_class import ClassSession, LanguageClass
from studyflow.utils.dates import utcnow

logger = logging.getLogger(__name__)

SESSIONS_PER_CLASS = 3

SAMPLE_CLASSES = [
    {
        "title": "Spanish Conversation for Beginners",
        "description": "Build confidence speaking Spanish in everyday situations. Perfect for beginners who want to practice basic conversations.",
        "language": "Spanish",
        "level": ClassLevel.beginner,
        "type": ClassType.conversation,
        "instructor_name": "Maria Rodriguez",
        "location": "Downtown Community Center",
        "address": "123 Main St, Downtown",
        "price": 2500,
        "duration": 60,
        "max_students": 8,
        "current_students": 3,
        "contact_email": "maria@linguaconnect.com",
        "contact_phone": "(555) 123-4567",
    },
    {
        "title": "French Grammar Workshop",
        "description": "Master French grammar fundamentals in this intensive workshop. Covers verb conjugations, articles, and sentence structure.",
        "language": "French",
        "level": ClassLevel.intermediate,
        "type": ClassType.workshop,
        "instructor_name": "Pierre Dubois",
        "location": "Language Institute",
        "address": "456 Academic Ave, University District",
        "price": 4000,
        "duration": 90,
        "max_students": 12,
        "current_students": 7,
        "contact_email": "pierre@languageinstitute.edu",
        "contact_phone": "(555) 234-5678",
    },
    {
        "title": "German for Business Professionals",
        "description": "Learn professional German for business settings. Focus on meetings, presentations, and formal communication.",
        "language": "German",
        "level": ClassLevel.advanced,
        "type": ClassType.class_,
        "instructor_name": "Hans Mueller",
        "location": "Business Center",
        "address": "789 Corporate Blvd, Business District",
        "price": 6000,
        "duration": 120,
        "max_students": 6,
        "current_students": 4,
        "contact_email": "hans@businesslanguage.com",
        "contact_phone": "(555) 345-6789",
    },
    {
        "title": "Italian Cultural Immersion",
        "description": "Explore Italian culture through language. Learn about traditions, cuisine, and history while improving your Italian.",
        "language": "Italian",
        "level": ClassLevel.intermediate,
        "type": ClassType.workshop,
        "instructor_name": "Giulia Rossi",
        "location": "Cultural Arts Center",
        "address": "321 Arts Plaza, Cultural Quarter",
        "price": 3500,
        "duration": 75,
        "max_students": 10,
        "current_students": 6,
        "contact_email": "giulia@culturalcenter.org",
        "contact_phone": "(555) 456-7890",
    },
    {
        "title": "Japanese Beginner's Course",
        "description": "Start your Japanese journey with hiragana, basic vocabulary, and simple conversations.",
        "language": "Japanese",
        "level": ClassLevel.beginner,
        "type": ClassType.class_,
        "instructor_name": "Yuki Tanaka",
        "location": "East Side Language School",
        "address": "654 East St, Riverside",
        "price": 4500,
        "duration": 90,
        "max_students": 8,
        "current_students": 2,
        "contact_email": "yuki@eastlanguage.com",
        "contact_phone": "(555) 567-8901",
    },
    {
        "title": "Portuguese for Travel",
        "description": "Essential Portuguese phrases and vocabulary for travelers. Perfect for those planning trips to Brazil or Portugal.",
        "language": "Portuguese",
        "level": ClassLevel.beginner,
        "type": ClassType.workshop,
        "instructor_name": "Carlos Silva",
        "location": "Travel Language Hub",
        "address": "987 Explorer Way, Airport District",
        "price": 3000,
        "duration": 60,
        "max_students": 12,
        "current_students": 8,
        "contact_email": "carlos@travellanguage.com",
        "contact_phone": "(555) 678-9012",
    },
]


def seed_database(db: Session) -> int:
    """Insert the sample classes with three weekly sessions each.

    Does nothing when any class already exists. Returns the number of classes added.
    """
    if db.query(LanguageClass.id).first() is not None:
        logger.info("Language classes already present; skipping seed")
        return 0

    now = utcnow()
    classes = [LanguageClass(**data, is_active=True, created_at=now) for data in SAMPLE_CLASSES]
    db.add_all(classes)
    db.flush()

    for class_row in classes:
        for week in range(1, SESSIONS_PER_CLASS + 1):
            start = (now + timedelta(weeks=week)).replace(hour=14, minute=0, second=0, microsecond=0)
            db.add(ClassSession(
                class_id=class_row.id,
                start_time=start,
                end_time=start + timedelta(minutes=class_row.duration),
                available_spots=class_row.max_students - class_row.current_students,
                is_recurring=True,
                recurring_pattern="weekly",
                status=SessionStatus.scheduled,
                created_at=now,
            ))

    db.commit()
    logger.info("Seeded %d language classes with %d sessions each", len(classes), SESSIONS_PER_CLASS)
    return len(classes)

from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

from entries import MoodEntry, SentimentResult

db = SQLAlchemy()

class MoodEntryRecord(db.Model):
    """Append-only row; nothing updates or deletes it after insert."""

    __tablename__ = "mood_entries"

    id = db.Column(db.Integer, primary_key=True)
    mood_value = db.Column(db.Integer, nullable=False)           # 1..5
    mood_label = db.Column(db.String(50), nullable=False)        # e.g., "Anxious"
    reflection = db.Column(db.Text, nullable=True)

    # When the check-in happened vs. when it was saved
    timestamp = db.Column(db.String(40), nullable=False)
    created_at = db.Column(db.String(40), nullable=False,
                           default=lambda: datetime.now().isoformat(timespec="seconds"))

    # Computed once at save time, never recomputed
    sentiment_data = db.Column(db.JSON, nullable=True)

    def to_entry(self):
        return MoodEntry(
            id=self.id,
            mood_value=self.mood_value,
            mood_label=self.mood_label,
            reflection=self.reflection,
            timestamp=self.timestamp,
            created_at=self.created_at,
            sentiment=SentimentResult.from_dict(self.sentiment_data) if self.sentiment_data else None,
        )

    def __repr__(self):
        return f"<MoodEntryRecord id={self.id} mood={self.mood_value}>"

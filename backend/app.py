import logging
from datetime import date, datetime, timedelta

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
from entries import InvalidEntryError, MoodEntry
from insight_service import generate_insights
from models import MoodEntryRecord, db
from pattern_detector import PatternDetector
from quality_service import check_data_quality
from sentiment_service import analyze_sentiment
from streak_service import (
    calculate_engagement,
    calculate_streak,
    engagement_insight,
    should_show_streak_prominently,
    streak_display_text,
)
from trend_service import circadian_profile, emotional_flow, peak_energy_times, trend_direction
from weekly_service import collect_observations, generate_weekly_summary, get_available_weeks

logger = logging.getLogger(__name__)

ANALYSIS_ERROR = "Unable to analyze your patterns right now. Please try again."

app = Flask(__name__)

# --- Database config (local SQLite unless DATABASE_URL says otherwise) ---
app.config["SQLALCHEMY_DATABASE_URI"] = config.DATABASE_URL
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

# --- Free tier ---
app.config["FREE_INSIGHT_LIMIT"] = config.FREE_INSIGHT_LIMIT
app.config["FREE_PATTERN_LIMIT"] = config.FREE_PATTERN_LIMIT
app.config["FREE_HISTORY_DAYS"] = config.FREE_HISTORY_DAYS

# Init DB
db.init_app(app)
with app.app_context():
    db.create_all()

# --- CORS (allow the app origin if provided) ---
if config.FRONTEND_ORIGIN:
    CORS(app, resources={r"/*": {"origins": [config.FRONTEND_ORIGIN]}})
else:
    # Dev fallback: allow all
    CORS(app)


def load_entries():
    """Snapshot of every stored entry, newest first."""
    records = (
        MoodEntryRecord.query
        .order_by(MoodEntryRecord.created_at.desc(), MoodEntryRecord.id.desc())
        .all()
    )
    return [r.to_entry() for r in records]


def json_body():
    """Request JSON as a dict; anything else reads as an empty body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def is_premium():
    return request.args.get("premium", "").lower() in ("1", "true", "yes")


def limit_for_tier(items, free_limit):
    """Full list for premium users, the first ``free_limit`` items otherwise."""
    if is_premium():
        return items, 0
    return items[:free_limit], max(0, len(items) - free_limit)


# ---------- Routes ----------

@app.route("/health")
def health():
    """Simple health check + DB connectivity test."""
    db_ok = True
    try:
        with db.engine.connect() as conn:
            conn.execute(db.text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        db_ok = False
    return jsonify({
        "ok": True,
        "db_ok": db_ok,
        "time": datetime.now().isoformat(timespec="seconds"),
    }), 200


@app.route("/entries", methods=["POST"])
def create_entry():
    """Save one check-in; sentiment is computed here, once."""
    data = json_body()
    now = datetime.now().isoformat(timespec="seconds")
    try:
        entry = MoodEntry.from_dict({**data, "created_at": now, "sentiment_data": None})
    except InvalidEntryError as e:
        return jsonify({"error": str(e)}), 400

    reflection = entry.reflection_text or None
    record = MoodEntryRecord(
        mood_value=entry.mood_value,
        mood_label=entry.mood_label,
        reflection=reflection,
        timestamp=entry.timestamp,
        created_at=now,
        sentiment_data=analyze_sentiment(reflection).to_dict() if reflection else None,
    )
    db.session.add(record)
    db.session.commit()
    logger.info("Saved mood entry %d (mood=%d)", record.id, record.mood_value)

    return jsonify(record.to_entry().to_dict()), 201


@app.route("/entries", methods=["GET"])
def list_entries():
    """Saved entries (latest first); free users see the recent window only."""
    entries = load_entries()
    if not is_premium():
        cutoff = datetime.now() - timedelta(days=app.config["FREE_HISTORY_DAYS"])
        entries = [e for e in entries if e.recorded_at is None or e.recorded_at >= cutoff]
    return jsonify([e.to_dict() for e in entries]), 200


@app.route("/insights")
def insights():
    entries = load_entries()
    quality = check_data_quality(entries)
    if not quality.has_enough_data:
        logger.info("Skipping insights: %s", quality.reason)
        return jsonify({**quality.to_dict(), "insights": [], "total": 0, "locked": 0}), 200

    try:
        found = generate_insights(entries)
    except Exception:
        logger.exception("Insight generation failed")
        return jsonify({"error": ANALYSIS_ERROR}), 500

    shown, locked = limit_for_tier(found, app.config["FREE_INSIGHT_LIMIT"])
    return jsonify({
        **quality.to_dict(),
        "insights": [i.to_dict() for i in shown],
        "total": len(found),
        "locked": locked,
    }), 200


@app.route("/patterns")
def patterns():
    try:
        detector = PatternDetector(load_entries())
        found = detector.get_personal_patterns()
        correlations = detector.get_correlation_insights()
    except Exception:
        logger.exception("Pattern detection failed")
        return jsonify({"error": ANALYSIS_ERROR}), 500

    shown, locked = limit_for_tier(found, app.config["FREE_PATTERN_LIMIT"])
    return jsonify({
        "patterns": [p.to_dict() for p in shown],
        "correlations": correlations,
        "total": len(found),
        "locked": locked,
    }), 200


@app.route("/predict", methods=["POST"])
def predict():
    data = json_body()
    mood = data.get("mood_value")
    if isinstance(mood, bool) or not isinstance(mood, int) or not 1 <= mood <= 5:
        return jsonify({"error": "'mood_value' must be an integer between 1 and 5"}), 400
    reflection = data.get("reflection")
    if reflection is not None and not isinstance(reflection, str):
        return jsonify({"error": "'reflection' must be a string"}), 400

    try:
        prediction = PatternDetector(load_entries()).predict_next_mood(mood, reflection)
    except Exception:
        logger.exception("Mood prediction failed")
        return jsonify({"error": ANALYSIS_ERROR}), 500
    return jsonify(prediction.to_dict()), 200


@app.route("/sentiment", methods=["POST"])
def sentiment():
    data = json_body()
    text = data.get("text")
    if text is not None and not isinstance(text, str):
        return jsonify({"error": "'text' must be a string"}), 400
    return jsonify(analyze_sentiment(text or "").to_dict()), 200


@app.route("/weekly")
def weekly():
    week_start = request.args.get("week_start")
    try:
        start = date.fromisoformat(week_start) if week_start else None
    except ValueError:
        return jsonify({"error": "'week_start' must be YYYY-MM-DD"}), 400

    entries = load_entries()
    try:
        summary = generate_weekly_summary(entries, week_start=start)
        observations = collect_observations(
            PatternDetector(entries).get_personal_patterns(), generate_insights(entries)
        )
    except Exception:
        logger.exception("Weekly summary failed")
        return jsonify({"error": ANALYSIS_ERROR}), 500

    shown, locked = limit_for_tier(observations, app.config["FREE_INSIGHT_LIMIT"])
    return jsonify({
        "summary": summary.to_dict(),
        "observations": [o.to_dict() for o in shown],
        "locked": locked,
        "available_weeks": [w.date().isoformat() for w in get_available_weeks(entries)],
    }), 200


@app.route("/streak")
def streak():
    entries = load_entries()
    streak_data = calculate_streak(entries)
    engagement = calculate_engagement(entries)
    return jsonify({
        "streak": streak_data.to_dict(),
        "display_text": streak_display_text(streak_data),
        "show_prominently": should_show_streak_prominently(streak_data),
        "engagement": engagement.to_dict(),
        "engagement_insight": engagement_insight(engagement),
    }), 200


@app.route("/trend")
def trend():
    days = request.args.get("days", "30")
    if not days.isdigit() or int(days) < 1:
        return jsonify({"error": "'days' must be a positive integer"}), 400

    entries = load_entries()
    flow = emotional_flow(entries, days=int(days))
    return jsonify({
        "flow": [p.to_dict() for p in flow],
        "direction": trend_direction(flow),
        "peak_times": peak_energy_times(circadian_profile(entries)),
    }), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(
        host="127.0.0.1",
        port=config.PORT,
        debug=config.DEBUG,
    )

import re

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from entries import SentimentResult

analyzer = SentimentIntensityAnalyzer()

# Punctuation stripped before tokenising; apostrophes stay so "don't" is one token.
_PUNCTUATION = re.compile(r"[.,/#!?$%^&*;:{}=_`\"~()\[\]<>|\\+-]")


def tokenize(text):
    cleaned = _PUNCTUATION.sub(" ", text.lower())
    return [token for token in cleaned.split() if token]


def analyze_sentiment(text):
    """Score free text against the VADER lexicon.

    ``score`` is the rounded sum of word valences, ``comparative`` divides it
    by the token count. Blank text yields an all-zero result.
    """
    if not text or not text.strip():
        return SentimentResult()

    tokens = tokenize(text)
    positive, negative = [], []
    total = 0.0
    for token in tokens:
        valence = analyzer.lexicon.get(token)
        if valence is None:
            continue
        total += valence
        if valence > 0:
            positive.append(token)
        elif valence < 0:
            negative.append(token)

    score = int(round(total))
    compound = analyzer.polarity_scores(text)["compound"]
    return SentimentResult(
        score=score,
        comparative=score / len(tokens) if tokens else 0.0,
        positive=positive,
        negative=negative,
        word_count=len(tokens),
        compound=compound,
    )

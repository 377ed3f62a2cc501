import re
from typing import List, Tuple

# first match wins
SENTIMENT_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("frustrated", re.compile(r"frustrated|annoying|annoyed|tired of|fed up|can't believe|ridiculous|stupid|waste", re.I)),
    ("urgent", re.compile(r"urgent|immediately|asap|right now|emergency|critical|important|quickly|hurry|soon", re.I)),
    ("confused", re.compile(r"confused|don't understand|not sure|unclear|what do you mean|how does|not clear|explain", re.I)),
    ("negative", re.compile(r"bad|terrible|awful|useless|hate|dislike|unhappy|disappointed|not working|doesn't work", re.I)),
    ("positive", re.compile(r"great|good|excellent|awesome|love|like|helpful|thanks|thank you|perfect|wonderful", re.I)),
]

# greeting confidence bump per sentiment
CONFIDENCE_ADJUSTMENTS = {"frustrated": 5, "urgent": 10}


def analyze_sentiment(text: str) -> str:
    for label, pattern in SENTIMENT_PATTERNS:
        if pattern.search(text):
            return label
    return "neutral"

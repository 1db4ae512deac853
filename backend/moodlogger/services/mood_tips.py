"""Static copy shown alongside logged moods."""

MOOD_LABELS = {1: "Very Low", 2: "Low", 3: "Neutral", 4: "Good", 5: "Great"}

MOOD_TIPS = {
    1: "Remember: tough times are temporary. Consider reaching out to campus counseling or talking with a trusted friend. You're not alone.",
    2: "It's okay to not be okay. Try a short breathing exercise or take a mindful walk. Small steps can make a difference.",
    3: "You're doing just fine! Sometimes neutral is exactly where we need to be. Keep taking care of yourself.",
    4: "Great to see you're doing well! Keep up the positive momentum with activities you enjoy.",
    5: "Wonderful! Your positive energy is inspiring. Consider sharing your joy with others or noting what's working well for you today.",
}
